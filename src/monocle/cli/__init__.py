"""
Command-line interface for Monocle.
"""

from .app import app

__all__ = ["app"]
