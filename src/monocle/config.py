"""
Configuration management for Monocle.

Handles loading and managing configuration from files and environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)


def _default_extension_languages() -> Dict[str, str]:
    return {
        ".json": "json",
        ".css": "css",
        ".py": "python",
        ".math": "math",
        ".txt": "plaintext",
    }


@dataclass
class MonocleConfig:
    """Main configuration for Monocle."""

    # Language used when neither --language nor the file suffix decide
    default_language: str = "plaintext"

    log_level: str = "WARNING"

    # Indentation of inserted lines (None: copy the surrounding lines)
    indentation: Optional[str] = None

    # Maximum number of fragments listed by the CLI
    max_fragments: int = 50

    # File suffix -> language id, only used by the CLI
    extension_languages: Dict[str, str] = field(default_factory=_default_extension_languages)

    def language_id_for_path(self, path: Path) -> str:
        return self.extension_languages.get(path.suffix.lower(), self.default_language)


class ConfigManager:
    """Manages Monocle configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.monocle'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[MonocleConfig] = None

    def load_config(self) -> MonocleConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = MonocleConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a mapping")
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        default_language = os.getenv('MONOCLE_DEFAULT_LANGUAGE')
        if default_language:
            env_config['default_language'] = default_language

        log_level = os.getenv('MONOCLE_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level.upper()

        indentation = os.getenv('MONOCLE_INDENTATION')
        if indentation:
            env_config['indentation'] = indentation

        max_fragments = os.getenv('MONOCLE_MAX_FRAGMENTS')
        if max_fragments:
            try:
                env_config['max_fragments'] = int(max_fragments)
            except ValueError:
                logger.warning(f"Ignoring MONOCLE_MAX_FRAGMENTS={max_fragments!r}: not an integer")

        return env_config

    def _merge_configs(self, base: MonocleConfig, override: Dict[str, Any]) -> MonocleConfig:
        """Merge a configuration dictionary into a configuration."""
        if 'default_language' in override:
            base.default_language = str(override['default_language'])

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()

        if 'indentation' in override:
            indentation = override['indentation']
            base.indentation = None if indentation is None else str(indentation)

        if 'max_fragments' in override:
            max_fragments = override['max_fragments']
            try:
                base.max_fragments = int(max_fragments)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring max_fragments={max_fragments!r}: not an integer")

        # Extension table is merged, not replaced
        if 'extension_languages' in override:
            base.extension_languages.update(override['extension_languages'])

        return base

    def save_config(self, config: MonocleConfig) -> None:
        """Save configuration to file."""
        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'default_language': config.default_language,
            'log_level': config.log_level,
            'indentation': config.indentation,
            'max_fragments': config.max_fragments,
            'extension_languages': config.extension_languages,
        }

        try:
            with open(self.config_file, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config file {self.config_file}: {e}")

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        self.save_config(MonocleConfig())
        logger.info(f"Created default configuration at {self.config_file}")

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'default_language': config.default_language,
            'log_level': config.log_level,
            'indentation': config.indentation,
            'max_fragments': config.max_fragments,
            'extensions': sorted(config.extension_languages),
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> MonocleConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
