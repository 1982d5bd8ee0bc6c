"""
Valuators convert between the raw text of a template slot and a typed value.

For every valuator, serialize() followed by deserialize() gives back the
original value.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar, Union


T = TypeVar("T")

Number = Union[int, float]

_INTEGER = re.compile(r"[+-]?\d+")


class Valuator(ABC, Generic[T]):
    """Reads and writes a typed value from/to the raw text of a slot."""

    def __init__(self, raw_text: str):
        self.raw_text = raw_text

    @property
    def value(self) -> T:
        """Current value, deserialized from the raw text."""
        return self.deserialize(self.raw_text)

    @abstractmethod
    def deserialize(self, text: str) -> T:
        """Convert a text into a value."""

    @abstractmethod
    def serialize(self, value: T) -> str:
        """Convert a value into the text to write in the document."""


ValuatorProvider = Callable[[str], Valuator]


class TextualValuator(Valuator[str]):
    """The value is the raw text itself."""

    def deserialize(self, text: str) -> str:
        return text

    def serialize(self, value: str) -> str:
        return value


class NumericValuator(Valuator[Number]):
    """
    Integers and decimal numbers.

    Texts without a fraction or an exponent become ints, others floats.
    Floats are written with repr() so that no precision is lost.
    """

    def deserialize(self, text: str) -> Number:
        text = text.strip()
        if _INTEGER.fullmatch(text):
            return int(text)
        return float(text)

    def serialize(self, value: Number) -> str:
        if isinstance(value, bool):
            raise TypeError("Booleans are not numbers")
        return repr(value)


class JsonValuator(Valuator[Any]):
    """Any JSON literal (strings are written with their quotes)."""

    def deserialize(self, text: str) -> Any:
        return json.loads(text)

    def serialize(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)
