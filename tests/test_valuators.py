"""Tests for slot valuators."""
from __future__ import annotations

import pytest

from monocle.templates.valuators import JsonValuator, NumericValuator, TextualValuator


class TestTextualValuator:
    def test_identity(self) -> None:
        valuator = TextualValuator("  raw text ")
        assert valuator.value == "  raw text "
        assert valuator.serialize("new") == "new"


class TestNumericValuator:
    def test_integers_and_floats(self) -> None:
        assert NumericValuator("42").value == 42
        assert isinstance(NumericValuator("42").value, int)
        assert NumericValuator("-7").value == -7
        assert NumericValuator("2.50").value == 2.5
        assert NumericValuator("1e-3").value == 0.001
        assert NumericValuator(" 3 ").value == 3

    def test_serialize(self) -> None:
        valuator = NumericValuator("0")
        assert valuator.serialize(12) == "12"
        assert valuator.serialize(0.1) == "0.1"
        assert valuator.serialize(-2.0) == "-2.0"

    def test_round_trip_is_exact(self) -> None:
        valuator = NumericValuator("0")
        for value in (0, 17, -3, 0.1, 1 / 3, 1e-30, 6.02e23):
            assert valuator.deserialize(valuator.serialize(value)) == value

    def test_booleans_are_rejected(self) -> None:
        with pytest.raises(TypeError):
            NumericValuator("0").serialize(True)

    def test_invalid_text(self) -> None:
        with pytest.raises(ValueError):
            NumericValuator("twelve").value


class TestJsonValuator:
    def test_reads_literals(self) -> None:
        assert JsonValuator('"hi"').value == "hi"
        assert JsonValuator("[1, {\"a\": null}]").value == [1, {"a": None}]
        assert JsonValuator("true").value is True

    def test_serialize_keeps_unicode(self) -> None:
        assert JsonValuator("null").serialize("héllo") == '"héllo"'
        assert JsonValuator("null").serialize({"k": [1, 2]}) == '{"k": [1, 2]}'

    def test_round_trip(self) -> None:
        valuator = JsonValuator("null")
        for value in ("a\"b", 3, 2.5, None, False, [1, "x"], {"n": {"m": []}}):
            assert valuator.deserialize(valuator.serialize(value)) == value

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError):
            JsonValuator("{oops").value
