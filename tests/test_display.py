"""Tests for display formatting."""

import pytest

from calculator_mcp.core.display import DisplayFormat, format_display
from calculator_mcp.core.engine import CalculatorEngine


@pytest.mark.parametrize("value", ["0", "0.", "10", "-2", "123456789012", "Error"])
def test_short_values_pass_through(value):
    assert format_display(value) == value


def test_large_values_use_exponential_notation():
    assert format_display("1234567890123") == "1.23457e+12"
    assert format_display("-1000000000000000") == "-1.00000e+15"


def test_long_small_values_use_fixed_point():
    assert format_display("0.3333333333333") == "0.33333333"
    assert format_display("123456789.123456") == "123456789.12345600"


def test_custom_format():
    fmt = DisplayFormat(max_length=4, fixed_digits=2)
    assert format_display("12.346", fmt) == "12.35"
    assert format_display("1234", fmt) == "1234"


def test_engine_uses_its_display_format():
    engine = CalculatorEngine(DisplayFormat(max_length=3, exponent_threshold=999, exponent_digits=1))
    engine.press_sequence("12345")
    assert engine.display == "12345"
    assert engine.formatted_display == "1.2e+4"
