"""Formatting of the calculator display for rendering."""

from decimal import Decimal

from pydantic import BaseModel

ERROR_TOKEN = "Error"


class DisplayFormat(BaseModel):
    """How over-long display values are shortened for the screen."""
    max_length: int = 12
    exponent_threshold: int = 999_999_999_999
    exponent_digits: int = 5
    fixed_digits: int = 8


def format_display(value: str, fmt: DisplayFormat | None = None) -> str:
    """Return the text to render for a raw display value.

    Values longer than ``fmt.max_length`` characters switch to exponential
    notation when their magnitude exceeds ``fmt.exponent_threshold`` and to
    fixed-point otherwise. The error token is passed through unchanged.
    """
    fmt = fmt or DisplayFormat()
    if value == ERROR_TOKEN or len(value) <= fmt.max_length:
        return value

    number = Decimal(value)
    if abs(number) > fmt.exponent_threshold:
        return f"{number:.{fmt.exponent_digits}e}"
    return f"{number:.{fmt.fixed_digits}f}"
