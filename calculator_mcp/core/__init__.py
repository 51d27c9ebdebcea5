"""Calculator engine, display formatting and the Textual app framework."""

from .base import AppConfig, AppRegistry, AppStatus, BaseTextualApp, register_app
from .display import ERROR_TOKEN, DisplayFormat, format_display
from .engine import CalculatorEngine, CalculatorState, DivisionByZero, Ok, Operator, apply

__all__ = [
    "AppConfig",
    "AppRegistry",
    "AppStatus",
    "BaseTextualApp",
    "register_app",
    "CalculatorEngine",
    "CalculatorState",
    "Operator",
    "Ok",
    "DivisionByZero",
    "apply",
    "DisplayFormat",
    "format_display",
    "ERROR_TOKEN",
]
