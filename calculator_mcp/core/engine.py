"""
Calculator engine: the input state machine behind the calculator app.

Button presses are applied one at a time and evaluated left-to-right as
operators are pressed. There is no precedence and no parentheses.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal, Overflow, localcontext
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .display import ERROR_TOKEN, DisplayFormat, format_display

logger = logging.getLogger(__name__)

INITIAL_DISPLAY = "0"


class Operator(str, Enum):
    """Binary operators available on the keypad."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @classmethod
    def parse(cls, symbol: str) -> "Operator":
        """Map a keypad symbol or keyboard alias to an operator."""
        try:
            return _OPERATOR_ALIASES[symbol]
        except KeyError:
            raise ValueError(f"Unknown operator: {symbol!r}") from None


_OPERATOR_ALIASES: dict[str, Operator] = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "×": Operator.MULTIPLY,
    "*": Operator.MULTIPLY,
    "x": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
    "/": Operator.DIVIDE,
}


class Ok(BaseModel):
    """Successful result of applying an operator."""
    model_config = ConfigDict(frozen=True)

    value: Decimal


class DivisionByZero(BaseModel):
    """Division with a zero divisor was requested."""
    model_config = ConfigDict(frozen=True)

    dividend: Decimal


class OutOfRange(BaseModel):
    """The result's magnitude is beyond what the calculator represents."""
    model_config = ConfigDict(frozen=True)

    operator: Operator


ApplyResult = Ok | DivisionByZero | OutOfRange

# Results are limited to roughly the range of a double
MAX_EXPONENT = 308


def apply(op: Operator, a: Decimal, b: Decimal) -> ApplyResult:
    """Apply ``op`` to ``a`` and ``b``.

    Failures are returned, not raised: a zero divisor gives
    :class:`DivisionByZero` and a result too large for ``MAX_EXPONENT``
    gives :class:`OutOfRange`. Results too small for it round to zero.
    """
    if op is Operator.DIVIDE and b == 0:
        return DivisionByZero(dividend=a)

    with localcontext() as ctx:
        ctx.Emax = MAX_EXPONENT
        ctx.Emin = -MAX_EXPONENT
        ctx.traps[Overflow] = False
        if op is Operator.ADD:
            value = a + b
        elif op is Operator.SUBTRACT:
            value = a - b
        elif op is Operator.MULTIPLY:
            value = a * b
        else:
            value = a / b

    if value.is_infinite():
        return OutOfRange(operator=op)
    return Ok(value=value)


def to_display_string(value: Decimal) -> str:
    """Render a number as a plain decimal string (``10``, ``0.5``, ``-3.25``)."""
    if value == 0:
        # Also covers Decimal("-0")
        return "0"
    return format(value.normalize(), "f")


def parse_display(display: str) -> Decimal:
    """Read the numeric value of a display string such as ``"12."`` or ``"0.5"``."""
    return Decimal(display)


class CalculatorState(BaseModel):
    """Everything the calculator remembers between button presses."""
    display: str = INITIAL_DISPLAY
    previous_value: Decimal | None = None
    operator: Operator | None = None
    waiting_for_operand: bool = False
    error: bool = False


class CalculatorEngine:
    """Owns a :class:`CalculatorState` and mutates it one button at a time.

    Every operation is total: any state accepts any button. Division by zero
    and out-of-range results put the engine into the error state instead of
    raising.
    """

    def __init__(self, display_format: DisplayFormat | None = None):
        self._state = CalculatorState()
        self.display_format = display_format or DisplayFormat()

    @property
    def state(self) -> CalculatorState:
        """Snapshot of the current state; mutating it does not affect the engine."""
        return self._state.model_copy()

    @property
    def display(self) -> str:
        return self._state.display

    @property
    def formatted_display(self) -> str:
        return format_display(self._state.display, self.display_format)

    @property
    def error(self) -> bool:
        return self._state.error

    # Button operations

    def input_digit(self, digit: str) -> None:
        """Type a single digit ``'0'``..``'9'``."""
        if len(digit) != 1 or digit not in "0123456789":
            raise ValueError(f"Not a digit: {digit!r}")

        state = self._state
        if state.error:
            state.error = False
            state.waiting_for_operand = False
            state.display = digit
        elif state.waiting_for_operand:
            state.display = digit
            state.waiting_for_operand = False
        elif state.display == INITIAL_DISPLAY:
            state.display = digit
        else:
            state.display += digit

    def input_decimal_point(self) -> None:
        """Type ``.``; ignored if the current number already has one."""
        state = self._state
        if state.error:
            state.error = False
            state.waiting_for_operand = False
            state.display = "0."
        elif state.waiting_for_operand:
            state.display = "0."
            state.waiting_for_operand = False
        elif "." not in state.display:
            state.display += "."

    def clear(self) -> None:
        """Reset everything to the initial state (AC)."""
        self._state = CalculatorState()
        logger.debug("Calculator cleared")

    all_clear = clear

    def backspace(self) -> None:
        """Delete the last typed character; clears the error state."""
        state = self._state
        if state.error:
            self.clear()
        else:
            remaining = state.display[:-1]
            # A lone sign is not a number
            state.display = remaining if remaining not in ("", "-") else INITIAL_DISPLAY

    def percentage(self) -> None:
        """Divide the displayed number by 100."""
        state = self._state
        if state.error:
            return
        result = apply(Operator.DIVIDE, parse_display(state.display), Decimal(100))
        if not isinstance(result, Ok):
            self._enter_error(result)
            return
        state.display = to_display_string(result.value)

    def input_operator(self, op: Operator | str) -> None:
        """Press ``+``, ``-``, ``×`` or ``÷``.

        If an operand was typed since the last operator, the pending
        operation is computed first and its result shown.
        """
        op = Operator.parse(op) if not isinstance(op, Operator) else op
        state = self._state

        if state.error:
            state.error = False
            state.display = INITIAL_DISPLAY

        value = parse_display(state.display)

        if state.previous_value is None:
            state.previous_value = value
        elif state.operator is not None and not state.waiting_for_operand:
            result = apply(state.operator, state.previous_value, value)
            if not isinstance(result, Ok):
                self._enter_error(result)
                return
            state.display = to_display_string(result.value)
            state.previous_value = result.value

        state.waiting_for_operand = True
        state.operator = op

    def equals(self) -> None:
        """Press ``=``: compute the pending operation, if any."""
        state = self._state
        if state.error:
            return
        if state.previous_value is None or state.operator is None:
            return

        result = apply(state.operator, state.previous_value, parse_display(state.display))
        if not isinstance(result, Ok):
            self._enter_error(result)
            return

        state.display = to_display_string(result.value)
        state.previous_value = result.value
        state.operator = None
        state.waiting_for_operand = True

    def _enter_error(self, result: DivisionByZero | OutOfRange) -> None:
        if isinstance(result, DivisionByZero):
            logger.debug("Division by zero (%s ÷ 0), entering error state", result.dividend)
        else:
            logger.debug("Result of %s out of range, entering error state", result.operator.value)
        self._state = CalculatorState(display=ERROR_TOKEN, error=True)

    # Key dispatch

    def press(self, key: str) -> "CalculatorEngine":
        """Apply one button label or keyboard key.

        Raises:
            ValueError: if ``key`` does not name a calculator button.
        """
        if len(key) == 1 and key.isdecimal():
            self.input_digit(key)
        elif key in _OPERATOR_ALIASES:
            self.input_operator(_OPERATOR_ALIASES[key])
        else:
            action = _KEY_ACTIONS.get(key) or _KEY_ACTIONS.get(key.lower())
            if action is None:
                raise ValueError(f"Unknown calculator key: {key!r}")
            getattr(self, action)()
        return self

    def press_sequence(self, keys: str | Iterable[str]) -> "CalculatorEngine":
        """Apply many keys; a string is read one character per key."""
        for key in keys:
            if isinstance(keys, str) and key.isspace():
                continue
            self.press(key)
        return self


_KEY_ACTIONS: dict[str, str] = {
    ".": "input_decimal_point",
    ",": "input_decimal_point",
    "=": "equals",
    "enter": "equals",
    "%": "percentage",
    "ac": "clear",
    "c": "clear",
    "escape": "clear",
    "⌫": "backspace",
    "backspace": "backspace",
}
