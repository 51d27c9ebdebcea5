"""
Calculator app: a display and a button grid driving the calculator engine.

Every button press maps to exactly one engine operation; the display is
re-rendered from the engine after each press.
"""

from typing import Any

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.reactive import var
from textual.widgets import Button, Digits, Footer, Header

from calculator_mcp.core.base import AppConfig, AppStatus, BaseTextualApp, register_app
from calculator_mcp.core.display import DisplayFormat
from calculator_mcp.core.engine import CalculatorEngine, Operator

# Button id -> engine key (digit buttons are "number-<d>")
BUTTON_KEYS = {
    "ac": "AC",
    "backspace": "⌫",
    "percent": "%",
    "divide": Operator.DIVIDE.value,
    "multiply": Operator.MULTIPLY.value,
    "minus": Operator.SUBTRACT.value,
    "plus": Operator.ADD.value,
    "point": ".",
    "equals": "=",
}

# Keyboard -> button id
NAMED_KEY_BUTTONS = {
    "enter": "equals",
    "backspace": "backspace",
    "escape": "ac",
}
CHARACTER_BUTTONS = {
    "+": "plus",
    "-": "minus",
    "*": "multiply",
    "x": "multiply",
    "×": "multiply",
    "/": "divide",
    "÷": "divide",
    "=": "equals",
    ".": "point",
    "%": "percent",
    "c": "ac",
}


@register_app
class CalculatorApp(BaseTextualApp):
    """Four-function calculator evaluating left-to-right."""

    APP_CONFIG = AppConfig(
        name="calculator",
        description="Four-function calculator with percent, backspace and clear",
        version="1.0.0",
        tags=["calculator", "math", "utility"],
        requires_web=False,
        requires_sudo=False
    )

    TITLE = "Calculator"
    # Keep enter/space for the keypad instead of a focused button
    AUTO_FOCUS = None

    CSS = """
    Screen {
        overflow: auto;
    }

    #calculator {
        layout: grid;
        grid-size: 4;
        grid-gutter: 1 2;
        grid-columns: 1fr;
        grid-rows: 2fr 1fr 1fr 1fr 1fr 1fr;
        margin: 1 2;
        min-height: 25;
        min-width: 26;
        height: 100%;
    }

    Button {
        width: 100%;
        height: 100%;
    }

    #numbers {
        column-span: 4;
        padding: 0 1;
        height: 100%;
        background: $panel;
        color: $text;
        content-align: center middle;
        text-align: right;
    }

    #numbers.error {
        color: $error;
    }

    #number-0 {
        column-span: 2;
    }
    """

    numbers = var("0")
    is_error = var(False)

    def __init__(self, display_format: DisplayFormat | None = None, **kwargs):
        super().__init__(**kwargs)
        self.engine = CalculatorEngine(display_format)

    def watch_numbers(self, value: str) -> None:
        """Update the display when the rendered value changes."""
        try:
            self.query_one("#numbers", Digits).update(value)
        except NoMatches:
            # Widget not yet mounted
            pass

    def watch_is_error(self, is_error: bool) -> None:
        try:
            self.query_one("#numbers", Digits).set_class(is_error, "error")
        except NoMatches:
            pass

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="calculator"):
            yield Digits(self.numbers, id="numbers")
            yield Button("AC", id="ac", variant="primary")
            yield Button("⌫", id="backspace", variant="primary")
            yield Button("%", id="percent", variant="primary")
            yield Button("÷", id="divide", variant="warning")
            yield Button("7", id="number-7", classes="number")
            yield Button("8", id="number-8", classes="number")
            yield Button("9", id="number-9", classes="number")
            yield Button("×", id="multiply", variant="warning")
            yield Button("4", id="number-4", classes="number")
            yield Button("5", id="number-5", classes="number")
            yield Button("6", id="number-6", classes="number")
            yield Button("-", id="minus", variant="warning")
            yield Button("1", id="number-1", classes="number")
            yield Button("2", id="number-2", classes="number")
            yield Button("3", id="number-3", classes="number")
            yield Button("+", id="plus", variant="warning")
            yield Button("0", id="number-0", classes="number")
            yield Button(".", id="point")
            yield Button("=", id="equals", variant="success")

        yield Footer()

    def _refresh_display(self) -> None:
        self.numbers = self.engine.formatted_display
        self.is_error = self.engine.error

    def on_key(self, event: events.Key) -> None:
        """Called when the user presses a key."""
        def press(button_id: str) -> None:
            """Press a button, should it exist."""
            try:
                self.query_one(f"#{button_id}", Button).press()
            except NoMatches:
                pass

        if event.key in NAMED_KEY_BUTTONS:
            press(NAMED_KEY_BUTTONS[event.key])
            return

        character = event.character
        if not character:
            return
        if character in "0123456789":
            press(f"number-{character}")
        elif character in CHARACTER_BUTTONS:
            press(CHARACTER_BUTTONS[character])

    @on(Button.Pressed, ".number")
    def number_pressed(self, event: Button.Pressed) -> None:
        """Pressed a digit."""
        assert event.button.id is not None
        self.engine.input_digit(event.button.id.partition("-")[-1])
        self._refresh_display()

    @on(Button.Pressed, "#point")
    def pressed_point(self) -> None:
        self.engine.input_decimal_point()
        self._refresh_display()

    @on(Button.Pressed, "#ac")
    def pressed_ac(self) -> None:
        self.engine.clear()
        self._refresh_display()

    @on(Button.Pressed, "#backspace")
    def pressed_backspace(self) -> None:
        self.engine.backspace()
        self._refresh_display()

    @on(Button.Pressed, "#percent")
    def pressed_percent(self) -> None:
        self.engine.percentage()
        self._refresh_display()

    @on(Button.Pressed, "#plus,#minus,#divide,#multiply")
    def pressed_op(self, event: Button.Pressed) -> None:
        """Pressed one of the arithmetic operations."""
        assert event.button.id is not None
        self.engine.input_operator(BUTTON_KEYS[event.button.id])
        self._refresh_display()

    @on(Button.Pressed, "#equals")
    def pressed_equals(self) -> None:
        self.engine.equals()
        self._refresh_display()

    # AI / MCP input

    async def _handle_key_input(self, key_data: str) -> None:
        self.engine.press(key_data)
        self._refresh_display()
        self._log_output(f"Key pressed: {key_data} -> {self.engine.display}")

    async def _handle_text_input(self, text_data: str) -> None:
        self.engine.press_sequence(text_data)
        self._refresh_display()
        self._log_output(f"Text entered: {text_data} -> {self.engine.display}")

    async def _handle_action_input(self, action_data: str) -> str:
        """Press a button by id, e.g. ``number-7`` or ``equals``."""
        if action_data.startswith("number-"):
            key = action_data.partition("-")[-1]
        elif action_data in BUTTON_KEYS:
            key = BUTTON_KEYS[action_data]
        else:
            raise ValueError(f"Unknown button: {action_data}")
        self.engine.press(key)
        self._refresh_display()
        self._log_output(f"Button pressed: {action_data} -> {self.engine.display}")
        return self.engine.formatted_display

    async def get_app_specific_state(self) -> dict[str, Any]:
        state = self.engine.state
        return {
            "display": state.display,
            "formatted_display": self.engine.formatted_display,
            "pending_operator": state.operator.value if state.operator else None,
            "waiting_for_operand": state.waiting_for_operand,
            "error": state.error,
        }

    def get_status(self) -> AppStatus:
        status = super().get_status()
        if self.engine.error:
            status.error_message = "Division by zero"
        return status


if __name__ == "__main__":
    app = CalculatorApp()
    app.run()
