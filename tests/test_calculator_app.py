"""
Tests for CalculatorApp

Drives the Textual app through the test pilot and checks that the
display follows the engine.
"""

import pytest
from textual.widgets import Button, Digits

from calculator_mcp.apps.calculator import CalculatorApp

SIZE = (60, 40)


async def press_buttons(app, pilot, *button_ids: str) -> None:
    for button_id in button_ids:
        app.query_one(f"#{button_id}", Button).press()
        await pilot.pause()


def shown(app) -> str:
    return app.query_one("#numbers", Digits).value


class TestCalculatorApp:

    @pytest.mark.asyncio
    async def test_initial_display(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE):
            assert shown(app) == "0"

    @pytest.mark.asyncio
    async def test_buttons_compute_result(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await press_buttons(app, pilot, "number-7", "plus", "number-3", "equals")
            assert app.engine.display == "10"
            assert shown(app) == "10"

    @pytest.mark.asyncio
    async def test_percent_point_and_backspace_buttons(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await press_buttons(app, pilot, "number-5", "number-0", "percent")
            assert shown(app) == "0.5"

            await press_buttons(app, pilot, "ac", "number-1", "point", "point", "number-5")
            assert shown(app) == "1.5"

            await press_buttons(app, pilot, "backspace", "backspace")
            assert shown(app) == "1"

    @pytest.mark.asyncio
    async def test_division_by_zero_marks_display(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await press_buttons(app, pilot, "number-5", "divide", "number-0", "equals")
            display = app.query_one("#numbers", Digits)
            assert display.value == "Error"
            assert display.has_class("error")

            await press_buttons(app, pilot, "number-4")
            assert display.value == "4"
            assert not display.has_class("error")

    @pytest.mark.asyncio
    async def test_long_results_are_formatted(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await press_buttons(app, pilot, "number-1", "divide", "number-3", "equals")
            assert shown(app) == "0.33333333"

    @pytest.mark.asyncio
    async def test_keyboard_input(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await pilot.press("9", "*", "*", "3", "=")
            await pilot.pause()
            assert shown(app) == "27"

            await pilot.press("c")
            await pilot.pause()
            assert shown(app) == "0"

    @pytest.mark.asyncio
    async def test_receive_text_input(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            result = await app.receive_input("text", "12×3=")
            await pilot.pause()
            assert result["processed"] is True
            assert shown(app) == "36"
            assert app.output_buffer

    @pytest.mark.asyncio
    async def test_receive_action_input(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE) as pilot:
            await app.receive_input("action", "number-8")
            result = await app.receive_input("action", "percent")
            await pilot.pause()
            assert result["action_result"] == "0.08"
            assert shown(app) == "0.08"

    @pytest.mark.asyncio
    async def test_receive_bad_input(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE):
            bad_key = await app.receive_input("key", "?")
            assert bad_key["processed"] is False
            assert "error" in bad_key

            bad_type = await app.receive_input("mouse", "1")
            assert bad_type["processed"] is False

            bad_button = await app.receive_input("action", "sqrt")
            assert bad_button["processed"] is False

    @pytest.mark.asyncio
    async def test_screen_state_includes_calculator_state(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE):
            await app.receive_input("text", "4+")
            state = await app.get_screen_state()
            assert state["app_name"] == "calculator"
            assert state["display"] == "4"
            assert state["pending_operator"] == "+"
            assert state["waiting_for_operand"] is True
            assert state["error"] is False

    @pytest.mark.asyncio
    async def test_status_reports_error(self):
        app = CalculatorApp()
        async with app.run_test(size=SIZE):
            await app.receive_input("text", "1÷0=")
            status = app.get_status()
            assert status.name == "calculator"
            assert status.error_message == "Division by zero"
