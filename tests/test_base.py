"""Tests for the app framework: config models, registry and output buffer."""

import pytest

from calculator_mcp import apps
from calculator_mcp.apps.calculator import CalculatorApp
from calculator_mcp.core.base import AppConfig, AppRegistry, AppStatus


def test_app_config_defaults():
    config = AppConfig(name="demo", description="Demo app")
    assert config.version == "1.0.0"
    assert config.tags == []
    assert config.requires_web is False


def test_calculator_is_registered():
    assert AppRegistry.get_app_class("calculator") is CalculatorApp
    assert "calculator" in [config.name for config in apps.get_app_configs()]
    assert AppRegistry.get_app_class("missing") is None


def test_status_before_running():
    app = CalculatorApp()
    app.set_app_id("app_1234")
    status = app.get_status()
    assert isinstance(status, AppStatus)
    assert status.app_id == "app_1234"
    assert status.status == "stopped"
    assert status.error_message is None


def test_output_buffer_is_trimmed():
    app = CalculatorApp()
    for i in range(1001):
        app._log_output(f"line {i}")
    assert len(app.output_buffer) == 500
    assert app.output_buffer[-1] == "line 1000"


@pytest.mark.asyncio
async def test_recent_output():
    app = CalculatorApp()
    for i in range(10):
        app._log_output(f"line {i}")
    recent = await app.get_recent_output(lines=3)
    assert recent["output_lines"] == ["line 7", "line 8", "line 9"]
    assert recent["total_lines"] == 10
