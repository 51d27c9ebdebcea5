"""Base classes and utilities for Textual applications."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from textual.app import App

OUTPUT_BUFFER_LIMIT = 1000
OUTPUT_BUFFER_KEEP = 500


class AppConfig(BaseModel):
    """Configuration for a Textual application."""
    name: str
    description: str
    version: str = "1.0.0"
    author: str = "Calculator-MCP"
    tags: list[str] = []
    requires_web: bool = False
    requires_sudo: bool = False


class AppStatus(BaseModel):
    """Status information for an application."""
    app_id: str
    name: str
    pid: int | None = None
    status: str = "stopped"  # stopped, starting, running, error
    start_time: str | None = None
    error_message: str | None = None


class BaseTextualApp(App):
    """Base class for the Textual applications served by this package."""

    APP_CONFIG: AppConfig
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("ctrl+c", "quit", "Quit"),
    ]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.app_id: str | None = None
        self.output_buffer: list[str] = []
        self._start_time = datetime.now().isoformat()

    @classmethod
    def get_config(cls) -> AppConfig:
        """Get application configuration."""
        return cls.APP_CONFIG

    @classmethod
    def get_description(cls) -> str:
        return cls.APP_CONFIG.description

    def get_status(self) -> AppStatus:
        """Get current application status."""
        return AppStatus(
            app_id=self.app_id or "unknown",
            name=self.APP_CONFIG.name,
            status="running" if self.is_running else "stopped",
            start_time=self._start_time,
        )

    def set_app_id(self, app_id: str) -> None:
        self.app_id = app_id

    async def get_app_specific_state(self) -> dict[str, Any]:
        """App-specific state for AI interaction. Override in subclasses."""
        return {}

    async def get_screen_state(self) -> dict[str, Any]:
        """Get the current screen state for AI interaction.

        Returns:
            Dictionary with app metadata, recent output and app-specific state
        """
        try:
            screen_data = {
                "app_name": self.APP_CONFIG.name,
                "title": self.title,
                "focused_widget": str(self.focused) if self.focused else None,
                "available_actions": [binding[1] for binding in self.BINDINGS],
                "output_buffer": self.output_buffer[-20:],
                "timestamp": datetime.now().isoformat()
            }
            screen_data.update(await self.get_app_specific_state())
            return screen_data
        except Exception as e:
            return {
                "error": f"Failed to get screen state: {e}",
                "app_name": self.APP_CONFIG.name,
                "timestamp": datetime.now().isoformat()
            }

    async def receive_input(self, input_type: str, input_data: str) -> dict[str, Any]:
        """Receive and process input from AI or external sources.

        Args:
            input_type: Type of input ('key', 'text', 'action')
            input_data: The input data to process

        Returns:
            Result of processing the input
        """
        try:
            result: dict[str, Any] = {"input_type": input_type, "input_data": input_data, "processed": True}

            if input_type == "key":
                await self._handle_key_input(input_data)
                result["action"] = f"Key pressed: {input_data}"
            elif input_type == "text":
                await self._handle_text_input(input_data)
                result["action"] = f"Text entered: {input_data}"
            elif input_type == "action":
                result["action_result"] = await self._handle_action_input(input_data)
                result["action"] = f"Action executed: {input_data}"
            else:
                result["processed"] = False
                result["error"] = f"Unknown input type: {input_type}"

            self._log_interaction(input_type, input_data, result)
            return result

        except Exception as e:
            return {
                "input_type": input_type,
                "input_data": input_data,
                "processed": False,
                "error": f"Failed to process input: {e}"
            }

    async def get_recent_output(self, lines: int = 50) -> dict[str, Any]:
        """Get recent lines from the output buffer."""
        recent_output = self.output_buffer[-lines:] if lines > 0 else []
        return {
            "output_lines": recent_output,
            "total_lines": len(self.output_buffer),
            "lines_returned": len(recent_output),
            "app_name": self.APP_CONFIG.name,
            "timestamp": datetime.now().isoformat()
        }

    # Input hooks, implemented by subclasses
    async def _handle_key_input(self, key_data: str) -> None:
        self._log_output(f"Key pressed: {key_data}")

    async def _handle_text_input(self, text_data: str) -> None:
        self._log_output(f"Text entered: {text_data}")

    async def _handle_action_input(self, action_data: str) -> str:
        self._log_output(f"Action executed: {action_data}")
        return f"Action '{action_data}' processed"

    def _log_interaction(self, input_type: str, input_data: str, result: dict) -> None:
        """Log an interaction for debugging and session tracking."""
        log_entry = f"[{datetime.now().isoformat()}] {input_type}: {input_data} -> {result.get('action', 'unknown')}"
        self._log_output(log_entry)

    def _log_output(self, message: str) -> None:
        """Add message to output buffer."""
        self.output_buffer.append(message)
        # Keep buffer size manageable
        if len(self.output_buffer) > OUTPUT_BUFFER_LIMIT:
            self.output_buffer = self.output_buffer[-OUTPUT_BUFFER_KEEP:]


class AppRegistry:
    """Registry of available applications."""

    _apps: dict[str, type[BaseTextualApp]] = {}

    @classmethod
    def register(cls, app_class: type[BaseTextualApp]) -> None:
        """Register an application class under its configured name."""
        config = app_class.get_config()
        cls._apps[config.name] = app_class

    @classmethod
    def get_app_class(cls, name: str) -> type[BaseTextualApp] | None:
        return cls._apps.get(name)

    @classmethod
    def list_apps(cls) -> list[AppConfig]:
        """List all registered applications."""
        return [app_class.get_config() for app_class in cls._apps.values()]


def register_app(app_class: type[BaseTextualApp]) -> type[BaseTextualApp]:
    """Decorator to register an application."""
    AppRegistry.register(app_class)
    return app_class
