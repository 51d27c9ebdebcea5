"""MCP Server for the calculator

Exposes headless calculator sessions and the registered Textual apps
through an MCP interface.
"""

import logging
import sys
import uuid
from datetime import datetime
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

# Import apps module to trigger registration
from calculator_mcp import apps  # noqa: F401  # Required for app auto-registration
from calculator_mcp.core.base import AppRegistry
from calculator_mcp.core.engine import CalculatorEngine

# Configure logging to stderr for MCP servers
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger("calculator_mcp.server")

SERVER_NAME = "Calculator MCP Server"
SERVER_VERSION = "0.1.0"


class CalculatorSession(BaseModel):
    """Bookkeeping for one headless calculator."""
    calc_id: str
    created_at: str
    keys_pressed: int = 0


def describe_engine(engine: CalculatorEngine) -> dict[str, Any]:
    """Serializable view of an engine's state."""
    state = engine.state
    return {
        "display": state.display,
        "formatted_display": engine.formatted_display,
        "previous_value": str(state.previous_value) if state.previous_value is not None else None,
        "operator": state.operator.value if state.operator else None,
        "waiting_for_operand": state.waiting_for_operand,
        "error": state.error,
    }


class CalculatorSessionManager:
    """Manages headless calculator engines for MCP clients."""

    def __init__(self):
        self.engines: dict[str, CalculatorEngine] = {}
        self.sessions: dict[str, CalculatorSession] = {}

    def generate_calc_id(self) -> str:
        return f"calc_{uuid.uuid4().hex[:8]}"

    def create(self) -> str:
        calc_id = self.generate_calc_id()
        self.engines[calc_id] = CalculatorEngine()
        self.sessions[calc_id] = CalculatorSession(
            calc_id=calc_id,
            created_at=datetime.now().isoformat()
        )
        logger.info(f"Created calculator {calc_id}")
        return calc_id

    def get(self, calc_id: str) -> CalculatorEngine:
        """Look up an engine.

        Raises:
            KeyError: if no calculator has this id
        """
        if calc_id not in self.engines:
            raise KeyError(f"Calculator {calc_id} not found")
        return self.engines[calc_id]

    def press(self, calc_id: str, keys: str) -> CalculatorEngine:
        """Apply a key string to a calculator.

        Keys are validated before any is applied, so a bad key string
        leaves the calculator untouched.
        """
        engine = self.get(calc_id)
        CalculatorEngine().press_sequence(keys)
        engine.press_sequence(keys)
        self.sessions[calc_id].keys_pressed += sum(1 for key in keys if not key.isspace())
        return engine

    def close(self, calc_id: str) -> bool:
        if calc_id not in self.engines:
            logger.warning(f"Calculator {calc_id} not found")
            return False
        del self.engines[calc_id]
        del self.sessions[calc_id]
        logger.info(f"Closed calculator {calc_id}")
        return True

    def list_sessions(self) -> list[CalculatorSession]:
        return list(self.sessions.values())

    def close_all(self) -> int:
        count = len(self.engines)
        self.engines.clear()
        self.sessions.clear()
        return count


# Initialize MCP server and session manager
mcp = FastMCP(SERVER_NAME)
session_manager = CalculatorSessionManager()


def _not_found(calc_id: str) -> dict[str, Any]:
    return {
        "status": "error",
        "error": f"Calculator {calc_id} not found"
    }


@mcp.tool()
def list_apps() -> list[dict[str, Any]]:
    """List all available Textual applications.

    Returns:
        List of application configurations with metadata.
    """
    return [config.model_dump() for config in AppRegistry.list_apps()]


@mcp.tool()
def get_app_info(app_name: str) -> dict[str, Any]:
    """Get detailed information about an application.

    Args:
        app_name: Name of the application

    Returns:
        Application configuration and key bindings.
    """
    app_class = AppRegistry.get_app_class(app_name)
    if not app_class:
        return {
            "status": "error",
            "error": f"Unknown application: {app_name}"
        }

    return {
        "status": "success",
        "config": app_class.get_config().model_dump(),
        "bindings": [
            {"key": key, "action": action, "description": description}
            for key, action, description in app_class.BINDINGS
        ]
    }


@mcp.tool()
def create_calculator() -> dict[str, Any]:
    """Create a headless calculator.

    Returns:
        The new calculator's id and initial state.
    """
    calc_id = session_manager.create()
    return {
        "status": "success",
        "calc_id": calc_id,
        "state": describe_engine(session_manager.get(calc_id))
    }


@mcp.tool()
def press_keys(calc_id: str, keys: str) -> dict[str, Any]:
    """Press calculator keys in order.

    Args:
        calc_id: ID of the calculator
        keys: Keys to press, one character per key. Digits, '.', '+', '-',
            '×' or '*', '÷' or '/', '=', '%', 'C' (clear) and '⌫' (backspace).
            ',' is accepted as a decimal point.
            Whitespace is ignored.

    Returns:
        The calculator state after the last key.
    """
    try:
        engine = session_manager.press(calc_id, keys)
    except KeyError:
        return _not_found(calc_id)
    except ValueError as e:
        return {
            "status": "error",
            "error": str(e)
        }

    return {
        "status": "success",
        "calc_id": calc_id,
        "keys": keys,
        "state": describe_engine(engine),
        "timestamp": datetime.now().isoformat()
    }


@mcp.tool()
def get_calculator_state(calc_id: str) -> dict[str, Any]:
    """Get the current state of a calculator."""
    try:
        engine = session_manager.get(calc_id)
    except KeyError:
        return _not_found(calc_id)

    return {
        "status": "success",
        "calc_id": calc_id,
        "session": session_manager.sessions[calc_id].model_dump(),
        "state": describe_engine(engine)
    }


@mcp.tool()
def clear_calculator(calc_id: str) -> dict[str, Any]:
    """Reset a calculator to its initial state (AC)."""
    try:
        engine = session_manager.get(calc_id)
    except KeyError:
        return _not_found(calc_id)

    engine.clear()
    return {
        "status": "success",
        "calc_id": calc_id,
        "state": describe_engine(engine)
    }


@mcp.tool()
def close_calculator(calc_id: str) -> dict[str, Any]:
    """Discard a calculator."""
    if not session_manager.close(calc_id):
        return _not_found(calc_id)
    return {
        "status": "success",
        "calc_id": calc_id,
        "message": f"Calculator {calc_id} closed"
    }


@mcp.tool()
def list_calculators() -> dict[str, Any]:
    """List all open calculators with their displays."""
    calculators = []
    for session in session_manager.list_sessions():
        calculators.append({
            **session.model_dump(),
            "display": session_manager.engines[session.calc_id].formatted_display
        })
    return {
        "status": "success",
        "calculators": calculators,
        "count": len(calculators)
    }


@mcp.tool()
def evaluate_keys(keys: str) -> dict[str, Any]:
    """Evaluate a key sequence on a fresh calculator, e.g. '7+3='.

    Args:
        keys: Keys to press, in the same format as press_keys

    Returns:
        The resulting display and state.
    """
    try:
        engine = CalculatorEngine().press_sequence(keys)
    except ValueError as e:
        return {
            "status": "error",
            "error": str(e)
        }

    return {
        "status": "success",
        "keys": keys,
        "result": engine.formatted_display,
        "state": describe_engine(engine)
    }


@mcp.tool()
def get_server_info() -> dict[str, Any]:
    """Get information about the server and its open calculators."""
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "available_apps": [config.name for config in AppRegistry.list_apps()],
        "open_calculators": len(session_manager.engines),
        "timestamp": datetime.now().isoformat()
    }


def main():
    """Main entry point for the MCP server."""
    try:
        logger.info(f"Starting {SERVER_NAME} with {len(AppRegistry.list_apps())} applications")
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
    finally:
        closed = session_manager.close_all()
        logger.info(f"Cleanup completed, closed {closed} calculators")


if __name__ == "__main__":
    main()
