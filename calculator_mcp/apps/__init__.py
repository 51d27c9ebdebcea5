"""Available Textual applications."""

import importlib
import inspect
import logging
from pathlib import Path

from ..core.base import AppConfig, AppRegistry, BaseTextualApp

logger = logging.getLogger(__name__)


def discover_and_register_apps() -> None:
    """Import every module in the apps directory and register its apps."""
    apps_dir = Path(__file__).parent

    for py_file in apps_dir.glob("*.py"):
        if py_file.name.startswith("__"):
            continue

        module_name = py_file.stem
        try:
            module = importlib.import_module(f".{module_name}", package=__name__)
        except ImportError as e:
            logger.warning(f"Skipping app module {module_name}: {e}")
            continue

        for _name, obj in inspect.getmembers(module, inspect.isclass):
            if (issubclass(obj, BaseTextualApp) and
                    obj is not BaseTextualApp and
                    hasattr(obj, 'APP_CONFIG')):
                AppRegistry.register(obj)


discover_and_register_apps()


def get_app_configs() -> list[AppConfig]:
    """Get all registered application configurations."""
    return AppRegistry.list_apps()


__all__ = ["discover_and_register_apps", "get_app_configs"]
