# src/flowshell/core/handlers/config_handler.py
import json
import logging
from typing import List, Optional, Dict, Any

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.managers.config_manager import config_manager
from flowshell.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

config_help_text = """
CONFIGURATION:
  config list                Show the current configuration as JSON.
  config set <key> <value>   Set a config value for the session (e.g., debug.level INFO).
  config reset               Reload the configuration from settings.json.
""".strip()

COMMAND_HIERARCHY: Dict[str, Optional[Dict[str, Any]]] = {
    "list": None,
    "set": None,
    "reset": None,
}

USAGE = """
Usage:
  config list
  config set <key> <value>
  config reset
"""


def _apply_log_level() -> None:
    configure_logger(config_manager.get_nested("debug.level", "WARNING"))


def handle_config(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles the 'config' command for viewing and modifying session configuration."""
    if not args:
        ctx.streams.err.append(USAGE.lstrip("\n"))
        return 1

    command = args[0]

    if command == "list":
        print(json.dumps(config_manager.get_all(), indent=2))
        return 0

    if command == "set":
        if len(args) < 3:
            ctx.streams.err.append("Usage: config set <key> <value>\n")
            return 1
        key_path = args[1]
        value = " ".join(args[2:])

        if value.startswith('"') and value.endswith('"'):
            value = value[1:-1]

        if not config_manager.set_nested(key_path, value):
            ctx.streams.err.append(f"Error: Failed to set config value for key '{key_path}'.\n")
            return 1

        new_value = config_manager.get_nested(key_path)
        if key_path == "debug.level":
            _apply_log_level()
        print(f"Config updated: {key_path} = {new_value} (type: {type(new_value).__name__})")
        return 0

    if command == "reset":
        config_manager.reset()
        _apply_log_level()
        print("Configuration has been reset to the values from settings.json.")
        return 0

    ctx.streams.err.append(f"Unknown command: 'config {command}'.\n{USAGE.lstrip()}")
    return 1
