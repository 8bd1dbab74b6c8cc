# src/flowshell/core/discovery.py
import importlib
import logging
from typing import Dict, Any, Tuple

from flowshell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

HANDLERS_PACKAGE = "flowshell.core.handlers"


def discover_handlers() -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, str]]:
    """
    Scans the handler directory, imports every `*_handler.py` module and returns
    three dictionaries:
    1. A map of command names to their handler function (`handle_<name>`).
    2. A map of command names to their hierarchy definition (`COMMAND_HIERARCHY`).
    3. A map of command names to their help text string (`<name>_help_text`).
    """
    discovered_handlers: Dict[str, Any] = {}
    discovered_hierarchies: Dict[str, Any] = {}
    discovered_help_texts: Dict[str, str] = {}

    handlers_dir = PathUtils.get_handlers_dir()
    logger.debug("Scanning for handlers in: '%s'", handlers_dir)

    if not handlers_dir.is_dir():
        logger.warning("Handlers directory not found, skipping: %s", handlers_dir)
        return discovered_handlers, discovered_hierarchies, discovered_help_texts

    for file_path in sorted(handlers_dir.glob("**/*_handler.py")):
        relative_parts = list(file_path.relative_to(handlers_dir).with_suffix("").parts)
        module_name = ".".join([HANDLERS_PACKAGE] + relative_parts)
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error("Failed to load handler module %s: %s", file_path.name, e, exc_info=True)
            continue

        hierarchy = getattr(module, "COMMAND_HIERARCHY", None)

        for attr_name in dir(module):
            if attr_name.startswith("handle_"):
                handler_func = getattr(module, attr_name)
                if callable(handler_func):
                    command_name = attr_name.replace("handle_", "", 1)
                    discovered_handlers[command_name] = handler_func
                    if hierarchy is not None:
                        discovered_hierarchies[command_name] = hierarchy
                    logger.debug("Discovered command '%s'", command_name)

            elif attr_name.endswith("_help_text"):
                help_text_var = getattr(module, attr_name)
                if isinstance(help_text_var, str):
                    command_name = attr_name[: -len("_help_text")]
                    discovered_help_texts[command_name] = help_text_var
                    logger.debug("Discovered help '%s'", command_name)

    return discovered_handlers, discovered_hierarchies, discovered_help_texts
