# src/flowshell/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from flowshell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


class ConfigManager:
    """
    A singleton holding the shell's settings.

    Settings are read from `settings.json` in the package root and may be
    changed in memory for the rest of the session (`config set`).
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.reset()
        logger.debug("ConfigManager initialized.")

    @staticmethod
    def _settings_path() -> Path:
        return PathUtils.get_shell_package_root() / SETTINGS_FILE

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value, e.g. 'shell.prompt'.
        Returns `default` when any part of the path is missing.
        """
        value = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in memory, e.g. ('debug.level', 'INFO').

        When the key already holds a value, the new one is cast to that type
        so '20' stays an int where the file had an int.
        """
        keys = key_path.split('.')
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        original_value = d.get(keys[-1])
        if original_value is not None:
            try:
                value = type(original_value)(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Could not cast new value for '%s' to type %s. Storing as string.",
                    key_path, type(original_value).__name__
                )

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Reloads the in-memory configuration from settings.json."""
        config_path = self._settings_path()
        if not config_path.exists():
            logger.warning("%s not found at %s. Using empty config.", SETTINGS_FILE, config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.info("Configuration has been (re)loaded from %s.", config_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s", SETTINGS_FILE, e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
