# src/flowshell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the installed `flowshell` package."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_handlers_dir() -> Path:
        return PathUtils.get_shell_package_root() / "core" / "handlers"

    # --- User specific paths ---

    @staticmethod
    def get_shell_history_file(file_name: str = ".flowshell_history") -> Path:
        """
        Returns the path to the shell history file in the user's home directory.
        (e.g., ~/.flowshell_history)
        """
        return Path.home() / file_name
