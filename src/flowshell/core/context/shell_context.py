# src/flowshell/core/context/shell_context.py
import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from flowshell.core.io_streams import IoStreams

# Prevent circular imports during runtime, but retain type hinting for static analysis
if TYPE_CHECKING:
    from flowshell.model import FunctionDefinition

logger = logging.getLogger(__name__)


class FunctionFrame:
    """A single in-progress function invocation."""

    def __init__(self, name: str, argv: List[str], saved_argv: Optional[str]):
        self.name = name
        self.argv = argv
        self.saved_argv = saved_argv

    def __repr__(self) -> str:
        return f"<FunctionFrame {self.name} argv={self.argv!r}>"


class ShellContext:
    """
    Manages session variables and the execution state of the shell.

    Besides plain variables it carries what the control-flow builtins read and
    write: the last status, whether the session is interactive, the function
    call stack, and the `exit_current_script`, `returning` and `quit_requested`
    flags. The context is not synchronized; one interpreter owns it at a time.
    """

    def __init__(self, interactive: bool = False, streams: Optional[IoStreams] = None):
        self._vars: Dict[str, str] = {}
        self.interactive = interactive
        self.streams = streams or IoStreams.console()

        self.functions: Dict[str, 'FunctionDefinition'] = {}
        self._call_stack: List[FunctionFrame] = []

        # Set by `return`, consumed by the engine and the script runner
        self.exit_current_script = False
        self.returning = False
        # Set by `quit`; everything up to the prompt unwinds
        self.quit_requested = False

        self._last_status = 0
        self._vars["status"] = "0"

        self.next_prompt_buffer: Optional[str] = None
        self.prompt_session: Optional[Any] = None

    # --- Status ---

    @property
    def last_status(self) -> int:
        return self._last_status

    @last_status.setter
    def last_status(self, value: int) -> None:
        """Records a command's status and mirrors it into @{status}."""
        self._last_status = int(value)
        self._vars["status"] = str(self._last_status)

    # --- Function call stack ---

    @property
    def in_function(self) -> bool:
        return bool(self._call_stack)

    @property
    def call_depth(self) -> int:
        return len(self._call_stack)

    @property
    def current_function(self) -> Optional[str]:
        return self._call_stack[-1].name if self._call_stack else None

    def push_function(self, name: str, argv: List[str]) -> None:
        """Enters a function body, binding @{argv} for its duration."""
        frame = FunctionFrame(name, list(argv), self._vars.get("argv"))
        self._call_stack.append(frame)
        self._vars["argv"] = " ".join(argv)
        logger.debug("Entered function '%s' (depth %d)", name, len(self._call_stack))

    def pop_function(self) -> None:
        """Leaves the innermost function body and restores the caller's @{argv}."""
        frame = self._call_stack.pop()
        if frame.saved_argv is None:
            self._vars.pop("argv", None)
        else:
            self._vars["argv"] = frame.saved_argv
        logger.debug("Left function '%s' (depth %d)", frame.name, len(self._call_stack))

    # --- Variables ---

    def set(self, key: str, value: str) -> None:
        """Sets a context variable."""
        self._vars[key] = value

    def get(self, key: str) -> Optional[str]:
        """Retrieves a context variable. Returns None if key does not exist."""
        return self._vars.get(key)

    def variable_names(self) -> List[str]:
        return sorted(self._vars)

    def __repr__(self) -> str:
        """Provides a string representation of the context state."""
        return (
            f"<ShellContext interactive={self.interactive} status={self._last_status} "
            f"depth={len(self._call_stack)} vars_count={len(self._vars)}>"
        )
