# src/flowshell/core/status.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

# Exit statuses shared by the builtins and the execution engine.
STATUS_CMD_OK = 0
STATUS_CMD_ERROR = 1
STATUS_INVALID_ARGS = 2
STATUS_ILLEGAL_CMD = 123
STATUS_NOT_EXECUTABLE = 126
STATUS_CMD_UNKNOWN = 127


class ControlSignal(str, Enum):
    """Early-exit signals a builtin can produce instead of a resolved status."""
    HELP = "help"
    INVALID_ARGS = "invalid_args"


_SIGNAL_EXIT_CODES = {
    ControlSignal.HELP: STATUS_CMD_OK,
    ControlSignal.INVALID_ARGS: STATUS_INVALID_ARGS,
}


class BuiltinOutcome(BaseModel):
    """
    The typed result of a builtin invocation.

    Exactly one of `status` or `signal` is set. A resolved status is the value
    the builtin computed; a signal means the builtin stopped early (help was
    shown, or the arguments were rejected and a diagnostic was written).
    """
    model_config = ConfigDict(frozen=True)

    status: Optional[int] = None
    signal: Optional[ControlSignal] = None

    @classmethod
    def resolved(cls, status: int) -> "BuiltinOutcome":
        return cls(status=status)

    @classmethod
    def failed(cls, signal: ControlSignal) -> "BuiltinOutcome":
        return cls(signal=signal)

    @property
    def ok(self) -> bool:
        return self.signal is None

    @property
    def exit_code(self) -> int:
        """The integer the engine records as the command's status."""
        if self.signal is not None:
            return _SIGNAL_EXIT_CODES[self.signal]
        return int(self.status or 0)


def normalize_exit_status(value: int) -> int:
    """
    Maps a resolved status onto what the process exit word can carry.

    Negative values wrap into 0..255 (-1 -> 255, -256 -> 0, -257 -> 255) so that
    `return -1` never reads back as success. Zero and positive values pass
    through untouched; truncating large positive values is left to the process
    exit boundary.
    """
    if value < 0:
        return (256 - abs(value) % 256) % 256
    return value
