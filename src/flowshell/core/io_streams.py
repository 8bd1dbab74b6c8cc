# src/flowshell/core/io_streams.py
from __future__ import annotations

import io
import sys
from typing import Optional, TextIO

# Shared diagnostic templates, formatted with the command name first.
ERR_TOO_MANY_ARGUMENTS = "{cmd}: too many arguments\n"
ERR_NOT_NUMBER = "{cmd}: {arg}: invalid integer\n"
ERR_MISSING = "{cmd}: {arg}: option requires an argument\n"
ERR_UNKNOWN = "{cmd}: {arg}: unknown option\n"
ERR_TRAILER = "(Type 'help {cmd}' for related documentation)\n"


class OutputStream:
    """
    A write-only text sink used by builtins.

    Console streams look up `sys.stdout` / `sys.stderr` on every write, so
    `redirect_stdout` (used for pipes) and pytest's capsys both see the output.
    Buffered streams keep everything in memory for later inspection.
    """

    def __init__(self, console: Optional[str] = None):
        self._console = console
        self._buffer: Optional[io.StringIO] = None if console else io.StringIO()

    @classmethod
    def to_stdout(cls) -> "OutputStream":
        return cls("stdout")

    @classmethod
    def to_stderr(cls) -> "OutputStream":
        return cls("stderr")

    @classmethod
    def to_buffer(cls) -> "OutputStream":
        return cls()

    def _target(self) -> TextIO:
        if self._buffer is not None:
            return self._buffer
        return getattr(sys, self._console)

    def append(self, text: str) -> None:
        """Appends already formatted text to the stream."""
        self._target().write(text)

    def contents(self) -> str:
        """Returns everything written so far (always empty for console streams)."""
        return self._buffer.getvalue() if self._buffer is not None else ""

    def __repr__(self) -> str:
        kind = self._console or "buffer"
        return f"<OutputStream {kind}>"


class IoStreams:
    """The output and error sinks handed to a builtin."""

    def __init__(self, out: OutputStream, err: OutputStream):
        self.out = out
        self.err = err

    @classmethod
    def console(cls) -> "IoStreams":
        return cls(OutputStream.to_stdout(), OutputStream.to_stderr())

    @classmethod
    def buffered(cls) -> "IoStreams":
        return cls(OutputStream.to_buffer(), OutputStream.to_buffer())


def print_error_trailer(streams: IoStreams, cmd: str) -> None:
    """Points the user at the command's help after a diagnostic."""
    streams.err.append(ERR_TRAILER.format(cmd=cmd))


def builtin_missing_argument(streams: IoStreams, cmd: str, opt: str) -> None:
    streams.err.append(ERR_MISSING.format(cmd=cmd, arg=opt))
    print_error_trailer(streams, cmd)


def builtin_unknown_option(streams: IoStreams, cmd: str, opt: str) -> None:
    streams.err.append(ERR_UNKNOWN.format(cmd=cmd, arg=opt))
    print_error_trailer(streams, cmd)
