# src/flowshell/core/core.py
from __future__ import annotations

import logging

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.xngine import ExecuteEngine
from flowshell.core.command_registry import CommandRegistry
from flowshell.core.parser import VAR_PATTERN, parse_command_line

logger = logging.getLogger(__name__)

# Registration is handled by app.py (and test fixtures); importing this module
# never touches the handler directory.


def _maybe_expand_args(name: str, args: list[str], ctx: ShellContext) -> list[str]:
    """Helper that expands arguments before they are passed to a handler."""
    if name in ("get", "function"):
        # get looks up the raw @{name} token; function bodies expand when called
        return list(args)
    return [XNGINE.expand_context_vars(a, ctx) for a in args]


XNGINE = ExecuteEngine(
    command_registry=CommandRegistry,
    var_pattern=VAR_PATTERN,
    maybe_expand_args=_maybe_expand_args,
    parse_fn=parse_command_line,
    logger=logger,
)

execute_sequence = XNGINE.execute_sequence
expand_context_vars = XNGINE.expand_context_vars


def execute_line(line: str, ctx: ShellContext) -> int:
    """Parses and executes one command line against the given context."""
    return execute_sequence(parse_command_line(line), ctx)


__all__ = ["execute_sequence", "expand_context_vars", "execute_line", "parse_command_line"]
