# src/flowshell/core/script_runner.py
import logging
from typing import Iterable

from flowshell.core import core as shell_core
from flowshell.core.context.shell_context import ShellContext

logger = logging.getLogger(__name__)


def run_script(lines: Iterable[str], ctx: ShellContext) -> int:
    """
    Executes script lines one by one in non-interactive mode.

    Blank lines and '#' comments are skipped. A top-level `return` (which sets
    `exit_current_script`) or `quit` stops the script. `exit_current_script` is
    cleared again before returning so an enclosing script keeps running, while
    `quit_requested` stays set so the prompt stops too. A `return` inside a
    function that sourced this script leaves `returning` set, so the function
    unwinds as well.

    Returns:
        int: The status of the last command that ran.
    """
    was_interactive = ctx.interactive
    ctx.interactive = False
    status = ctx.last_status
    try:
        for lineno, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            status = shell_core.execute_line(line, ctx)
            if ctx.quit_requested:
                logger.debug("Script stopped by quit at line %d", lineno)
                break
            if ctx.exit_current_script or ctx.returning:
                logger.debug("Script left by return at line %d with status %d", lineno, status)
                break
    finally:
        ctx.exit_current_script = False
        ctx.interactive = was_interactive
    return status
