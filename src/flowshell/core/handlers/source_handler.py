# src/flowshell/core/handlers/source_handler.py
import logging
from pathlib import Path
from typing import List, Optional

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.io_streams import print_error_trailer
from flowshell.core.script_runner import run_script
from flowshell.core.status import STATUS_CMD_ERROR, STATUS_INVALID_ARGS

logger = logging.getLogger(__name__)

source_help_text = """
FUNCTIONS & SCRIPTS (source):
  source FILE         Run the commands in FILE in this shell. A top-level
                      'return' in FILE stops the file, not the shell.
""".strip()


def handle_source(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Runs a script file against the current context."""
    cmd = "source"
    if len(args) != 1:
        ctx.streams.err.append(f"{cmd}: Expected exactly one file name\n")
        print_error_trailer(ctx.streams, cmd)
        return STATUS_INVALID_ARGS

    path = Path(args[0]).expanduser()
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        ctx.streams.err.append(f"{cmd}: Error encountered while sourcing file '{path}': {e.strerror}\n")
        return STATUS_CMD_ERROR

    logger.debug("Sourcing %s (%d lines)", path, len(lines))
    return run_script(lines, ctx)
