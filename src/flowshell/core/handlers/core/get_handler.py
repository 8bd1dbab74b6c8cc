# src/flowshell/core/handlers/core/get_handler.py
import re
from typing import List, Optional

from flowshell.core import core as shell_core
from flowshell.core.context.shell_context import ShellContext

_GET_PATTERN = re.compile(r"^@\{([A-Za-z_][\w\.]*)\}$")


def handle_get(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """
    Handles the 'get' command, which is primarily used via the @{var} shorthand.

    Returns:
        int: Exit code (0 when the variable exists, 1 otherwise).
    """
    if not args:
        ctx.streams.err.append("Usage: get @{name}\n")
        return 1

    token = args[0].strip()
    m = _GET_PATTERN.match(token)

    if not m:
        ctx.streams.err.append(f"Invalid variable format: {token}. Must be in the format @{{name}}.\n")
        return 1

    key = m.group(1)
    val = shell_core.XNGINE.resolve_var(key, ctx)

    if val is None:
        ctx.streams.err.append(f"Error: Variable '@{{{key}}}' not found in context.\n")
        return 1
    print(val)
    return 0
