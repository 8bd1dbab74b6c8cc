# src/flowshell/core/handlers/core/set_handler.py
import re
from typing import List, Optional

from flowshell.core.context.shell_context import ShellContext

# Regex pattern to match the @{key}=value format, capturing the key and the rest as value
_SET_PATTERN = re.compile(r"^@\{([^}=]+)\}=(.*)$")

# Variables maintained by the shell itself
READ_ONLY_VARS = {"status", "argv"}


def handle_set(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """
    Handles the 'set' command, including the @{var}=value shorthand.

    Args:
        args (List[str]): The key and value combined as '@{name}=value'.
        ctx (ShellContext): The context the variable is stored in.
        _stdin (Optional[str]): Standard input (unused here).

    Returns:
        int: Exit code (0 for success, 1 for usage error).
    """
    if not args:
        ctx.streams.err.append("Usage: set @{name}=value\n")
        return 1

    # Rejoin arguments in case shlex split a value containing spaces
    full_arg = " ".join(args)
    m = _SET_PATTERN.match(full_arg)

    if not m:
        ctx.streams.err.append("Usage: set @{name}=value\n")
        return 1

    key, value = m.group(1).strip(), m.group(2).strip()
    if key in READ_ONLY_VARS:
        ctx.streams.err.append(f"set: Tried to change the read-only variable '{key}'\n")
        return 1

    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]

    ctx.set(key, value)
    return 0
