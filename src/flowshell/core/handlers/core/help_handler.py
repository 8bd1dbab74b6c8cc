# src/flowshell/core/handlers/core/help_handler.py
from typing import List, Optional

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.utils.helptext import get_builtin_help, get_help_text


def handle_help(args: List[str], _ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Prints the full help, or the help of the commands named in `args`."""
    if not args:
        print(get_help_text())
        return 0
    for name in args:
        print(get_builtin_help(name))
    return 0
