# src/flowshell/core/handlers/core/quit_handler.py
from flowshell.core.context.shell_context import ShellContext


def handle_quit(_args, ctx: ShellContext, _stdin=None) -> int:
    """Asks the shell to stop; the status is left as it was."""
    ctx.quit_requested = True
    return ctx.last_status
