# src/flowshell/core/handlers/core/echo_handler.py
from typing import List, Optional

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.utils.numeric import InvalidIntegerError, parse_int


def handle_echo(args: List[str], _ctx: ShellContext, stdin: Optional[str] = None) -> int:
    """
    Handles the 'echo' command.

    Prints the provided text and returns a specific exit code if the
    --code flag is used, which makes echo handy for testing && / || chains.

    Args:
        args (List[str]): Arguments passed to the echo command.
        _ctx (ShellContext): The shell context (unused in this handler).
        stdin (Optional[str]): Standard input piped from a previous command.

    Returns:
        int: The specified exit code (default is 0).
    """
    text_to_print_args = []
    exit_code = 0
    i = 0

    while i < len(args):
        arg = args[i]

        if arg == "--code" and i + 1 < len(args):
            try:
                exit_code = parse_int(args[i + 1])
                i += 1  # Skip the value, it was consumed as the code
            except InvalidIntegerError:
                # Not a number: print '--code' like any other word
                text_to_print_args.append(arg)
        else:
            text_to_print_args.append(arg)

        i += 1

    s = " ".join(text_to_print_args) if text_to_print_args else (stdin or "").rstrip("\n")
    print(s)
    return exit_code
