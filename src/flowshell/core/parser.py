# src/flowshell/core/parser.py
from __future__ import annotations
import re
import shlex
from typing import List, Optional, Tuple

from flowshell.core.parser_keywords import is_subcommand_rewrite_target

# Define the operators and RegEx patterns here.
_OPS: set[str] = {"&&", "||", ";", "|"}
# Pattern to identify variable expansion: @{name}
VAR_PATTERN = re.compile(r"@\{([^}]+)\}")
# Pattern to identify the variable SET shorthand: @{name}=value
_SET_PATTERN = re.compile(r"^@\{([^}=]+)\}=(.*)$")
# Pattern to identify the variable GET shorthand: @{name} (full match)
_GET_PATTERN = re.compile(r"^@\{([A-Za-z_][\w\.]*)\}$")


def parse_command_line(line: str) -> List[Tuple[str, List[str], Optional[str]]]:
    """
    Parses the user input into a list of command segments (tuples).

    A command segment is defined as (command_name, args, op_before).
    Recognizes shorthands for 'set' (@{var}=value) and 'get' (@{var}).

    Args:
        line (str): The raw input string from the shell.

    Returns:
        List[Tuple[str, List[str], Optional[str]]]: List of command segments.
    """
    s = (line or "").strip()
    if not s:
        return []

    try:
        tokens = shlex.split(s, posix=True)
    except ValueError:
        # Unbalanced quotes: fall back to plain whitespace splitting
        tokens = s.split()

    if not tokens:
        return []

    out: list[tuple[str, list[str], str | None]] = []
    current_name: str | None = None
    current_args: list[str] = []
    op_before: str | None = None

    def _flush(next_op: Optional[str] = None) -> None:
        """Appends the current command segment to the output list."""
        nonlocal current_name, current_args, op_before
        if current_name is not None:
            out.append((current_name, current_args, op_before))
        current_name, current_args = None, []
        # The operator passed to flush becomes the op_before for the *next* command
        op_before = next_op

    for tok in tokens:
        if tok in _OPS:
            _flush(next_op=tok)
            continue

        if current_name is None:
            if '=' in tok and _SET_PATTERN.match(tok):
                current_name = "set"
                current_args.append(tok)
            elif _GET_PATTERN.fullmatch(tok):
                current_name = "get"
                current_args.append(tok)
            else:
                current_name = tok
        else:
            current_args.append(tok)

    _flush()
    return out


def split_subcommand_prefix(
    name: str, args: List[str]
) -> Tuple[List[str], Optional[str], List[str]]:
    """
    Peels leading keywords such as `not`, `command` or `builtin` off a command.

    The words after such a keyword are themselves a command, so
    `not command ls -l` becomes (['not', 'command'], 'ls', ['-l']).
    The command name is None when nothing follows the keywords.
    """
    prefixes: List[str] = []
    words = [name] + list(args)
    while words and is_subcommand_rewrite_target(words[0]):
        prefixes.append(words.pop(0))
    if not words:
        return prefixes, None, []
    return prefixes, words[0], words[1:]
