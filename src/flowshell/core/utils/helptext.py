# src/flowshell/core/utils/helptext.py
from flowshell.core.command_registry import COMMAND_HELP_TEXTS
from flowshell.core.io_streams import IoStreams
from flowshell.core.parser_keywords import RESERVED_KEYWORDS

# The static header part of the help text
HEADER_HELP_TEXT = """
flowshell - Help

A small command shell with functions, scripts and structured exit statuses.

---
OPERATORS
---
  A ; B               Execute B after A, regardless of the outcome.
  A && B              Execute B only if A was successful (exit code 0).
  A || B              Execute B only if A failed (exit code != 0).
  A | B               Pipe the output (stdout) of A as input (stdin) for B.

---
KEYWORDS
---
  not CMD             Run CMD and invert its status.
  and CMD / or CMD    Run CMD only if the previous status was zero / non-zero.
  builtin CMD         Run CMD as a builtin, never as a function or program.
  command CMD         Run CMD as an external program.
  time CMD            Run CMD and report how long it took.

---
VARIABLES & SHORTHANDS
---
  Variables are accessed using @{name}. @{status} holds the last exit status
  and @{argv} the arguments of the running function.

  set @{name}=value   Create or overwrite a variable.
  Shorthand:          @{name}=value

  get @{name}         Display the value of a variable.
  Shorthand:          @{name}

---
COMMANDS
---
GENERAL:
  help [COMMAND]      Show this help text, or the help of one command.
  quit                Exit the shell.
  echo <text...>      Display the specified text (--code N sets the status).
""".strip()


def _reserved_names_text() -> str:
    names = " ".join(sorted(RESERVED_KEYWORDS))
    return f"RESERVED NAMES:\n  {names}"


def get_help_text() -> str:
    """
    Assembles the full help text from the header and all discovered
    help text fragments from the command handlers.
    """
    full_help_parts = [HEADER_HELP_TEXT]

    for command_name in sorted(COMMAND_HELP_TEXTS.keys()):
        full_help_parts.append(COMMAND_HELP_TEXTS[command_name])

    full_help_parts.append(_reserved_names_text())
    return "\n\n".join(full_help_parts)


def get_builtin_help(cmd: str) -> str:
    """Returns the help fragment registered for a single command."""
    text = COMMAND_HELP_TEXTS.get(cmd)
    if text is None:
        return f"{cmd}: no help available"
    return text


def print_builtin_help(streams: IoStreams, cmd: str) -> None:
    streams.out.append(get_builtin_help(cmd) + "\n")
