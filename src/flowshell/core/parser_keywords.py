# src/flowshell/core/parser_keywords.py
"""
Keyword tables the parser consults to decide how a command word takes part in
syntax, and the two membership tests built on them.
"""
from typing import FrozenSet

# Block continuators that look like commands but are not rewritten as such.
SKIP_KEYWORDS: FrozenSet[str] = frozenset({"else", "begin"})

# Words whose trailing arguments form a nested command.
SUBCOMMAND_KEYWORDS: FrozenSet[str] = frozenset({
    "and",
    "begin",
    "builtin",
    "command",
    "exec",
    "if",
    "not",
    "or",
    "time",
    "while",
})

# Words that open a structured block.
BLOCK_KEYWORDS: FrozenSet[str] = frozenset({
    "begin",
    "for",
    "function",
    "if",
    "switch",
    "while",
})

# Names that may never be shadowed by a user-defined function.
# Don't forget to add any new reserved keywords to the help text.
RESERVED_KEYWORDS: FrozenSet[str] = frozenset({
    "[",
    "_",
    "argparse",
    "break",
    "case",
    "continue",
    "else",
    "end",
    "eval",
    "read",
    "return",
    "set",
    "status",
    "string",
    "test",
})

ALL_KEYWORDS: FrozenSet[str] = SKIP_KEYWORDS | SUBCOMMAND_KEYWORDS | BLOCK_KEYWORDS | RESERVED_KEYWORDS


def is_subcommand_rewrite_target(word: str) -> bool:
    """
    Tests if the arguments following `word` should be parsed as another
    command, e.g. `not`, `command`, `builtin`, `if` or `while`.

    This does not handle "else if", which needs the richer block parser.
    """
    return word in SUBCOMMAND_KEYWORDS or word in SKIP_KEYWORDS


def is_reserved(word: str) -> bool:
    """
    Tests if `word` is a reserved keyword, i.e. a name that changes block or
    command scope (like 'for', 'end' or 'command') or a builtin the parser
    relies on. Such names cannot be redefined as functions.
    """
    return word in ALL_KEYWORDS
