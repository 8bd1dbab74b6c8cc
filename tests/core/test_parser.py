# tests/core/test_parser.py
from flowshell.core.parser import parse_command_line, split_subcommand_prefix


def test_parse_simple_command():
    """A single command with one argument."""
    assert parse_command_line("functions greet") == [("functions", ["greet"], None)]


def test_parse_negative_argument_stays_an_argument():
    assert parse_command_line("return -1") == [("return", ["-1"], None)]


def test_parse_sequential_operator():
    assert parse_command_line("echo a ; return 3") == [
        ("echo", ["a"], None),
        ("return", ["3"], ";"),
    ]


def test_parse_conditional_operators():
    assert parse_command_line("echo --code 1 && echo ok || return 2") == [
        ("echo", ["--code", "1"], None),
        ("echo", ["ok"], "&&"),
        ("return", ["2"], "||"),
    ]


def test_parse_pipe_operator():
    assert parse_command_line("echo @{status} | echo") == [
        ("echo", ["@{status}"], None),
        ("echo", [], "|"),
    ]


def test_parse_variable_shorthands():
    assert parse_command_line("@{my_var}=value") == [("set", ["@{my_var}=value"], None)]
    assert parse_command_line("@{my_var}") == [("get", ["@{my_var}"], None)]


def test_parse_quoted_function_body():
    line = 'function greet "echo hi @{argv}; return 4"'
    assert parse_command_line(line) == [
        ("function", ["greet", "echo hi @{argv}; return 4"], None)
    ]


def test_parse_empty_and_whitespace_input():
    assert parse_command_line("") == []
    assert parse_command_line("    ") == []


def test_split_prefix_without_keywords():
    assert split_subcommand_prefix("echo", ["hi"]) == ([], "echo", ["hi"])


def test_split_nested_keywords():
    assert split_subcommand_prefix("not", ["command", "ls", "-l"]) == (["not", "command"], "ls", ["-l"])


def test_split_skip_keywords():
    assert split_subcommand_prefix("else", ["echo", "x"]) == (["else"], "echo", ["x"])


def test_split_keyword_without_command():
    assert split_subcommand_prefix("not", []) == (["not"], None, [])


def test_split_leaves_block_openers_alone():
    assert split_subcommand_prefix("for", ["x", "in", "a"]) == ([], "for", ["x", "in", "a"])
