# tests/core/test_option_scanner.py
from flowshell.core.utils.option_scanner import (
    ArgRequirement,
    LongOption,
    OptionScanner,
    StepKind,
)

LONG_OPTS = [
    LongOption("help", ArgRequirement.NONE, "h"),
    LongOption("description", ArgRequirement.REQUIRED, "d"),
    LongOption("erase", ArgRequirement.NONE, "e"),
]


def scan(args, short="hd:e"):
    scanner = OptionScanner(short, LONG_OPTS, args)
    return list(scanner), scanner.index


def scan_positionals(args, short="hd:e"):
    scanner = OptionScanner(short, LONG_OPTS, args)
    steps = list(scanner)
    return steps, scanner.positionals


def test_no_options():
    steps, positionals = scan_positionals(["name", "value"])
    assert steps == []
    assert positionals == ["name", "value"]


def test_options_after_positionals_are_still_scanned():
    steps, positionals = scan_positionals(["5", "-h", "name", "--erase"])
    assert [s.option for s in steps] == ["h", "e"]
    assert [s.index for s in steps] == [1, 3]
    assert positionals == ["5", "name"]


def test_option_value_is_not_a_positional():
    steps, positionals = scan_positionals(["f", "-d", "desc", "body"])
    assert [(s.option, s.value) for s in steps] == [("d", "desc")]
    assert positionals == ["f", "body"]


def test_plus_prefix_stops_at_first_positional():
    steps, positionals = scan_positionals(["name", "-h"], short="+hd:e")
    assert steps == []
    assert positionals == ["name", "-h"]


def test_stop_at_unknown_token_keeps_the_rest_positional():
    scanner = OptionScanner("h", LONG_OPTS, ["a", "-1", "b", "-h"])
    seen = []
    for step in scanner:
        seen.append(step.kind)
        if step.kind is StepKind.UNKNOWN:
            scanner.stop_at(step)
            break
    assert seen == [StepKind.UNKNOWN]
    assert scanner.positionals == ["a", "-1", "b", "-h"]
    assert list(scanner) == []


def test_short_flag_then_positional():
    steps, positionals = scan_positionals(["-h", "name"])
    assert [(s.kind, s.option) for s in steps] == [(StepKind.FLAG, "h")]
    assert positionals == ["name"]


def test_clustered_short_flags():
    steps, positionals = scan_positionals(["-he", "x"])
    assert [s.option for s in steps] == ["h", "e"]
    assert all(s.index == 0 for s in steps)
    assert positionals == ["x"]


def test_short_option_with_separate_and_attached_value():
    steps, _ = scan(["-d", "a description", "-dinline"])
    assert [(s.option, s.value) for s in steps] == [("d", "a description"), ("d", "inline")]


def test_missing_argument_for_short_option():
    steps, _ = scan(["-d"])
    assert steps[-1].kind is StepKind.MISSING_ARGUMENT
    assert steps[-1].token == "-d"


def test_negative_number_is_reported_as_unknown_with_its_position():
    steps, _ = scan(["-1"])
    assert len(steps) == 1
    assert steps[0].kind is StepKind.UNKNOWN
    assert steps[0].token == "-1"
    assert steps[0].index == 0


def test_unknown_after_known_flag_keeps_token_index():
    steps, _ = scan(["-h", "-5", "x"])
    assert steps[0].kind is StepKind.FLAG
    assert steps[1].kind is StepKind.UNKNOWN
    assert steps[1].index == 1


def test_long_options_and_prefixes():
    steps, index = scan(["--help", "--desc=text", "--description", "more", "--er", "rest"])
    assert [(s.option, s.value) for s in steps] == [
        ("h", None), ("d", "text"), ("d", "more"), ("e", None),
    ]
    assert index == 6


def test_long_option_missing_argument():
    steps, _ = scan(["--description"])
    assert steps[0].kind is StepKind.MISSING_ARGUMENT


def test_unknown_long_option_and_value_for_flag():
    steps, _ = scan(["--bogus", "--help=yes"])
    assert [s.kind for s in steps] == [StepKind.UNKNOWN, StepKind.UNKNOWN]


def test_double_dash_stops_and_is_consumed():
    steps, positionals = scan_positionals(["-h", "x", "--", "-e", "y"])
    assert [s.option for s in steps] == ["h"]
    assert positionals == ["x", "-e", "y"]


def test_lone_dash_is_positional():
    steps, positionals = scan_positionals(["-", "-h"])
    assert [s.option for s in steps] == ["h"]
    assert positionals == ["-"]
