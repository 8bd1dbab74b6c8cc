# tests/core/test_xngine.py
import re
from unittest.mock import MagicMock

import pytest

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.handlers.core.return_handler import handle_return
from flowshell.core.io_streams import IoStreams
from flowshell.core.parser import parse_command_line
from flowshell.core.status import (
    STATUS_CMD_UNKNOWN,
    STATUS_ILLEGAL_CMD,
    STATUS_INVALID_ARGS,
)
from flowshell.core.xngine import MAX_FUNCTION_DEPTH, ExecuteEngine
from flowshell.model import FunctionDefinition


def mock_handler_success(args, ctx, stdin=None):
    ctx.set("last_called", "success")
    return 0


def mock_handler_failure(args, ctx, stdin=None):
    ctx.set("last_called", "failure")
    return 1


def mock_handler_pipe(args, ctx, stdin=None):
    ctx.set("pipe_input", stdin)
    return 0


def mock_handler_record(args, ctx, stdin=None):
    ctx.set("recorded", (ctx.get("recorded") or "") + " ".join(args) + ";")
    return 0


def mock_handler_quit(args, ctx, stdin=None):
    ctx.quit_requested = True
    return ctx.last_status


@pytest.fixture
def shell_context():
    return ShellContext(interactive=False, streams=IoStreams.buffered())


@pytest.fixture
def xngine():
    registry = {
        "cmd_ok": mock_handler_success,
        "cmd_fail": mock_handler_failure,
        "cmd_pipe": mock_handler_pipe,
        "rec": mock_handler_record,
        "bye": mock_handler_quit,
        "return": handle_return,
    }

    engine = ExecuteEngine(
        command_registry=registry,
        var_pattern=re.compile(r"@\{([^}]+)\}"),
        maybe_expand_args=lambda name, args, ctx: args,
        parse_fn=parse_command_line,
        logger=MagicMock(),
    )
    return engine


def run(engine, line, ctx):
    return engine.execute_sequence(parse_command_line(line), ctx)


# --- Operators ---

def test_xngine_execute_simple_success(xngine, shell_context):
    assert run(xngine, "cmd_ok", shell_context) == 0
    assert shell_context.get("last_called") == "success"


def test_xngine_records_last_status(xngine, shell_context):
    run(xngine, "cmd_fail", shell_context)
    assert shell_context.last_status == 1
    assert shell_context.get("status") == "1"


def test_xngine_operator_and_failure(xngine, shell_context):
    assert run(xngine, "cmd_fail && cmd_ok", shell_context) == 1
    assert shell_context.get("last_called") == "failure"


def test_xngine_operator_or_failure(xngine, shell_context):
    assert run(xngine, "cmd_fail || cmd_ok", shell_context) == 0
    assert shell_context.get("last_called") == "success"


def test_xngine_operator_pipe(xngine, shell_context):
    def mock_echo(args, ctx, stdin=None):
        print("hello world")
        return 0

    xngine._commands["echo"] = mock_echo
    assert run(xngine, "echo | cmd_pipe", shell_context) == 0
    assert shell_context.get("pipe_input") == "hello world\n"


def test_xngine_variable_expansion(xngine, shell_context):
    shell_context.set("name", "42")
    xngine._maybe_expand_args = lambda name, args, ctx: [xngine.expand_context_vars(a, ctx) for a in args]

    run(xngine, "rec id-@{name} @{missing}", shell_context)
    assert shell_context.get("recorded") == "id-42 @{missing};"


def test_xngine_quit_stops_sequence(xngine, shell_context):
    assert run(xngine, "cmd_fail ; bye ; rec never", shell_context) == 1
    assert shell_context.quit_requested
    assert shell_context.get("recorded") is None


def test_quit_inside_a_function_stops_the_caller(xngine, shell_context):
    define(shell_context, "f", "bye ; rec in-function")
    run(xngine, "f ; rec caller", shell_context)
    assert shell_context.quit_requested
    assert shell_context.get("recorded") is None


def test_status_130_is_an_ordinary_status(xngine, shell_context):
    define(shell_context, "f", "return 130")
    assert run(xngine, "f ; rec after", shell_context) == 0
    assert shell_context.get("recorded") == "after;"
    assert not shell_context.quit_requested


def test_external_exit_130_does_not_stop_the_sequence(xngine, shell_context):
    run(xngine, "command sh -c 'exit 130' ; rec after", shell_context)
    assert shell_context.get("recorded") == "after;"
    assert not shell_context.quit_requested


# --- Keyword prefixes ---

def test_not_negates(xngine, shell_context):
    assert run(xngine, "not cmd_fail", shell_context) == 0
    assert run(xngine, "not cmd_ok", shell_context) == 1
    assert run(xngine, "not not cmd_ok", shell_context) == 0


def test_and_or_use_last_status(xngine, shell_context):
    assert run(xngine, "cmd_fail ; and rec skipped", shell_context) == 1
    assert shell_context.get("recorded") is None

    assert run(xngine, "cmd_fail ; or rec ran", shell_context) == 0
    assert shell_context.get("recorded") == "ran;"


def test_builtin_prefix_skips_functions(xngine, shell_context):
    shell_context.functions["cmd_ok"] = FunctionDefinition(name="cmd_ok", body="rec from-function")
    run(xngine, "builtin cmd_ok", shell_context)
    assert shell_context.get("recorded") is None
    assert shell_context.get("last_called") == "success"


def test_builtin_prefix_unknown_builtin(xngine, shell_context):
    assert run(xngine, "builtin nope", shell_context) == STATUS_CMD_UNKNOWN
    assert "Unknown builtin 'nope'" in shell_context.streams.err.contents()


def test_command_prefix_runs_external(xngine, shell_context, monkeypatch):
    calls = []
    monkeypatch.setattr(
        xngine, "_run_external",
        lambda name, args, ctx, stdin, capture=False: calls.append((name, args)) or 0,
    )
    run(xngine, "command cmd_ok -x", shell_context)
    assert calls == [("cmd_ok", ["-x"])]
    assert shell_context.get("last_called") is None


def test_missing_external_command(xngine, shell_context):
    assert run(xngine, "command definitely-not-a-real-program-xyz", shell_context) == STATUS_CMD_UNKNOWN
    assert "command not found" in shell_context.streams.err.contents()


def test_time_reports_on_error_stream(xngine, shell_context):
    assert run(xngine, "time cmd_ok", shell_context) == 0
    assert "time: 'cmd_ok' executed in" in shell_context.streams.err.contents()


def test_keyword_without_command(xngine, shell_context):
    assert run(xngine, "not", shell_context) == STATUS_INVALID_ARGS
    assert "not: expected a command" in shell_context.streams.err.contents()


@pytest.mark.parametrize("line", ["begin cmd_ok", "if cmd_ok", "while cmd_ok", "else cmd_ok"])
def test_block_keywords_are_unsupported(xngine, shell_context, line):
    assert run(xngine, line, shell_context) == STATUS_ILLEGAL_CMD
    assert shell_context.get("last_called") is None


# --- Functions and return ---

def define(ctx, name, body):
    ctx.functions[name] = FunctionDefinition(name=name, body=body)


def test_function_return_stops_the_body(xngine, shell_context):
    define(shell_context, "f", "rec before ; return 4 ; rec after")

    assert run(xngine, "f ; rec caller", shell_context) == 0
    assert shell_context.get("recorded") == "before;caller;"
    assert not shell_context.returning
    assert not shell_context.in_function


def test_function_status_is_the_return_value(xngine, shell_context):
    define(shell_context, "f", "return -1")
    assert run(xngine, "f", shell_context) == 255
    assert shell_context.last_status == 255
    assert not shell_context.exit_current_script


def test_bare_return_in_function_passes_last_status(xngine, shell_context):
    define(shell_context, "f", "cmd_fail ; return")
    assert run(xngine, "f", shell_context) == 1


def test_function_without_return_uses_last_status(xngine, shell_context):
    define(shell_context, "f", "cmd_ok ; cmd_fail")
    assert run(xngine, "f", shell_context) == 1


def test_return_in_nested_function_only_leaves_the_inner_one(xngine, shell_context):
    define(shell_context, "inner", "return 3 ; rec inner-after")
    define(shell_context, "outer", "inner ; rec outer-after")

    assert run(xngine, "outer", shell_context) == 0
    assert shell_context.get("recorded") == "outer-after;"


def test_function_binds_and_restores_argv(xngine, shell_context):
    xngine._maybe_expand_args = lambda name, args, ctx: [xngine.expand_context_vars(a, ctx) for a in args]
    define(shell_context, "f", "rec @{argv}")

    run(xngine, "f a b", shell_context)
    assert shell_context.get("recorded") == "a b;"
    assert shell_context.get("argv") is None


def test_not_applied_to_a_function(xngine, shell_context):
    define(shell_context, "f", "return 0")
    assert run(xngine, "not f", shell_context) == 1


def test_top_level_return_in_script_stops_sequence(xngine, shell_context):
    assert run(xngine, "return 2 ; rec after", shell_context) == 2
    assert shell_context.exit_current_script
    assert shell_context.get("recorded") is None


def test_top_level_return_in_interactive_session_keeps_going(xngine):
    ctx = ShellContext(interactive=True, streams=IoStreams.buffered())
    assert run(xngine, "return 2 ; rec after", ctx) == 0
    assert ctx.get("recorded") == "after;"
    assert not ctx.exit_current_script


def test_runaway_recursion_is_stopped(xngine, shell_context):
    define(shell_context, "loop", "loop")
    assert run(xngine, "loop", shell_context) == 1
    assert "call stack limit" in shell_context.streams.err.contents()
    assert shell_context.call_depth == 0
    assert MAX_FUNCTION_DEPTH == 128
