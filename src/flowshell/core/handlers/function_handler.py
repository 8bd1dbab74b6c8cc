# src/flowshell/core/handlers/function_handler.py
import logging
import shlex
from typing import List, Optional

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.io_streams import (
    builtin_missing_argument,
    builtin_unknown_option,
    print_error_trailer,
)
from flowshell.core.parser_keywords import is_reserved
from flowshell.core.status import STATUS_CMD_ERROR, STATUS_CMD_OK, STATUS_INVALID_ARGS
from flowshell.core.utils.helptext import print_builtin_help
from flowshell.core.utils.option_scanner import (
    ArgRequirement,
    LongOption,
    OptionScanner,
    StepKind,
)
from flowshell.model import FunctionDefinition

logger = logging.getLogger(__name__)

function_help_text = """
FUNCTIONS & SCRIPTS (function):
  function [-d DESC] NAME "BODY"
                      Define NAME to run the command line BODY. Inside the body
                      @{argv} holds the call's arguments and 'return N' stops it.
                      Reserved keywords (see RESERVED NAMES) cannot be used.
""".strip()

functions_help_text = """
FUNCTIONS & SCRIPTS (functions):
  functions           List all defined functions.
  functions NAME...   Show the definition of each NAME.
  functions -e NAME...
                      Erase the named functions.
""".strip()

ERR_RESERVED = "{cmd}: The name '{name}' is reserved, and cannot be used as a function name\n"


def handle_function(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles 'function', which defines or redefines a user function."""
    cmd = "function"
    streams = ctx.streams
    print_help = False
    description = ""

    scanner = OptionScanner(
        "hd:",
        [
            LongOption("help", ArgRequirement.NONE, "h"),
            LongOption("description", ArgRequirement.REQUIRED, "d"),
        ],
        args,
    )
    for step in scanner:
        if step.kind is StepKind.MISSING_ARGUMENT:
            builtin_missing_argument(streams, cmd, step.token)
            return STATUS_INVALID_ARGS
        if step.kind is StepKind.UNKNOWN:
            builtin_unknown_option(streams, cmd, step.token)
            return STATUS_INVALID_ARGS
        if step.option == "h":
            print_help = True
        elif step.option == "d":
            description = step.value or ""

    if print_help:
        print_builtin_help(streams, cmd)
        return STATUS_CMD_OK

    positionals = scanner.positionals
    if not positionals:
        streams.err.append(f"{cmd}: Expected a function name\n")
        print_error_trailer(streams, cmd)
        return STATUS_INVALID_ARGS

    name = positionals[0]
    if is_reserved(name) or name.startswith("-"):
        logger.debug("Refused to define function with reserved name '%s'", name)
        streams.err.append(ERR_RESERVED.format(cmd=cmd, name=name))
        print_error_trailer(streams, cmd)
        return STATUS_INVALID_ARGS

    if len(positionals) < 2:
        streams.err.append(f"{cmd}: Expected a body for function '{name}'\n")
        print_error_trailer(streams, cmd)
        return STATUS_INVALID_ARGS

    body = " ".join(positionals[1:])
    ctx.functions[name] = FunctionDefinition(name=name, body=body, description=description)
    logger.debug("Defined function '%s': %s", name, body)
    return STATUS_CMD_OK


def _format_definition(func: FunctionDefinition) -> str:
    parts = ["function"]
    if func.description:
        parts += ["-d", shlex.quote(func.description)]
    parts += [func.name, shlex.quote(func.body)]
    return " ".join(parts)


def handle_functions(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles 'functions': list, show or erase user functions."""
    cmd = "functions"
    streams = ctx.streams
    erase = False
    print_help = False

    scanner = OptionScanner(
        "he",
        [
            LongOption("help", ArgRequirement.NONE, "h"),
            LongOption("erase", ArgRequirement.NONE, "e"),
        ],
        args,
    )
    for step in scanner:
        if step.kind is not StepKind.FLAG:
            builtin_unknown_option(streams, cmd, step.token)
            return STATUS_INVALID_ARGS
        if step.option == "h":
            print_help = True
        elif step.option == "e":
            erase = True

    if print_help:
        print_builtin_help(streams, cmd)
        return STATUS_CMD_OK

    names = scanner.positionals

    if erase:
        if not names:
            streams.err.append(f"{cmd}: Expected at least one function name\n")
            print_error_trailer(streams, cmd)
            return STATUS_INVALID_ARGS
        missing = [n for n in names if ctx.functions.pop(n, None) is None]
        return STATUS_CMD_ERROR if missing else STATUS_CMD_OK

    if not names:
        for name in sorted(ctx.functions):
            streams.out.append(f"{name}\n")
        return STATUS_CMD_OK

    exit_code = STATUS_CMD_OK
    for name in names:
        func = ctx.functions.get(name)
        if func is None:
            streams.err.append(f"{cmd}: No function named '{name}'\n")
            exit_code = STATUS_CMD_ERROR
            continue
        streams.out.append(_format_definition(func) + "\n")
    return exit_code
