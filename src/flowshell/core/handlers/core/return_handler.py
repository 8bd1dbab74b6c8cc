# src/flowshell/core/handlers/core/return_handler.py
import logging
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.io_streams import (
    ERR_NOT_NUMBER,
    ERR_TOO_MANY_ARGUMENTS,
    IoStreams,
    builtin_missing_argument,
    print_error_trailer,
)
from flowshell.core.status import BuiltinOutcome, ControlSignal, normalize_exit_status
from flowshell.core.utils.helptext import print_builtin_help
from flowshell.core.utils.numeric import InvalidIntegerError, parse_int
from flowshell.core.utils.option_scanner import (
    ArgRequirement,
    LongOption,
    OptionScanner,
    StepKind,
)

logger = logging.getLogger(__name__)

return_help_text = """
FUNCTIONS & SCRIPTS:
  return [-h | --help] [STATUS]
                      Stop the running function with STATUS. Outside a function,
                      stop the running script (an interactive prompt keeps going).
                      Without STATUS the last status (@{status}) is reused.
                      Negative values wrap around: 'return -1' gives 255.
""".strip()

SHORT_OPTS = "h"
LONG_OPTS = [LongOption("help", ArgRequirement.NONE, "h")]


class ReturnOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    print_help: bool = False


def _parse_options(
    cmd: str, args: List[str], streams: IoStreams
) -> Union[Tuple[ReturnOptions, List[str]], BuiltinOutcome]:
    """
    Scans the options of `return`.

    Returns the options and the positional arguments, or an INVALID_ARGS
    outcome once a diagnostic has been written.
    """
    print_help = False
    scanner = OptionScanner(SHORT_OPTS, LONG_OPTS, args)

    for step in scanner:
        if step.kind is StepKind.FLAG:
            if step.option == "h":
                print_help = True
        elif step.kind is StepKind.MISSING_ARGUMENT:
            builtin_missing_argument(streams, cmd, step.token)
            return BuiltinOutcome.failed(ControlSignal.INVALID_ARGS)
        else:
            # Any other builtin would reject an unknown option here. For return
            # the token may well be a negative status such as '-1'.
            scanner.stop_at(step)
            break

    return ReturnOptions(print_help=print_help), scanner.positionals


def parse_return_value(
    args: List[str], ctx: ShellContext, streams: IoStreams, cmd: str = "return"
) -> BuiltinOutcome:
    """
    Resolves the raw status requested by a `return` invocation.

    The value is not normalized yet; a negative or very large number comes
    back as given.

    Args:
        args (List[str]): Arguments after the command name.
        ctx (ShellContext): Supplies the last status for a bare `return`.
        streams (IoStreams): Sinks for help output and diagnostics.
        cmd (str): Command name used in messages.

    Returns:
        BuiltinOutcome: The resolved status, HELP, or INVALID_ARGS.
    """
    parsed = _parse_options(cmd, args, streams)
    if isinstance(parsed, BuiltinOutcome):
        return parsed
    opts, positionals = parsed

    if opts.print_help:
        print_builtin_help(streams, cmd)
        return BuiltinOutcome.failed(ControlSignal.HELP)

    if len(positionals) > 1:
        streams.err.append(ERR_TOO_MANY_ARGUMENTS.format(cmd=cmd))
        print_error_trailer(streams, cmd)
        return BuiltinOutcome.failed(ControlSignal.INVALID_ARGS)

    if not positionals:
        return BuiltinOutcome.resolved(ctx.last_status)

    try:
        return BuiltinOutcome.resolved(parse_int(positionals[0]))
    except InvalidIntegerError as e:
        logger.debug("Rejected return value %r: %s", positionals[0], e.reason.value)
        streams.err.append(ERR_NOT_NUMBER.format(cmd=cmd, arg=positionals[0]))
        print_error_trailer(streams, cmd)
        return BuiltinOutcome.failed(ControlSignal.INVALID_ARGS)


def resolve_return(
    args: List[str], ctx: ShellContext, streams: Optional[IoStreams] = None
) -> BuiltinOutcome:
    """
    Runs the `return` builtin against an execution context.

    On success the status is normalized and the context is told how to unwind:
    inside a function `returning` is set; outside one, a non-interactive shell
    sets `exit_current_script` while an interactive prompt sets nothing.
    Help and invalid arguments leave the context untouched.
    """
    streams = streams or ctx.streams
    outcome = parse_return_value(args, ctx, streams)
    if not outcome.ok:
        return outcome

    status = normalize_exit_status(outcome.status)

    if not ctx.in_function:
        if not ctx.interactive:
            ctx.exit_current_script = True
            logger.debug("return %d: leaving the current script", status)
        return BuiltinOutcome.resolved(status)

    ctx.returning = True
    logger.debug("return %d: leaving function '%s'", status, ctx.current_function)
    return BuiltinOutcome.resolved(status)


def handle_return(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles the 'return' command."""
    return resolve_return(args, ctx).exit_code
