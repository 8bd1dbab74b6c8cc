from __future__ import annotations

import io
import inspect
import logging
import subprocess
import re
import time
from contextlib import redirect_stdout
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.parser import parse_command_line, split_subcommand_prefix
from flowshell.core.status import (
    STATUS_CMD_ERROR,
    STATUS_CMD_UNKNOWN,
    STATUS_ILLEGAL_CMD,
    STATUS_INVALID_ARGS,
    STATUS_NOT_EXECUTABLE,
)
from flowshell.model import FunctionDefinition

# Deepest allowed chain of function calls before the engine gives up
MAX_FUNCTION_DEPTH = 128

Command = Tuple[str, List[str], Optional[str]]


class ExecuteEngine:
    """
    Core engine responsible for command execution, operator handling,
    keyword prefixes, function calls and context variable expansion.

    A sequence stops early when `quit` has flagged the context, or when
    `return` has flagged it as returning from a function or leaving a script.
    Statuses themselves never stop a sequence.
    """

    def __init__(
            self,
            *,
            command_registry: Dict[str, Callable[..., int]],
            var_pattern: Pattern[str],
            maybe_expand_args: Callable[[str, List[Any], ShellContext], List[str]],
            parse_fn: Optional[Callable[[str], List[Command]]] = None,
            logger: Optional[logging.Logger] = None,
    ) -> None:
        self._commands = command_registry
        self._VAR_PATTERN = var_pattern
        self._maybe_expand_args = maybe_expand_args
        self._parse = parse_fn or parse_command_line
        self._log = logger or logging.getLogger(__name__)

    def expand_context_vars(self, text: str, ctx: ShellContext) -> str:
        """Performs @{var} expansion in the given text."""
        def repl(m: re.Match) -> str:
            end = m.end()
            if end < len(text) and text[end] == '=':
                return m.group(0)
            val = self.resolve_var(m.group(1), ctx)
            return str(val) if val is not None else m.group(0)

        return self._VAR_PATTERN.sub(repl, text)

    def execute_sequence(
            self,
            commands: List[Command],
            context: Optional[ShellContext] = None
    ) -> int:
        """
        Executes a parsed command line and returns the status of the last
        command that ran. Every status is also recorded on the context.
        """
        ctx = context or ShellContext()
        if not commands:
            return ctx.last_status

        last_exit = 0
        i = 0
        n = len(commands)

        while i < n:
            name, raw_args, op = commands[i]

            # --- Operator Logic (&&, ||) ---
            if op == "&&" and last_exit != 0:
                i += 1
                while i < n and commands[i][2] == "|":
                    i += 1
                continue

            if op == "||" and last_exit == 0:
                i += 1
                while i < n and commands[i][2] == "|":
                    i += 1
                continue

            # --- Pipeline Handling ---
            segment: List[Tuple[str, List[str]]] = [(name, raw_args)]
            j = i + 1
            while j < n and commands[j][2] == "|":
                segment.append((commands[j][0], commands[j][1]))
                j += 1

            stdin: Optional[str] = None
            for k, (seg_name, seg_raw_args) in enumerate(segment):
                is_last = (k == len(segment) - 1)
                seg_args = self._maybe_expand_args(seg_name, seg_raw_args, ctx)

                # --- Shorthand Get Variable ---
                m = self._VAR_PATTERN.fullmatch(seg_name)
                if m:
                    key = m.group(1)
                    val = self.resolve_var(key, ctx)
                    print(val if val is not None else f"@{'{'}{key}{'}'} not set")
                    last_exit = 0
                    ctx.last_status = last_exit
                    continue

                if not is_last:
                    buf = io.StringIO()
                    with redirect_stdout(buf):
                        exit_code = self._run_command(seg_name, seg_args, ctx, stdin, capture=True)
                    stdin = buf.getvalue()
                else:
                    exit_code = self._run_command(seg_name, seg_args, ctx, stdin)

                last_exit = int(exit_code)
                ctx.last_status = last_exit

                if ctx.quit_requested or ctx.returning or ctx.exit_current_script:
                    self._log.debug("Unwinding sequence with status %d", last_exit)
                    return last_exit
                if last_exit != 0 and not is_last:
                    stdin = None
                    break

            i = j

        return last_exit

    # --- Keyword prefixes (not, and, or, builtin, command, time) ---

    def _run_command(
            self,
            name: str,
            args: List[str],
            ctx: ShellContext,
            stdin: Optional[str],
            capture: bool = False,
    ) -> int:
        prefixes, cmd_name, cmd_args = split_subcommand_prefix(name, args)
        if cmd_name is None:
            ctx.streams.err.append(f"{prefixes[-1]}: expected a command\n")
            return STATUS_INVALID_ARGS

        negate = False
        timed = False
        mode = "any"
        for keyword in prefixes:
            if keyword == "not":
                negate = not negate
            elif keyword == "and":
                if ctx.last_status != 0:
                    return ctx.last_status
            elif keyword == "or":
                if ctx.last_status == 0:
                    return ctx.last_status
            elif keyword == "builtin":
                mode = "builtin"
            elif keyword == "command":
                mode = "external"
            elif keyword == "time":
                timed = True
            else:
                ctx.streams.err.append(f"{keyword}: block syntax is not supported by this shell\n")
                return STATUS_ILLEGAL_CMD

        started = time.perf_counter()
        exit_code = self._dispatch(cmd_name, cmd_args, ctx, stdin, mode, capture)
        if timed:
            elapsed_ms = (time.perf_counter() - started) * 1000
            ctx.streams.err.append(f"time: '{cmd_name}' executed in {elapsed_ms:.2f} ms\n")
        if negate:
            exit_code = 0 if exit_code != 0 else 1
        return exit_code

    def _dispatch(
            self,
            name: str,
            args: List[str],
            ctx: ShellContext,
            stdin: Optional[str],
            mode: str,
            capture: bool,
    ) -> int:
        """Functions first, then builtins, then external programs."""
        if mode == "any":
            func = ctx.functions.get(name)
            if func is not None:
                return self._call_function(func, args, ctx)

        if mode != "external":
            handler = self._commands.get(name)
            if handler is not None:
                return self._call_handler(handler, args, ctx, stdin)
            if mode == "builtin":
                ctx.streams.err.append(f"builtin: Unknown builtin '{name}'\n")
                return STATUS_CMD_UNKNOWN

        return self._run_external(name, args, ctx, stdin, capture)

    # --- Function calls ---

    def _call_function(self, func: FunctionDefinition, args: List[str], ctx: ShellContext) -> int:
        if ctx.call_depth >= MAX_FUNCTION_DEPTH:
            ctx.streams.err.append(
                f"{func.name}: The function call stack limit has been exceeded\n"
            )
            return STATUS_CMD_ERROR

        body = self._parse(func.body)
        ctx.push_function(func.name, args)
        try:
            exit_code = self.execute_sequence(body, ctx)
        finally:
            ctx.pop_function()
            # The return (if any) has been consumed by this call
            ctx.returning = False
        self._log.debug("Function '%s' finished with status %d", func.name, exit_code)
        return exit_code

    # --- Helper methods ---

    def _call_handler(self, handler, args, ctx, stdin):
        sig = inspect.signature(handler)
        if len(sig.parameters) >= 3:
            return int(handler(args, ctx, stdin))
        return int(handler(args, ctx))

    def _run_external(self, name, args, ctx, stdin, capture=False):
        try:
            proc = subprocess.run(
                [name] + args,
                input=(stdin or ""),
                text=True,
                check=False,
                stdout=subprocess.PIPE if capture else None,
            )
        except FileNotFoundError:
            ctx.streams.err.append(f"{name}: command not found\n")
            return STATUS_CMD_UNKNOWN
        except PermissionError:
            ctx.streams.err.append(f"{name}: permission denied\n")
            return STATUS_NOT_EXECUTABLE
        if capture and proc.stdout:
            print(proc.stdout, end="")
        return int(proc.returncode)

    def resolve_var(self, name: str, ctx: ShellContext) -> Optional[Any]:
        """Resolves a context variable, e.g. @{status} or @{argv}."""
        return ctx.get(name)
