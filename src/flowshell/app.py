from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory

from flowshell.core.command_registry import COMMAND_HIERARCHY, register_all_commands
from flowshell.core.context.shell_context import ShellContext
from flowshell.core.core import execute_line
from flowshell.core.managers.completion_manager import CompletionManager
from flowshell.core.managers.config_manager import config_manager
from flowshell.core.script_runner import run_script
from flowshell.core.status import STATUS_CMD_ERROR
from flowshell.core.utils.configure_logging import configure_logger
from flowshell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class PromptToolkitCompleter(Completer):
    """
    A wrapper that uses the CompletionManager to generate suggestions
    in a way that prompt_toolkit expects.
    """

    def __init__(self, manager: CompletionManager):
        self.manager = manager

    def get_completions(self, document: Document, complete_event):
        yield from self.manager.generate_completions(document)


# --- Shell Application ---


def start_shell(ctx: Optional[ShellContext] = None) -> int:
    """Starts the interactive REPL (Read-Eval-Print Loop) and returns the last status."""
    ctx = ctx or ShellContext(interactive=True)
    ctx.interactive = True

    print("Welcome to flowshell (type 'help' for commands)")

    history_name = config_manager.get_nested("shell.history_file", ".flowshell_history")
    history_path = PathUtils.get_shell_history_file(history_name)
    history = FileHistory(str(history_path))

    completion_manager = CompletionManager(ctx, history, COMMAND_HIERARCHY)
    session = PromptSession(
        history=history,
        completer=PromptToolkitCompleter(completion_manager),
        complete_while_typing=True
    )
    ctx.prompt_session = session
    logger.info("Shell startup; history file at: %s", history_path)

    prompt = config_manager.get_nested("shell.prompt", "flowshell> ")
    try:
        while True:
            try:
                default_text = ctx.next_prompt_buffer or ""
                ctx.next_prompt_buffer = None
                line = session.prompt(prompt, default=default_text).strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not line:
                continue

            execute_line(line, ctx)
            if ctx.quit_requested:
                break
    finally:
        print("Bye!")

    return ctx.last_status


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowshell", description="A small command shell.")
    parser.add_argument("-c", "--command", help="Run COMMAND non-interactively and exit.")
    parser.add_argument("script", nargs="?", help="Run the commands in SCRIPT and exit.")
    parser.add_argument("--log-level", default=None, help="Override debug.level from settings.json.")
    return parser


def main(argv: List[str] | None = None) -> int:
    """Entrypoint for running the shell from the command line."""
    args = _build_arg_parser().parse_args(argv)
    configure_logger(args.log_level or config_manager.get_nested("debug.level", "WARNING"))
    register_all_commands()

    if args.command is not None:
        return run_script([args.command], ShellContext())

    if args.script is not None:
        script_path = Path(args.script)
        try:
            lines = script_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            print(f"flowshell: cannot read '{script_path}': {e.strerror}", file=sys.stderr)
            return STATUS_CMD_ERROR
        return run_script(lines, ShellContext())

    return start_shell()


if __name__ == "__main__":
    sys.exit(main())
