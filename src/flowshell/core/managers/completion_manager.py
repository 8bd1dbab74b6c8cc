# src/flowshell/core/managers/completion_manager.py
import logging
import re
from typing import Dict, Any, Iterable

from prompt_toolkit.completion import Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import History

from flowshell.core.context.shell_context import ShellContext
from flowshell.core.managers.config_manager import config_manager
from flowshell.core.parser_keywords import BLOCK_KEYWORDS, SUBCOMMAND_KEYWORDS

logger = logging.getLogger(__name__)

# Regex to find the last operator *before* the cursor
OPERATOR_PATTERN = re.compile(r"(\s+(?:&&|\|\||;|\|)\s+)")


class CompletionManager:
    """
    Generates completion suggestions for the prompt: commands, user
    functions and keywords for the first word of a segment, subcommands for
    the second, and @{var} names anywhere.
    """

    def __init__(
        self,
        shell_context: ShellContext,
        history: History,
        command_hierarchy: Dict[str, Any]
    ):
        self.ctx = shell_context
        self.history = history
        self.command_hierarchy = command_hierarchy

    def generate_completions(self, document: Document) -> Iterable[Completion]:
        text_before_cursor = document.text_before_cursor

        if text_before_cursor.endswith('!h'):
            yield from self._get_history_completions()
            return

        last_op_match = None
        for match in OPERATOR_PATTERN.finditer(text_before_cursor):
            last_op_match = match

        segment_start_index = last_op_match.end() if last_op_match else 0
        relevant_text = text_before_cursor[segment_start_index:]
        words_in_segment = relevant_text.lstrip().split()
        word_before_cursor = document.get_word_before_cursor(WORD=True)

        if "@{" in relevant_text and (word_before_cursor.startswith("@{") or document.char_before_cursor == '{'):
            yield from self._get_variable_completions(word_before_cursor)
            return

        # A leading keyword such as 'not' or 'command' starts a nested command
        while words_in_segment and words_in_segment[0] in SUBCOMMAND_KEYWORDS and (
            len(words_in_segment) > 1 or relevant_text.endswith(" ")
        ):
            words_in_segment = words_in_segment[1:]

        num_words_in_segment = len(words_in_segment)
        ends_with_space = relevant_text.endswith(" ")
        is_completing_first_word = (
            num_words_in_segment == 0 or
            (num_words_in_segment == 1 and not ends_with_space)
        )
        is_completing_second_word = (
            (num_words_in_segment == 1 and ends_with_space) or
            (num_words_in_segment == 2 and not ends_with_space)
        )

        if is_completing_first_word:
            yield from self._get_main_command_completions(word_before_cursor)

        elif is_completing_second_word:
            main_command_in_segment = words_in_segment[0]
            hierarchy_entry = self.command_hierarchy.get(main_command_in_segment)
            if isinstance(hierarchy_entry, dict):
                if num_words_in_segment == 2 and not ends_with_space:
                    sub_word_to_complete = words_in_segment[1]
                else:
                    sub_word_to_complete = ""
                yield from self._get_sub_command_completions(hierarchy_entry.keys(), sub_word_to_complete)

    # --- Helper methods for different completion types ---

    def _get_main_command_completions(self, word_before_cursor: str) -> Iterable[Completion]:
        start_pos = -len(word_before_cursor)
        candidates = {name: "Command" for name in self.command_hierarchy}
        candidates.update({name: "Keyword" for name in SUBCOMMAND_KEYWORDS | BLOCK_KEYWORDS})
        candidates.update({name: "Function" for name in self.ctx.functions})
        for name in sorted(candidates):
            if name.startswith(word_before_cursor):
                yield Completion(name, start_position=start_pos, display_meta=candidates[name])

    def _get_history_completions(self) -> Iterable[Completion]:
        max_len = config_manager.get_nested("autocomplete.h_max_len", 5)
        logger.debug("History completion (!h) triggered. Max items: %s", max_len)
        recent_commands, seen = [], set()
        for command in reversed(self.history.get_strings()):
            command_stripped = command.strip()
            if command_stripped and command_stripped != '!h' and command_stripped not in seen:
                seen.add(command_stripped)
                recent_commands.append(command_stripped)
                if len(recent_commands) >= max_len:
                    break
        for command in recent_commands:
            yield Completion(command, start_position=-2, display_meta="Command History")

    def _get_variable_completions(self, word_before_cursor: str) -> Iterable[Completion]:
        prefix = word_before_cursor if word_before_cursor.startswith("@{") else ""
        start_pos = -len(prefix)
        for var_name in self.ctx.variable_names():
            suggestion = f"@{{{var_name}}}"
            if suggestion.startswith(prefix):
                yield Completion(suggestion, start_position=start_pos, display_meta="Context Variable")

    def _get_sub_command_completions(self, subcommands: Iterable[str], word_before_cursor: str) -> Iterable[Completion]:
        start_pos = -len(word_before_cursor)
        for sub in sorted(subcommands):
            if sub.startswith(word_before_cursor):
                yield Completion(sub, start_position=start_pos)
