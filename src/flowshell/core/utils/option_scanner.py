# src/flowshell/core/utils/option_scanner.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple


class ArgRequirement(Enum):
    NONE = "none"
    REQUIRED = "required"


class StepKind(Enum):
    FLAG = "flag"
    MISSING_ARGUMENT = "missing_argument"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LongOption:
    name: str
    has_arg: ArgRequirement
    short: str


@dataclass(frozen=True)
class ScanStep:
    """
    One result of scanning the argument list.

    Attributes:
        kind: FLAG, MISSING_ARGUMENT or UNKNOWN.
        option: The short option letter the step resolved to (None for UNKNOWN).
        token: The raw argument the step came from, e.g. '-1' or '--help'.
        index: Position of `token` in the scanned argument list.
        value: The option argument, for options that take one.
    """
    kind: StepKind
    option: Optional[str]
    token: str
    index: int
    value: Optional[str] = None


class OptionScanner:
    """
    A getopt_long style scanner for builtin arguments.

    The scanner only classifies; it never prints and never rejects. Callers
    decide what an UNKNOWN step means: most builtins report it as an error,
    while `return` stops there and reads the token as a positional argument
    since '-1' is a number (see `stop_at`).

    Like getopt, options and positional words may be mixed: a word that is not
    an option (including a lone '-') is set aside and scanning goes on. '--'
    ends scanning and everything after it is positional. A short spec starting
    with '+' stops at the first positional word instead. Once the scanner is
    exhausted, `positionals` lists the set-aside words in their original order.

    Example:
        >>> scanner = OptionScanner("hd:", [LongOption("help", ArgRequirement.NONE, "h")], ["x", "-h"])
        >>> [s.option for s in scanner], scanner.positionals
        (['h'], ['x'])
    """

    def __init__(self, short_opts: str, long_opts: Sequence[LongOption], args: List[str]):
        self._require_order = short_opts.startswith("+")
        self._short = self._parse_short_spec(short_opts)
        self._long = list(long_opts)
        self._args = args
        self.index = 0
        self._positionals: List[Tuple[int, str]] = []
        # Remaining characters of a short option cluster such as '-hd'
        self._cluster = ""
        self._cluster_index = 0

    @staticmethod
    def _parse_short_spec(spec: str) -> Dict[str, ArgRequirement]:
        out: Dict[str, ArgRequirement] = {}
        i = 0
        while i < len(spec):
            ch = spec[i]
            if ch in ":+":
                i += 1
                continue
            if i + 1 < len(spec) and spec[i + 1] == ":":
                out[ch] = ArgRequirement.REQUIRED
            else:
                out[ch] = ArgRequirement.NONE
            i += 1
        return out

    @property
    def positionals(self) -> List[str]:
        return [token for _, token in sorted(self._positionals)]

    def stop_at(self, step: ScanStep) -> None:
        """
        Ends the scan at an UNKNOWN step. Its token and every argument after it
        become positional words, in their original order.
        """
        self._cluster = ""
        self._positionals.append((step.index, step.token))
        self.index = step.index + 1
        self._set_aside_rest()

    def _set_aside_rest(self) -> None:
        self._positionals.extend(
            (i, self._args[i]) for i in range(self.index, len(self._args))
        )
        self.index = len(self._args)

    def __iter__(self) -> Iterator[ScanStep]:
        return self

    def __next__(self) -> ScanStep:
        if self._cluster:
            return self._next_short()

        while self.index < len(self._args):
            arg = self._args[self.index]
            if arg == "--":
                self.index += 1
                self._set_aside_rest()
                break

            if not arg.startswith("-") or arg == "-":
                if self._require_order:
                    self._set_aside_rest()
                    break
                self._positionals.append((self.index, arg))
                self.index += 1
                continue

            if arg.startswith("--"):
                return self._next_long(arg)

            self._cluster = arg[1:]
            self._cluster_index = self.index
            self.index += 1
            return self._next_short()

        raise StopIteration

    def _next_short(self) -> ScanStep:
        token = self._args[self._cluster_index]
        token_index = self._cluster_index
        ch, self._cluster = self._cluster[0], self._cluster[1:]

        requirement = self._short.get(ch)
        if requirement is None:
            # The rest of the cluster belongs to the same unknown token
            self._cluster = ""
            return ScanStep(StepKind.UNKNOWN, None, token, token_index)

        if requirement is ArgRequirement.NONE:
            return ScanStep(StepKind.FLAG, ch, token, token_index)

        if self._cluster:
            value, self._cluster = self._cluster, ""
            return ScanStep(StepKind.FLAG, ch, token, token_index, value)

        if self.index < len(self._args):
            value = self._args[self.index]
            self.index += 1
            return ScanStep(StepKind.FLAG, ch, token, token_index, value)

        return ScanStep(StepKind.MISSING_ARGUMENT, ch, token, token_index)

    def _next_long(self, arg: str) -> ScanStep:
        token_index = self.index
        self.index += 1

        name, sep, inline_value = arg[2:].partition("=")
        option = self._match_long(name)
        if option is None:
            return ScanStep(StepKind.UNKNOWN, None, arg, token_index)

        if option.has_arg is ArgRequirement.NONE:
            if sep:
                # '--help=x' passes a value to an option that takes none
                return ScanStep(StepKind.UNKNOWN, None, arg, token_index)
            return ScanStep(StepKind.FLAG, option.short, arg, token_index)

        if sep:
            return ScanStep(StepKind.FLAG, option.short, arg, token_index, inline_value)
        if self.index < len(self._args):
            value = self._args[self.index]
            self.index += 1
            return ScanStep(StepKind.FLAG, option.short, arg, token_index, value)
        return ScanStep(StepKind.MISSING_ARGUMENT, option.short, arg, token_index)

    def _match_long(self, name: str) -> Optional[LongOption]:
        """Exact match first, then a unique prefix match."""
        if not name:
            return None
        for opt in self._long:
            if opt.name == name:
                return opt
        candidates = [opt for opt in self._long if opt.name.startswith(name)]
        if len(candidates) == 1:
            return candidates[0]
        return None
