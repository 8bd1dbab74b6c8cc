# src/flowshell/core/utils/numeric.py
from enum import Enum

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class IntegerError(str, Enum):
    EMPTY = "empty"
    INVALID_CHAR = "invalid_char"
    OVERFLOW = "overflow"


class InvalidIntegerError(ValueError):
    """Raised when a string cannot be converted to a signed 32-bit integer."""

    def __init__(self, text: str, reason: IntegerError):
        super().__init__(f"{text!r}: {reason.value}")
        self.text = text
        self.reason = reason


def parse_int(text: str) -> int:
    """
    Converts a decimal string to a signed 32-bit integer.

    Leading and trailing whitespace is ignored and a single '+' or '-' sign is
    accepted. Anything else (hex prefixes, underscores, decimals) is rejected.

    Args:
        text (str): The string to convert.

    Returns:
        int: The parsed value.

    Raises:
        InvalidIntegerError: With reason EMPTY, INVALID_CHAR or OVERFLOW.
    """
    s = text.strip()
    if not s:
        raise InvalidIntegerError(text, IntegerError.EMPTY)

    digits = s[1:] if s[0] in "+-" else s
    if not digits:
        raise InvalidIntegerError(text, IntegerError.EMPTY)
    # str.isdigit() also accepts superscripts and other unicode digits
    if not all("0" <= ch <= "9" for ch in digits):
        raise InvalidIntegerError(text, IntegerError.INVALID_CHAR)

    value = int(digits)
    if s[0] == "-":
        value = -value

    if value < INT32_MIN or value > INT32_MAX:
        raise InvalidIntegerError(text, IntegerError.OVERFLOW)
    return value
