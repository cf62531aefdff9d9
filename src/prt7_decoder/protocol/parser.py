"""Parse raw text lines into frames.

A frame line is a type tag, a comma, and the argument. ``L`` frames carry
one symbol; ``M`` frames carry a signed decimal rotation, and ``M,`` with
nothing after the comma is a rotation missing its number.
"""

from __future__ import annotations

from .frames import (
    LOAD_TAG,
    ROTATE_TAG,
    SEPARATOR,
    Frame,
    Load,
    ParseErrorKind,
    Rotate,
)

MIN_LOAD_LENGTH = 3

# Rotation magnitudes saturate at the largest 32-bit signed value. A digit
# run longer than MAX_ROTATION_DIGITS always exceeds it and is saturated
# without being converted, so arbitrarily long runs cannot fail.
MAX_ROTATION = 2**31 - 1
MAX_ROTATION_DIGITS = len(str(MAX_ROTATION))


class FrameParseError(ValueError):
    """Raised when a line is not a well-formed frame."""

    def __init__(self, kind: ParseErrorKind, line: str) -> None:
        super().__init__(f"{kind.value}: {line!r}")
        self.kind = kind
        self.line = line


def parse_line(line: str) -> Frame:
    """Parse one raw line into a :class:`Load` or :class:`Rotate` frame.

    Args:
        line: A text line with terminators already stripped.

    Returns:
        The parsed frame.

    Raises:
        FrameParseError: If the line lacks the comma separator, is a load
            frame without a symbol, has an unknown tag, or is a rotation
            without digits.
    """
    if len(line) < 2 or line[1] != SEPARATOR:
        raise FrameParseError(ParseErrorKind.MALFORMED_FRAME, line)

    tag = line[0]
    if tag == LOAD_TAG:
        if len(line) < MIN_LOAD_LENGTH:
            raise FrameParseError(ParseErrorKind.MALFORMED_FRAME, line)
        # Only the first character after the comma is the symbol.
        return Load(symbol=line[2])
    if tag == ROTATE_TAG:
        return Rotate(amount=_parse_rotation(line))
    raise FrameParseError(ParseErrorKind.UNKNOWN_TYPE, line)


def _parse_rotation(line: str) -> int:
    index = 2
    sign = 1
    if index < len(line) and line[index] == "-":
        sign = -1
        index += 1

    start = index
    while index < len(line) and "0" <= line[index] <= "9":
        index += 1
    digits = line[start:index]

    if not digits:
        raise FrameParseError(ParseErrorKind.MISSING_NUMBER, line)

    if len(digits) > MAX_ROTATION_DIGITS:
        magnitude = MAX_ROTATION
    else:
        magnitude = min(int(digits), MAX_ROTATION)
    return sign * magnitude
