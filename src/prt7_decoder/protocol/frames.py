"""Frame variants, control signals, and the notices a session reports.

Line protocol::

    I...          start of transmission (informational)
    FIN...        end of transmission
    L,<char>      load: decode <char> and append it to the message
    M,<int>       rotate the rotor forward by <int>
    M,-<int>      rotate the rotor backward by <int>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

LOAD_TAG = "L"
ROTATE_TAG = "M"
SEPARATOR = ","
START_PREFIX = "I"
END_PREFIX = "FIN"


@dataclass(frozen=True)
class Load:
    """Decode ``symbol`` and append it to the payload."""

    symbol: str


@dataclass(frozen=True)
class Rotate:
    """Rotate the rotor by a signed ``amount``."""

    amount: int


Frame = Union[Load, Rotate]


class ControlSignal(Enum):
    """Session-level markers; these are not frames."""

    START = "start"
    END = "end"

    def __str__(self) -> str:
        if self is ControlSignal.START:
            return "--- Start of transmission ---"
        return "--- End of transmission ---"

    def to_dict(self) -> dict:
        return {"type": self.value}


def classify_control(line: str) -> ControlSignal | None:
    """Return the control signal ``line`` carries, or ``None`` for frames."""
    if line.startswith(START_PREFIX):
        return ControlSignal.START
    if line[:3] == END_PREFIX:
        return ControlSignal.END
    return None


class ParseErrorKind(Enum):
    MALFORMED_FRAME = "malformed frame"
    UNKNOWN_TYPE = "unknown frame type"
    MISSING_NUMBER = "missing rotation number"


@dataclass(frozen=True)
class Trace:
    """Human-readable record of what applying a frame did.

    ``decoded`` is set for load frames only; ``line`` is the raw line the
    frame was parsed from, when known.
    """

    frame: Frame
    decoded: str | None = None
    line: str = ""

    def __str__(self) -> str:
        if isinstance(self.frame, Load):
            return f"Fragment '{self.frame.symbol}' decoded as '{self.decoded}'."
        amount = self.frame.amount
        if amount > 0:
            return f"ROTATING ROTOR +{amount}"
        return f"ROTATING ROTOR {amount}"

    def to_dict(self) -> dict:
        if isinstance(self.frame, Load):
            return {
                "type": "load",
                "line": self.line,
                "symbol": self.frame.symbol,
                "decoded": self.decoded,
            }
        return {"type": "rotate", "line": self.line, "amount": self.frame.amount}


@dataclass(frozen=True)
class Rejection:
    """A line that could not be parsed into a frame."""

    line: str
    kind: ParseErrorKind

    def __str__(self) -> str:
        return f"ERROR: malformed frame ({self.kind.value})"

    def to_dict(self) -> dict:
        return {"type": "rejected", "line": self.line, "reason": self.kind.value}
