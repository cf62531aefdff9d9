"""Apply parsed frames to the rotor and payload."""

from __future__ import annotations

from ..models.payload import PayloadSequence
from ..models.rotor import RotorMapping
from .frames import Frame, Load, Rotate, Trace


def apply_frame(
    frame: Frame, rotor: RotorMapping, payload: PayloadSequence
) -> Trace:
    """Apply ``frame`` and return a trace of what it did.

    A :class:`Load` decodes its symbol and appends the result to
    ``payload``; a :class:`Rotate` moves the rotor head.
    """
    if isinstance(frame, Load):
        decoded = rotor.decode(frame.symbol)
        payload.append(decoded)
        return Trace(frame=frame, decoded=decoded)
    if isinstance(frame, Rotate):
        rotor.rotate(frame.amount)
        return Trace(frame=frame)
    raise TypeError(f"Unsupported frame: {frame!r}")
