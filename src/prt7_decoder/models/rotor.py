"""Rotor mapping: the rotating substitution alphabet used to decode symbols.

The rotor holds the 26 letters A-Z in a fixed cyclic order plus a head
position. Rotating moves only the head; the letter order never changes::

    head=0   A B C D ... Z      decode('A') -> 'A'
    head=1   B C D E ... A      decode('A') -> 'B'
"""

from __future__ import annotations

import string
from typing import ClassVar

ALPHABET = string.ascii_uppercase
ROTOR_SIZE = len(ALPHABET)  # 26


class RotorMapping:
    """A Caesar-style rotor with a movable head.

    Usage::

        rotor = RotorMapping()
        rotor.rotate(3)
        rotor.decode("A")  # 'D'
    """

    LETTERS: ClassVar[tuple[str, ...]] = tuple(ALPHABET)

    def __init__(self) -> None:
        self._head = 0

    @property
    def head(self) -> int:
        """Current head offset, always in ``0..25``."""
        return self._head

    @property
    def head_letter(self) -> str:
        """Letter that position 0 currently maps to."""
        return self.LETTERS[self._head]

    def rotate(self, amount: int) -> None:
        """Move the head ``amount`` positions; negative moves backward.

        Any magnitude is accepted and wraps around the cycle.
        """
        self._head = (self._head + amount) % ROTOR_SIZE

    def decode(self, symbol: str) -> str:
        """Map one encoded symbol through the rotor.

        Spaces and anything outside ``A``-``Z`` pass through unchanged.
        """
        # Space is never substituted; it falls outside A-Z like any other
        # non-letter.
        if len(symbol) != 1 or not "A" <= symbol <= "Z":
            return symbol
        position = ord(symbol) - ord("A")
        return self.LETTERS[(self._head + position) % ROTOR_SIZE]

    def __repr__(self) -> str:
        return f"RotorMapping(head={self._head}, head_letter={self.head_letter!r})"
