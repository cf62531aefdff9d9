"""Append-only buffer of decoded symbols."""

from __future__ import annotations


class PayloadSequence:
    """Decoded characters in the order they were produced."""

    def __init__(self) -> None:
        self._symbols: list[str] = []

    def append(self, symbol: str) -> None:
        self._symbols.append(symbol)

    def render(self) -> str:
        """Return the accumulated message; empty before any append."""
        return "".join(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"PayloadSequence({self.render()!r})"
