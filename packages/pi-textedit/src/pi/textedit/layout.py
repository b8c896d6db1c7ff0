"""Wrap layout of the line buffer, as computed by the caller.

A ``LineLayout`` describes how one logical line is broken into visual rows;
each ``RowLayout`` lists the display width of every grapheme cluster on its
row. The engine only reads these values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class RowLayout:
    """Display widths of the grapheme clusters on one visual row."""

    _widths: tuple[int, ...]

    def __init__(self, widths: Iterable[int] = ()) -> None:
        values = tuple(int(w) for w in widths)
        for w in values:
            if w < 0:
                raise ValueError(f"grapheme width must not be negative: {w}")
        object.__setattr__(self, "_widths", values)

    def widths(self) -> tuple[int, ...]:
        return self._widths

    @property
    def display_width(self) -> int:
        return sum(self._widths)

    def __len__(self) -> int:
        return len(self._widths)

    def __repr__(self) -> str:
        return f"RowLayout({list(self._widths)!r})"


@dataclass(frozen=True)
class LineLayout:
    """Visual rows of one logical line, top to bottom (never empty)."""

    _rows: tuple[RowLayout, ...]

    def __init__(self, rows: Iterable[RowLayout]) -> None:
        values = tuple(rows)
        if not values:
            raise ValueError("a line layout needs at least one row")
        object.__setattr__(self, "_rows", values)

    @classmethod
    def single_row(cls, widths: Iterable[int] = ()) -> LineLayout:
        """Layout of a line that fits on one row."""
        return cls([RowLayout(widths)])

    def rows(self) -> tuple[RowLayout, ...]:
        return self._rows

    @property
    def grapheme_count(self) -> int:
        return sum(len(row) for row in self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"LineLayout({list(self._rows)!r})"
