"""Immutable (column, row) grid coordinate."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator


@dataclass(frozen=True)
class Position:
    """A cursor coordinate in visual-row space.

    ``x`` is a grapheme offset within visual row ``y``; ``y`` indexes the
    flattened rows of every logical line. Mutators return a new instance and
    do no range checking.
    """

    x: int = 0
    y: int = 0

    @classmethod
    def from_tuple(cls, value: tuple[int, int]) -> Position:
        x, y = value
        return cls(x, y)

    def set_x(self, x: int) -> Position:
        return replace(self, x=x)

    def set_y(self, y: int) -> Position:
        return replace(self, y=y)

    def add_x(self, delta: int) -> Position:
        return replace(self, x=self.x + delta)

    def add_y(self, delta: int) -> Position:
        return replace(self, y=self.y + delta)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
