"""Key events understood by the text engine.

The set is closed: a printable character plus nine editing and movement
keys. Every variant carries a ``type`` tag so callers can ``match`` on the
class or on the tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

_LINE_BREAKS = ("\n", "\r")


@dataclass(frozen=True)
class Char:
    char: str
    type: str = field(default="char", init=False)

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise ValueError(f"Char expects a single code point, got {self.char!r}")
        if self.char in _LINE_BREAKS:
            raise ValueError("line breaks are not characters; use Enter")


@dataclass(frozen=True)
class Backspace:
    type: str = field(default="backspace", init=False)


@dataclass(frozen=True)
class Delete:
    type: str = field(default="delete", init=False)


@dataclass(frozen=True)
class Enter:
    type: str = field(default="enter", init=False)


@dataclass(frozen=True)
class Up:
    type: str = field(default="up", init=False)


@dataclass(frozen=True)
class Down:
    type: str = field(default="down", init=False)


@dataclass(frozen=True)
class Left:
    type: str = field(default="left", init=False)


@dataclass(frozen=True)
class Right:
    type: str = field(default="right", init=False)


@dataclass(frozen=True)
class Home:
    type: str = field(default="home", init=False)


@dataclass(frozen=True)
class End:
    type: str = field(default="end", init=False)


Key = Union[Char, Backspace, Delete, Enter, Up, Down, Left, Right, Home, End]

BACKSPACE = Backspace()
DELETE = Delete()
ENTER = Enter()
UP = Up()
DOWN = Down()
LEFT = Left()
RIGHT = Right()
HOME = Home()
END = End()

_NAMED_KEYS: dict[str, Key] = {
    "backspace": BACKSPACE,
    "delete": DELETE,
    "enter": ENTER,
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
    "home": HOME,
    "end": END,
}


def parse_key(name: str) -> Key | None:
    """Map a key name (``"left"``, ``"enter"``...) or a single character to a Key.

    Names are matched case-insensitively; a one-character string that is not
    a key name is a ``Char``, except a line break, which is ``Enter``.
    Anything else returns ``None``.
    """
    if name in _LINE_BREAKS:
        return ENTER
    if len(name) == 1:
        return Char(name)
    return _NAMED_KEYS.get(name.lower())


def key_name(key: Key) -> str:
    """Inverse of ``parse_key``: the character for ``Char``, else the tag."""
    if isinstance(key, Char):
        return key.char
    return key.type
