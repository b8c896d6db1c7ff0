"""pi-textedit: headless, wrap-aware text editing state for terminal inputs."""

from pi.textedit.errors import (
    LayoutDesyncError,
    LayoutMismatchError,
    StaleLayoutError,
    TextEditError,
)
from pi.textedit.key import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    HOME,
    LEFT,
    RIGHT,
    UP,
    Backspace,
    Char,
    Delete,
    Down,
    End,
    Enter,
    Home,
    Key,
    Left,
    Right,
    Up,
    key_name,
    parse_key,
)
from pi.textedit.layout import LineLayout, RowLayout
from pi.textedit.position import Position
from pi.textedit.text import LayoutProvider, Text, TextOptions, grapheme_offset

# Reference layout collaborator
from pi.textedit.wrap import grapheme_width, layout_lines, make_layout_provider, wrap_line

__all__ = [
    # Errors
    "LayoutDesyncError",
    "LayoutMismatchError",
    "StaleLayoutError",
    "TextEditError",
    # Keys
    "BACKSPACE",
    "DELETE",
    "DOWN",
    "END",
    "ENTER",
    "HOME",
    "LEFT",
    "RIGHT",
    "UP",
    "Backspace",
    "Char",
    "Delete",
    "Down",
    "End",
    "Enter",
    "Home",
    "Key",
    "Left",
    "Right",
    "Up",
    "key_name",
    "parse_key",
    # Layout
    "LineLayout",
    "RowLayout",
    # Engine
    "LayoutProvider",
    "Position",
    "Text",
    "TextOptions",
    "grapheme_offset",
    # Wrapping
    "grapheme_width",
    "layout_lines",
    "make_layout_provider",
    "wrap_line",
]
