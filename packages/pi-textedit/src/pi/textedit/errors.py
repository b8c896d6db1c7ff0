"""Exceptions raised when the engine's layout contract is broken.

None of these are recoverable editing errors: boundary moves (left at the
very start, delete at the very end, ...) are silent no-ops. They signal a
caller that let the layout drift out of sync with the line buffer.
"""

from __future__ import annotations


class TextEditError(Exception):
    """Base class for all text engine errors."""


class LayoutDesyncError(TextEditError, IndexError):
    """A visual row or cursor does not map onto the installed layout."""


class LayoutMismatchError(TextEditError, ValueError):
    """A layout handed to ``set_layout`` disagrees with the line buffer."""


class StaleLayoutError(TextEditError, RuntimeError):
    """The layout was needed after an edit but has not been refreshed yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"layout is stale after an edit; call set_layout() before {operation}"
        )
        self.operation = operation
