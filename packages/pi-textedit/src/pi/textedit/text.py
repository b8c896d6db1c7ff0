"""Wrap-aware text buffer and cursor driven by discrete key events.

``Text`` keeps three coordinate spaces in step:

* string offsets into a logical line (what slicing and insertion use),
* grapheme offsets within that line (what a user sees as characters),
* visual ``(x, y)`` positions after wrapping, where ``y`` counts rows across
  all logical lines.

The visual rows come from a layout computed outside the engine and pushed in
through ``set_layout``. Every edit leaves that layout stale; the next
operation that needs it either pulls a fresh one from ``layout_provider`` or
raises ``StaleLayoutError``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

import grapheme

from pi.textedit.errors import LayoutDesyncError, LayoutMismatchError, StaleLayoutError
from pi.textedit.key import Backspace, Char, Delete, Down, End, Enter, Home, Key, Left, Right, Up
from pi.textedit.layout import LineLayout, RowLayout
from pi.textedit.position import Position

logger = logging.getLogger(__name__)

LayoutProvider = Callable[[list[str]], Iterable[LineLayout]]

_LINE_BREAK_RE = re.compile(r"\r?\n")

# Keys that never read the layout when the cursor sits at the very start.
_ORIGIN_SAFE_KEYS = (Char, Enter, Backspace, Left, Up, Home)


@dataclass
class TextOptions:
    multi_line: bool = True
    verify_layout: bool = True


def grapheme_offset(line: str, grapheme_index: int) -> tuple[int, int | None]:
    """Return the string offset and length of the grapheme at *grapheme_index*.

    Past the end of the line the offset is ``len(line)`` and the length is
    ``None``, meaning "append" rather than "replace".
    """
    if not line:
        return 0, None

    offset = 0
    for index, cluster in enumerate(grapheme.graphemes(line)):
        if index == grapheme_index:
            return offset, len(cluster)
        offset += len(cluster)

    return len(line), None


class Text:
    """Multi-line text state: logical lines, wrap layout and a visual cursor.

    ``update`` is the only mutator for key input and returns ``True`` when the
    line buffer changed, i.e. when the caller owes the engine a new layout.
    """

    def __init__(
        self,
        options: TextOptions | None = None,
        layout_provider: LayoutProvider | None = None,
    ) -> None:
        if options is None:
            options = TextOptions()

        self._options = options
        self._layout_provider = layout_provider
        self._lines: list[str] = [""]
        self._layout: list[LineLayout] = []
        self._cursor = Position()
        self._stale = True
        # Logical (line, grapheme) of the cursor after the last edit, pending
        # conversion to visual coordinates once a fresh layout arrives.
        self._anchor: tuple[int, int] | None = None
        # Requested starting cursor, clamped once the first layout is installed.
        self._pending_cursor: Position | None = None

    @classmethod
    def from_value(
        cls,
        value: str,
        *,
        cursor: Position | tuple[int, int] | None = None,
        options: TextOptions | None = None,
        layout_provider: LayoutProvider | None = None,
    ) -> Text:
        """Create an editor holding *value*.

        ``\\n`` and ``\\r\\n`` separate logical lines; a trailing break leaves a
        trailing empty line. In single-line mode the breaks are dropped.

        The cursor starts at *cursor* (default the start), clamped like
        ``set_cursor``. Without a layout provider the placement waits for the
        first ``set_layout``.
        """
        text = cls(options=options, layout_provider=layout_provider)
        if text._options.multi_line:
            text._lines = _LINE_BREAK_RE.split(value)
        else:
            text._lines = [value.replace("\r", "").replace("\n", "")]

        if cursor is not None:
            if not isinstance(cursor, Position):
                cursor = Position.from_tuple(cursor)
            if text._layout_provider is not None:
                text.set_cursor(cursor)
            else:
                text._pending_cursor = cursor
        return text

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def value(self) -> str:
        return "".join(self._lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def cursor(self) -> Position:
        return self._cursor

    @property
    def layout(self) -> list[LineLayout]:
        return list(self._layout)

    @property
    def layout_stale(self) -> bool:
        return self._stale

    @property
    def options(self) -> TextOptions:
        return self._options

    # ------------------------------------------------------------------
    # Layout protocol
    # ------------------------------------------------------------------

    def set_layout(self, layout: Iterable[LineLayout]) -> None:
        """Install the wrap layout for the current lines (one entry per line).

        The cursor keeps its logical position: after an edit it is placed from
        the recorded anchor, otherwise (a relayout at another width, say) it
        is resolved against the outgoing layout and re-expressed in the new one.
        """
        layout = list(layout)
        if self._options.verify_layout:
            self._verify_layout(layout)

        anchor = self._anchor
        if anchor is None and not self._stale and self._cursor != Position():
            anchor = self._cursor_indexes()

        self._layout = layout
        self._stale = False
        self._anchor = None
        logger.debug(
            "Layout installed: %d lines, %d rows",
            len(layout),
            sum(len(line_layout) for line_layout in layout),
        )

        if anchor is not None:
            line_index, grapheme_index = anchor
            self._cursor = self._position_for(line_index, grapheme_index, self._cursor.y)
            logger.debug(
                "Cursor re-anchored at line %d grapheme %d -> %s",
                line_index,
                grapheme_index,
                self._cursor,
            )

        if self._pending_cursor is not None:
            position, self._pending_cursor = self._pending_cursor, None
            self._cursor = self._clamped(position)
            logger.debug("Initial cursor placed at %s", self._cursor)

    def _verify_layout(self, layout: list[LineLayout]) -> None:
        if len(layout) != len(self._lines):
            logger.warning(
                "Layout has %d entries for %d lines", len(layout), len(self._lines)
            )
            raise LayoutMismatchError(
                f"layout has {len(layout)} entries but there are {len(self._lines)} lines"
            )

        for index, (line, line_layout) in enumerate(zip(self._lines, layout)):
            expected = grapheme.length(line)
            if line_layout.grapheme_count != expected:
                logger.warning(
                    "Layout for line %d covers %d graphemes, line has %d",
                    index,
                    line_layout.grapheme_count,
                    expected,
                )
                raise LayoutMismatchError(
                    f"layout for line {index} covers {line_layout.grapheme_count} "
                    f"graphemes but the line has {expected}"
                )

    def _ensure_layout(self, operation: str) -> None:
        if not self._stale:
            return
        if self._layout_provider is None:
            raise StaleLayoutError(operation)

        logger.debug("Refreshing stale layout before %s", operation)
        self.set_layout(self._layout_provider(list(self._lines)))

    def _mark_edited(self, line_index: int, grapheme_index: int) -> None:
        self._stale = True
        self._anchor = (line_index, grapheme_index)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def set_cursor(self, position: Position | tuple[int, int]) -> None:
        """Move the cursor, clamped to the last row and to that row's length."""
        if not isinstance(position, Position):
            position = Position.from_tuple(position)

        self._ensure_layout("set_cursor")
        self._pending_cursor = None
        self._cursor = self._clamped(position)

    def _clamped(self, position: Position) -> Position:
        y = min(max(position.y, 0), self._total_rows() - 1)
        x = min(max(position.x, 0), len(self._row(y)))
        return Position(x, y)

    # ------------------------------------------------------------------
    # Coordinate resolution
    # ------------------------------------------------------------------

    def _locate_row(self, row_index: int) -> tuple[int, int]:
        """Map a flattened row index to ``(line_index, row within that line)``."""
        if row_index >= 0:
            row = 0
            for line_index, line_layout in enumerate(self._layout):
                if row + len(line_layout) > row_index:
                    return line_index, row_index - row
                row += len(line_layout)

        logger.warning("Row %d is outside a layout of %d rows", row_index, self._total_rows())
        raise LayoutDesyncError(f"invalid row index: {row_index}")

    def _row(self, row_index: int) -> RowLayout:
        line_index, local_row = self._locate_row(row_index)
        return self._layout[line_index].rows()[local_row]

    def _total_rows(self) -> int:
        return sum(len(line_layout) for line_layout in self._layout)

    def _cursor_indexes(self) -> tuple[int, int]:
        """Return the cursor's ``(line_index, grapheme_index)``."""
        if self._cursor == Position():
            return 0, 0

        line_index, local_row = self._locate_row(self._cursor.y)
        rows = self._layout[line_index].rows()
        preceding = sum(len(row) for row in rows[:local_row])
        return line_index, preceding + self._cursor.x

    def _position_for(self, line_index: int, grapheme_index: int, hint_row: int) -> Position:
        """Express a logical position in visual coordinates.

        A grapheme index on a row boundary belongs to two rows (end of one,
        start of the next). *hint_row* wins when it is one of them; otherwise
        the row that actually contains the grapheme is used.
        """
        if line_index >= len(self._layout):
            logger.warning("Line %d is outside a layout of %d lines", line_index, len(self._layout))
            raise LayoutDesyncError(f"invalid line index: {line_index}")

        first_row = sum(len(line_layout) for line_layout in self._layout[:line_index])
        candidates: list[tuple[int, int, bool]] = []
        start = 0
        for local_row, row in enumerate(self._layout[line_index].rows()):
            end = start + len(row)
            if start <= grapheme_index <= end:
                candidates.append((first_row + local_row, grapheme_index - start, grapheme_index < end))
            start = end

        if not candidates:
            last_row = first_row + len(self._layout[line_index]) - 1
            return Position(len(self._row(last_row)), last_row)

        for row, x, _ in candidates:
            if row == hint_row:
                return Position(x, row)
        for row, x, inside in candidates:
            if inside:
                return Position(x, row)
        row, x, _ = candidates[-1]
        return Position(x, row)

    def _grapheme_span(self, line_index: int, grapheme_index: int) -> tuple[int, int]:
        offset, length = grapheme_offset(self._lines[line_index], grapheme_index)
        if length is None:
            logger.warning(
                "Grapheme %d is past the end of line %d", grapheme_index, line_index
            )
            raise LayoutDesyncError(
                f"line {line_index} has no grapheme at index {grapheme_index}"
            )
        return offset, length

    def _remove_grapheme(self, line_index: int, grapheme_index: int) -> None:
        offset, length = self._grapheme_span(line_index, grapheme_index)
        line = self._lines[line_index]
        self._lines[line_index] = line[:offset] + line[offset + length :]

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    def update(self, key: Key) -> bool:
        """Apply *key*; return ``True`` when the lines changed."""
        at_origin = self._cursor == Position() and self._pending_cursor is None
        if not (at_origin and isinstance(key, _ORIGIN_SAFE_KEYS)):
            self._ensure_layout(f"handling {type(key).__name__}")

        match key:
            case Char(char=ch):
                return self._insert_char(ch)
            case Backspace():
                return self._backspace()
            case Delete():
                return self._delete()
            case Enter():
                return self._insert_newline()
            case Up():
                self._move_vertical(-1)
            case Down():
                self._move_vertical(1)
            case Left():
                self._move_left()
            case Right():
                self._move_right()
            case Home():
                self._cursor = self._cursor.set_x(0)
            case End():
                self._cursor = self._cursor.set_x(len(self._row(self._cursor.y)))
            case _:
                raise TypeError(f"unsupported key: {key!r}")
        return False

    def _insert_char(self, ch: str) -> bool:
        line_index, grapheme_index = self._cursor_indexes()
        line = self._lines[line_index]
        offset, _ = grapheme_offset(line, grapheme_index)

        before = grapheme.length(line)
        line = line[:offset] + ch + line[offset:]
        self._lines[line_index] = line

        # A combining mark merges into the cluster before it: no new cell.
        if grapheme.length(line) > before:
            self._cursor = self._cursor.add_x(1)
            grapheme_index += 1

        self._mark_edited(line_index, grapheme_index)
        return True

    def _backspace(self) -> bool:
        cursor = self._cursor
        if cursor.x > 0:
            line_index, grapheme_index = self._cursor_indexes()
            self._remove_grapheme(line_index, grapheme_index - 1)
            self._cursor = cursor.add_x(-1)
            self._mark_edited(line_index, grapheme_index - 1)
            return True

        if cursor.y == 0:
            return False

        line_index, local_row = self._locate_row(cursor.y)
        prior_row_length = len(self._row(cursor.y - 1))

        if local_row > 0:
            # Soft-wrapped continuation: the row above is the same logical line.
            _, grapheme_index = self._cursor_indexes()
            if grapheme_index == 0:
                self._cursor = Position(prior_row_length, cursor.y - 1)
                return False
            self._remove_grapheme(line_index, grapheme_index - 1)
            self._cursor = Position(max(prior_row_length - 1, 0), cursor.y - 1)
            self._mark_edited(line_index, grapheme_index - 1)
            return True

        prior_index = line_index - 1
        join_at = grapheme.length(self._lines[prior_index])
        self._lines[prior_index] += self._lines.pop(line_index)
        self._cursor = Position(prior_row_length, cursor.y - 1)
        self._mark_edited(prior_index, join_at)
        return True

    def _delete(self) -> bool:
        cursor = self._cursor
        row_length = len(self._row(cursor.y))

        if cursor.x >= row_length:
            # Only continue into the next row when it is the same logical line.
            if cursor.y + 1 >= self._total_rows():
                return False
            line_index, _ = self._locate_row(cursor.y)
            next_line_index, _ = self._locate_row(cursor.y + 1)
            if next_line_index != line_index:
                return False

        line_index, grapheme_index = self._cursor_indexes()
        self._remove_grapheme(line_index, grapheme_index)
        self._mark_edited(line_index, grapheme_index)
        return True

    def _insert_newline(self) -> bool:
        if not self._options.multi_line:
            return False

        line_index, grapheme_index = self._cursor_indexes()
        line = self._lines[line_index]
        offset, _ = grapheme_offset(line, grapheme_index)

        self._lines[line_index] = line[:offset]
        self._lines.insert(line_index + 1, line[offset:])
        self._cursor = self._cursor.add_y(1).set_x(0)
        self._mark_edited(line_index + 1, 0)
        return True

    def _move_vertical(self, direction: int) -> None:
        """Move one row up or down, keeping the display column where possible."""
        target_row = self._cursor.y + direction
        if target_row < 0 or target_row >= self._total_rows():
            return

        current = self._row(self._cursor.y)
        cursor_column = sum(current.widths()[: self._cursor.x])

        grapheme_index = 0
        column = 0
        for width in self._row(target_row).widths():
            if column + width > cursor_column:
                break
            column += width
            grapheme_index += 1

        self._cursor = Position(grapheme_index, target_row)

    def _move_left(self) -> None:
        if self._cursor.x > 0:
            self._cursor = self._cursor.add_x(-1)
        elif self._cursor.y > 0:
            prior_row_length = len(self._row(self._cursor.y - 1))
            self._cursor = self._cursor.add_y(-1).set_x(prior_row_length)

    def _move_right(self) -> None:
        row_length = len(self._row(self._cursor.y))
        if self._cursor.x < row_length:
            self._cursor = self._cursor.add_x(1)
        elif self._cursor.y + 1 < self._total_rows():
            self._cursor = self._cursor.add_y(1).set_x(0)
