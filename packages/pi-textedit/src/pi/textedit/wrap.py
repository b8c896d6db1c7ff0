"""Reference layout collaborator: grapheme widths and word wrapping.

The engine in ``pi.textedit.text`` never measures text. Callers that render
to a terminal can use these helpers to build the ``LineLayout`` list it
consumes, or plug ``make_layout_provider`` straight into ``Text``.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

from pi.textedit.layout import LineLayout, RowLayout
from pi.textedit.text import LayoutProvider

TAB_WIDTH = 3


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(cluster: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Tabs -> ``TAB_WIDTH``; other control characters and marks -> 0
    2. Emoji (VS16, ZWJ sequences, skin tones, flags) -> 2
    3. Otherwise delegate to wcwidth for the first codepoint.
    """
    if not cluster:
        return 0
    if cluster == "\t":
        return TAB_WIDTH

    if len(cluster) == 1:
        cp = ord(cluster)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(cluster), 0)

    for ch in cluster:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # regional indicators
            return 2

    first_cp = ord(cluster[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(cluster[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(cluster[0]), 0)


def _is_whitespace(cluster: str) -> bool:
    return cluster in (" ", "\t", "\f", "\v")


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------


def _row_starts(clusters: list[str], widths: list[int], max_width: int) -> list[int]:
    """Grapheme index at which each visual row begins.

    Breaks after the last whitespace run preceding a non-whitespace cluster;
    words longer than the row are broken at a grapheme boundary.
    """
    starts = [0]
    current_width = 0
    row_start = 0
    wrap_opp_index = -1
    wrap_opp_width = 0

    for i, (cluster, width) in enumerate(zip(clusters, widths)):
        if current_width + width > max_width:
            if wrap_opp_index >= 0:
                starts.append(wrap_opp_index)
                row_start = wrap_opp_index
                current_width -= wrap_opp_width
            elif row_start < i:
                starts.append(i)
                row_start = i
                current_width = 0
            wrap_opp_index = -1

        current_width += width

        if _is_whitespace(cluster) and i + 1 < len(clusters):
            if not _is_whitespace(clusters[i + 1]):
                wrap_opp_index = i + 1
                wrap_opp_width = current_width

    return starts


def wrap_line(line: str, width: int | None = None) -> LineLayout:
    """Compute the visual rows of *line* for a viewport *width* cells wide.

    ``width`` of ``None`` (or not positive) disables wrapping.
    """
    clusters = list(grapheme.graphemes(line))
    widths = [grapheme_width(c) for c in clusters]

    if width is None or width <= 0 or sum(widths) <= width:
        return LineLayout.single_row(widths)

    starts = _row_starts(clusters, widths, width)
    ends = starts[1:] + [len(clusters)]
    return LineLayout(RowLayout(widths[start:end]) for start, end in zip(starts, ends))


def layout_lines(lines: list[str], width: int | None = None) -> list[LineLayout]:
    """Layout for every logical line, in order."""
    return [wrap_line(line, width) for line in lines]


def make_layout_provider(width: int | None = None) -> LayoutProvider:
    """Return a callable suitable as ``Text(layout_provider=...)``."""

    def provider(lines: list[str]) -> list[LineLayout]:
        return layout_lines(lines, width)

    return provider
