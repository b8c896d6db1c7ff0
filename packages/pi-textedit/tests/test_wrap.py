"""Tests for pi.textedit.wrap -- grapheme widths and the reference word wrapper."""

from __future__ import annotations

from pi.textedit.layout import LineLayout, RowLayout
from pi.textedit.wrap import (
    TAB_WIDTH,
    grapheme_width,
    layout_lines,
    make_layout_provider,
    wrap_line,
)


def _row_lengths(layout: LineLayout) -> list[int]:
    return [len(row) for row in layout.rows()]


# ---------------------------------------------------------------------------
# grapheme_width
# ---------------------------------------------------------------------------


class TestGraphemeWidth:
    """Terminal cell width of a single grapheme cluster."""

    def test_ascii_is_one(self) -> None:
        assert grapheme_width("a") == 1

    def test_empty_is_zero(self) -> None:
        assert grapheme_width("") == 0

    def test_cjk_is_two(self) -> None:
        assert grapheme_width("\u4f60") == 2

    def test_combined_cluster_uses_base_width(self) -> None:
        assert grapheme_width("e\u0301") == 1

    def test_emoji_is_two(self) -> None:
        assert grapheme_width("\U0001f44d") == 2

    def test_zwj_sequence_is_two(self) -> None:
        assert grapheme_width("\U0001f468\u200d\U0001f469") == 2

    def test_tab(self) -> None:
        assert grapheme_width("\t") == TAB_WIDTH

    def test_control_character_is_zero(self) -> None:
        assert grapheme_width("\x07") == 0


# ---------------------------------------------------------------------------
# wrap_line
# ---------------------------------------------------------------------------


class TestWrapLine:
    """Word wrapping into RowLayout entries."""

    def test_no_width_means_single_row(self) -> None:
        assert wrap_line("hello world") == LineLayout.single_row([1] * 11)

    def test_fits_on_one_row(self) -> None:
        assert _row_lengths(wrap_line("hello", 5)) == [5]

    def test_empty_line_has_one_empty_row(self) -> None:
        layout = wrap_line("", 10)
        assert layout == LineLayout([RowLayout([])])

    def test_wraps_after_whitespace(self) -> None:
        # "hello " stays on the first row, "world" moves down.
        assert _row_lengths(wrap_line("hello world", 6)) == [6, 5]

    def test_long_word_breaks_at_grapheme_boundary(self) -> None:
        assert _row_lengths(wrap_line("abcdefg", 3)) == [3, 3, 1]

    def test_long_word_after_space(self) -> None:
        assert _row_lengths(wrap_line("a bcdefgh", 5)) == [2, 5, 2]

    def test_wide_glyphs_wrap_by_cells(self) -> None:
        layout = wrap_line("\u4f60\u597d\u4e16\u754c", 5)
        assert [row.widths() for row in layout.rows()] == [(2, 2), (2, 2)]

    def test_grapheme_count_matches_line(self) -> None:
        line = "cafe\u0301 au lait"
        assert wrap_line(line, 4).grapheme_count == 12


class TestLayoutLines:
    """Layout of the whole buffer and the provider factory."""

    def test_one_entry_per_line(self) -> None:
        layout = layout_lines(["ab", "", "c"])
        assert [entry.grapheme_count for entry in layout] == [2, 0, 1]

    def test_provider_uses_width(self) -> None:
        provider = make_layout_provider(3)
        layout = provider(["abcdef"])
        assert _row_lengths(layout[0]) == [3, 3]

    def test_provider_without_width(self) -> None:
        provider = make_layout_provider()
        assert provider(["x"]) == [LineLayout.single_row([1])]
