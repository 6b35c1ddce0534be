"""Test border line styles and glyph presets."""

from __future__ import annotations

import pytest

from gridtable.border import (
    ASCII,
    DOUBLE,
    HEAVY_FRAME,
    NONE,
    PRESETS,
    ROUNDED,
    THIN,
    Borders,
    GridChar,
    GridPart,
    GridStyle,
    NoLine,
    RoundedLine,
    ThickLine,
    ThinLine,
    get_grid_char,
)


def test_get_grid_char() -> None:
    """Characters are found for combinations of line styles."""
    assert get_grid_char(GridChar(ThinLine, NoLine, ThinLine, NoLine)) == "│"
    assert get_grid_char(GridChar(NoLine, ThinLine, ThinLine, NoLine)) == "┌"
    assert get_grid_char(GridChar(NoLine, NoLine, NoLine, NoLine)) == " "


def test_get_grid_char_fallback() -> None:
    """Missing combinations fall back to the parent line style."""
    # There is no rounded tee, so a thin one is used
    key = GridChar(NoLine, RoundedLine, ThinLine, RoundedLine)
    assert get_grid_char(key) == "┬"
    # Rounded straight lines are thin lines
    assert get_grid_char(GridChar(RoundedLine, NoLine, RoundedLine, NoLine)) == "│"


def test_line_style_masks() -> None:
    """Accessing a mask name on a line style creates a grid style."""
    grid = ThinLine.outer
    assert isinstance(grid, GridStyle)
    assert grid.TOP_LEFT == "┌"
    assert grid.MID_SPLIT == " "
    with pytest.raises(AttributeError):
        ThinLine.nonexistent  # noqa: B018


def test_line_style_ordering() -> None:
    """Line styles are ranked."""
    assert NoLine < ThinLine < ThickLine
    assert max(ThinLine, ThickLine) is ThickLine


def test_grid_style_addition() -> None:
    """Adding grid styles combines their lines."""
    grid = ThickLine.outer + ThinLine.inner
    assert grid.TOP_LEFT == "┏"
    assert grid.SPLIT_SPLIT == "┼"
    assert grid.TOP_SPLIT == "┯"


def test_borders_from_grid() -> None:
    """Grid parts without any lines have no glyph."""
    assert THIN.top_left == "┌"
    assert THIN.top_split == "┬"
    assert THIN.split_split == "┼"
    assert THIN.bottom_right == "┘"
    assert THIN.mid_mid is None
    borders = Borders.from_grid(ThinLine.outer)
    assert borders.top_left == "┌"
    assert borders.mid_split is None


def test_presets() -> None:
    """The preset borders use the expected glyphs."""
    assert ASCII.top_left == ASCII.split_split == "+"
    assert ASCII.top_mid == "-"
    assert ASCII.mid_left == "|"
    assert ROUNDED.top_left == "╭"
    assert ROUNDED.split_left == "├"
    assert ROUNDED.top_split == "┬"
    assert DOUBLE.top_left == "╔"
    assert HEAVY_FRAME.top_split == "╤"
    assert all(glyph is None for glyph in NONE)
    assert PRESETS["thin"] is THIN


def test_borders_get() -> None:
    """Glyphs can be looked up by grid part."""
    assert THIN.get(GridPart.MID_LEFT) == "│"
    assert THIN.get(GridPart.MID_MID) is None


def test_borders_width() -> None:
    """The widest glyph of the given parts is measured."""
    assert THIN.width(GridPart.TOP_LEFT, GridPart.MID_LEFT) == 1
    assert NONE.width(GridPart.TOP_LEFT) == 0
    borders = Borders(mid_left="||", top_left="+")
    assert borders.width(GridPart.TOP_LEFT, GridPart.MID_LEFT) == 2
    assert Borders(mid_split="⭐").width(GridPart.MID_SPLIT) == 2


def test_borders_from_mapping() -> None:
    """Part names are case insensitive."""
    borders = Borders.from_mapping({"TOP_LEFT": "x", "mid_left": "y"})
    assert borders.top_left == "x"
    assert borders.mid_left == "y"
    assert borders.top_right is None
