"""Test the choice of border glyphs at each point of a grid."""

from __future__ import annotations

from gridtable.border import MARKDOWN, NONE, PSQL, THIN, GridPart
from gridtable.cell import Cell, Matrix
from gridtable.compose import BorderComposer, boundary_heights, boundary_widths


def _composer(matrix: Matrix) -> BorderComposer:
    n_rows, n_cols = matrix.shape
    return BorderComposer(matrix.coverage(), n_rows, n_cols, THIN)


def test_boundary_widths() -> None:
    """Boundaries are as wide as their widest glyph."""
    assert boundary_widths(THIN, 2) == [1, 1, 1]
    assert boundary_widths(THIN, 2, split_cols=set()) == [1, 0, 1]
    assert boundary_widths(NONE, 2) == [0, 0, 0]
    assert boundary_widths(PSQL, 2) == [0, 1, 0]


def test_boundary_heights() -> None:
    """Boundaries take up a line if any of their glyphs are set."""
    assert boundary_heights(THIN, 2) == [1, 1, 1]
    assert boundary_heights(MARKDOWN, 3, split_rows={1}) == [0, 1, 0, 0]
    assert boundary_heights(PSQL, 2) == [0, 1, 0]


def test_plain_grid_junctions() -> None:
    """Junctions of a grid without spans use the expected parts."""
    composer = _composer(Matrix([["a", "b"], ["c", "d"]]))
    assert composer.junction(0, 0) == GridPart.TOP_LEFT
    assert composer.junction(0, 1) == GridPart.TOP_SPLIT
    assert composer.junction(0, 2) == GridPart.TOP_RIGHT
    assert composer.junction(1, 0) == GridPart.SPLIT_LEFT
    assert composer.junction(1, 1) == GridPart.SPLIT_SPLIT
    assert composer.junction(1, 2) == GridPart.SPLIT_RIGHT
    assert composer.junction(2, 0) == GridPart.BOTTOM_LEFT
    assert composer.junction(2, 1) == GridPart.BOTTOM_SPLIT
    assert composer.junction(2, 2) == GridPart.BOTTOM_RIGHT


def test_colspan_junctions() -> None:
    """Junctions at the edge of a column span lose their arm into the span."""
    composer = _composer(Matrix([[Cell("abc", colspan=2)], ["a", "b"]]))
    assert composer.junction(0, 1) == GridPart.TOP_MID
    assert composer.junction(1, 1) == GridPart.TOP_SPLIT
    assert composer.junction(2, 1) == GridPart.BOTTOM_SPLIT
    assert composer.vertical(0, 1) is None
    assert composer.vertical(1, 1) == GridPart.MID_SPLIT


def test_rowspan_junctions() -> None:
    """A row span suppresses the horizontal segment through it."""
    composer = _composer(Matrix([[Cell("x", rowspan=2), "a"], ["b"]]))
    assert composer.horizontal(1, 0) is None
    assert composer.horizontal(1, 1) == GridPart.SPLIT_MID
    assert composer.junction(1, 0) == GridPart.MID_LEFT
    assert composer.junction(1, 1) == GridPart.SPLIT_LEFT


def test_point_inside_span() -> None:
    """Points inside a span have no junction."""
    matrix = Matrix(
        [[Cell("x", rowspan=2, colspan=2), "a"], ["b"], ["c", "d", "e"]]
    )
    composer = _composer(matrix)
    assert composer.junction(1, 1) is None
    assert composer.junction(1, 0) == GridPart.MID_LEFT
    assert composer.junction(1, 2) == GridPart.SPLIT_LEFT
    assert composer.junction(2, 1) == GridPart.TOP_SPLIT


def test_draw() -> None:
    """Glyphs are drawn to fill an exact width."""
    composer = _composer(Matrix([["a"]]))
    assert composer.draw(GridPart.TOP_MID, 3, repeat=True) == "───"
    assert composer.draw(GridPart.TOP_LEFT, 2) == "┌ "
    # Parts without a glyph are blank
    assert composer.draw(GridPart.MID_MID, 2) == "  "
    assert composer.draw(GridPart.TOP_LEFT, 0) == ""
