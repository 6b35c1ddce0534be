"""Test table cells and their placement in a matrix."""

from __future__ import annotations

import pytest

from gridtable.cell import Cell, Matrix, Placement, SpanError
from gridtable.config import ConfigurationError, Size
from gridtable.data_structures import DiInt, Span
from gridtable.ft.utils import FormattedTextAlign


def test_content_lines() -> None:
    """Text is split into lines with display widths."""
    assert Cell("a\nbb").content_lines() == [("a", 1), ("bb", 2)]


def test_content_lines_empty() -> None:
    """An empty cell has one empty line."""
    assert Cell().content_lines() == [("", 0)]
    assert Cell("").lines == [[]]


def test_content_lines_unicode_width() -> None:
    """Wide characters count as two columns."""
    assert Cell("日本").content_lines() == [("日本", 4)]


def test_content_lines_escapes() -> None:
    """Escape sequences are kept in the text but have no width."""
    assert Cell("\x1b[1mab\x1b[0m").content_lines() == [("\x1b[1mab\x1b[0m", 2)]


def test_content_lines_tabs() -> None:
    """Tabs are expanded."""
    assert Cell("a\tb").content_lines() == [("a   b", 5)]
    assert Cell("a\tb", tab_size=2).content_lines() == [("a b", 3)]


def test_formatted_text_content() -> None:
    """Formatted text is used as given."""
    cell = Cell([("class:x", "hi\nthere")])
    assert cell.lines == [[("class:x", "hi")], [("class:x", "there")]]
    assert cell.content_width == 5


def test_cell_overrides() -> None:
    """Per-cell settings are normalized."""
    cell = Cell("x", align="center", padding=2, width=4)
    assert cell.align == FormattedTextAlign.CENTER
    assert cell.padding == DiInt(2, 2, 2, 2)
    assert cell.width == Size(fixed=4)
    assert Cell("x").padding is None


def test_span() -> None:
    """The span of a cell is its row and column extent."""
    assert Cell("x").span() == Span(1, 1)
    assert Cell("x", rowspan=2, colspan=3).span() == Span(2, 3)


def test_placement_region() -> None:
    """A placement covers the coordinates of its span."""
    placement = Placement(1, 2, Cell(rowspan=2, colspan=2))
    assert list(placement.region()) == [(1, 2), (1, 3), (2, 2), (2, 3)]


def test_matrix_flow() -> None:
    """Cells are placed in the first column not covered by a span."""
    a = Cell("a", rowspan=2)
    matrix = Matrix([[a, "b"], ["c"]])
    assert matrix.shape == (2, 2)
    placements = [(p.row, p.col) for p in matrix.placements]
    assert placements == [(0, 0), (0, 1), (1, 1)]
    assert matrix.placements[0].cell is a
    assert matrix.placements[2].cell.text == "c"


def test_matrix_flow_colspan() -> None:
    """Column spans push later cells to the right."""
    matrix = Matrix([[Cell("a", colspan=2), "b"], ["c", "d", "e"]])
    assert matrix.shape == (2, 3)
    assert [(p.row, p.col) for p in matrix.placements] == [
        (0, 0),
        (0, 2),
        (1, 0),
        (1, 1),
        (1, 2),
    ]


def test_matrix_short_rows() -> None:
    """Short rows are padded with empty cells."""
    matrix = Matrix([["a", "b", "c"], ["d"]])
    assert matrix.shape == (2, 3)
    coverage = matrix.coverage()
    assert len(coverage) == 6
    assert coverage[1, 2].cell.text == ""
    assert (coverage[1, 2].row, coverage[1, 2].col) == (1, 2)


def test_matrix_coverage_spans() -> None:
    """Every coordinate of a span maps to its anchor."""
    matrix = Matrix([[Cell("a", rowspan=2, colspan=2), "b"], ["c"]])
    coverage = matrix.coverage()
    anchors = {coord: (p.row, p.col) for coord, p in coverage.items()}
    assert anchors == {
        (0, 0): (0, 0),
        (0, 1): (0, 0),
        (1, 0): (0, 0),
        (1, 1): (0, 0),
        (0, 2): (0, 2),
        (1, 2): (1, 2),
    }


def test_matrix_from_cells() -> None:
    """Cells may be given at explicit coordinates."""
    matrix = Matrix.from_cells({(0, 0): "a", (1, 1): Cell("b", colspan=2)})
    assert matrix.shape == (2, 3)
    coverage = matrix.coverage()
    assert coverage[1, 2].cell.text == "b"
    assert coverage[0, 2].cell.text == ""


def test_matrix_from_cells_overlap() -> None:
    """Overlapping spans are reported when coverage is computed."""
    matrix = Matrix.from_cells({(0, 0): Cell("a", colspan=2), (0, 1): Cell("b")})
    with pytest.raises(SpanError):
        matrix.coverage()


def test_matrix_from_cells_out_of_bounds() -> None:
    """Spans may not extend outside the given shape."""
    matrix = Matrix.from_cells({(0, 0): Cell("a", colspan=2)}, shape=(1, 1))
    with pytest.raises(SpanError):
        matrix.coverage()


def test_matrix_rowspan_past_last_row() -> None:
    """Row spans may not extend past the last row."""
    matrix = Matrix([[Cell("a", rowspan=3)], []])
    assert matrix.shape == (2, 1)
    with pytest.raises(SpanError):
        matrix.coverage()


def test_invalid_span() -> None:
    """Spans must cover at least one row and column."""
    matrix = Matrix([[Cell("a", colspan=0)]])
    with pytest.raises(SpanError):
        matrix.coverage()


def test_span_error_is_configuration_error() -> None:
    """Span errors are configuration errors."""
    assert issubclass(SpanError, ConfigurationError)
    assert issubclass(SpanError, ValueError)


def test_empty_matrix() -> None:
    """An empty matrix has no coordinates."""
    matrix = Matrix()
    assert matrix.shape == (0, 0)
    assert matrix.coverage() == {}
