"""Test the layout of text within cells."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gridtable.cell import Cell, Matrix
from gridtable.config import Size, TableStyle
from gridtable.data_structures import DiStr
from gridtable.format import fit_lines, format_cell
from gridtable.ft.utils import (
    REPLACEMENT_CHAR,
    enclose,
    fragment_list_to_str,
    fragment_list_width,
)
from gridtable.layout import resolve_dimensions

if TYPE_CHECKING:
    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    from gridtable.cell import Placement


def _format(
    matrix: Matrix, style: TableStyle, row: int = 0, col: int = 0
) -> list[str]:
    dims = resolve_dimensions(matrix, style)
    lines = format_cell(dims.coverage[row, col], dims, style)
    return [fragment_list_to_str(line) for line in lines]


def test_fit_lines_wrap() -> None:
    """Lines are wrapped to the box width."""
    lines = fit_lines(Cell("one two\nthree"), 4, TableStyle())
    assert [fragment_list_to_str(line) for line in lines] == ["one", "two", "thre", "e"]


def test_fit_lines_truncate() -> None:
    """Lines are truncated to the box width."""
    style = TableStyle(overflow="truncate", ellipsis="…")
    lines = fit_lines(Cell("one two\nthree"), 4, style)
    assert [fragment_list_to_str(line) for line in lines] == ["one…", "thr…"]


def test_padding() -> None:
    """Content is surrounded by padding."""
    assert _format(Matrix([["a"]]), TableStyle()) == [" a "]


def test_padding_chars() -> None:
    """Each side of the padding uses its own character."""
    style = TableStyle(padding=1, padding_char=DiStr("-", ">", "_", "<"))
    assert _format(Matrix([["a"]]), style) == ["---", "<a>", "___"]


def test_align() -> None:
    """Content is aligned horizontally, with extra space on the right."""
    matrix = Matrix([["ab"], ["abcdef"], ["a"]])
    style = TableStyle(align="center")
    assert _format(matrix, style, 0) == ["   ab   "]
    assert _format(matrix, style, 2) == ["   a    "]
    assert _format(matrix, style.replace(align="right"), 0) == ["     ab "]


def test_cell_align_override() -> None:
    """Cells may override the table's alignment."""
    matrix = Matrix([[Cell("ab", align="right")], ["abcd"]])
    assert _format(matrix, TableStyle()) == ["   ab "]


def test_fill_char() -> None:
    """Unused space is filled with the fill character."""
    matrix = Matrix([["ab"], ["abcd"]])
    assert _format(matrix, TableStyle(fill_char=".")) == [" ab.. "]


def test_valign() -> None:
    """Short content is aligned vertically, with extra lines below."""
    matrix = Matrix([["a", "1\n2\n3\n4"]])
    style = TableStyle(valign="middle")
    assert _format(matrix, style) == ["   ", " a ", "   ", "   "]
    assert _format(matrix, style.replace(valign="bottom")) == [
        "   ",
        "   ",
        "   ",
        " a ",
    ]
    assert _format(matrix, style.replace(valign="top")) == [
        " a ",
        "   ",
        "   ",
        "   ",
    ]


def test_vertical_truncation() -> None:
    """Content taller than a constrained row is cut, marking the last line."""
    matrix = Matrix([["1\n2\n3"]])
    style = TableStyle(row_heights={0: 2}, col_widths={0: 5}, ellipsis="…")
    assert _format(matrix, style) == [" 1   ", " 2…  "]
    assert _format(matrix, style.replace(ellipsis="")) == [" 1   ", " 2   "]


def test_vertical_truncation_closes_styles() -> None:
    """Escapes on lines cut from a cell do not leave a style open."""
    matrix = Matrix([["\x1b[31m1\n2\n3\x1b[0m"]])
    style = TableStyle(row_heights={0: 2}, col_widths={0: 5}, ellipsis="")
    lines = _format(matrix, style)
    plain = [line.replace("\x1b[31m", "").replace("\x1b[0m", "") for line in lines]
    assert plain == [" 1   ", " 2   "]
    for line in lines:
        assert line.count("\x1b[31m") == line.count("\x1b[0m")
        assert line.rindex("\x1b[0m") > line.rindex("\x1b[31m")


def test_truncate_overflow() -> None:
    """Truncated lines end with the ellipsis."""
    matrix = Matrix([["abcdefgh"]])
    style = TableStyle(overflow="truncate", ellipsis="…", col_widths={0: 6})
    assert _format(matrix, style) == [" abc… "]


def test_wide_character_in_narrow_box() -> None:
    """A wide character which cannot fit is replaced."""
    matrix = Matrix([["⭐"]])
    style = TableStyle(col_widths={0: 3})
    assert _format(matrix, style) == [f" {REPLACEMENT_CHAR} "]


def test_padding_larger_than_block() -> None:
    """Padding is reduced to fit a small block."""
    matrix = Matrix([["abc"]])
    style = TableStyle(col_widths={0: Size(fixed=1)})
    lines = _format(matrix, style)
    assert lines == [" "]


def test_span_block() -> None:
    """A spanning cell's block covers the internal borders."""
    matrix = Matrix([[Cell("abc", colspan=2)], ["a", "b"]])
    assert _format(matrix, TableStyle()) == [" abc   "]


def test_decorate() -> None:
    """The decoration hook may add escapes without changing the width."""

    def bold(
        placement: Placement, index: int, line: StyleAndTextTuples
    ) -> StyleAndTextTuples:
        return enclose(line, "\x1b[1m", "\x1b[0m")

    style = TableStyle(decorate=bold)
    matrix = Matrix([["ab"]])
    dims = resolve_dimensions(matrix, style)
    lines = format_cell(dims.coverage[0, 0], dims, style)
    assert [fragment_list_to_str(line) for line in lines] == ["\x1b[1m ab \x1b[0m"]
    assert fragment_list_width(lines[0]) == 4
