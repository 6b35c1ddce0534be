"""Define table cells and the matrix which places them on a grid."""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING, NamedTuple

from prompt_toolkit.formatted_text import to_formatted_text
from prompt_toolkit.formatted_text.utils import split_lines

from gridtable.config import ConfigurationError, to_size
from gridtable.data_structures import Span, to_diint
from gridtable.ft.ansi import ANSI
from gridtable.ft.utils import (
    FormattedTextAlign,
    FormattedTextVerticalAlign,
    fragment_list_to_str,
    fragment_list_width,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from typing import Any, Union

    from prompt_toolkit.formatted_text.base import (
        AnyFormattedText,
        StyleAndTextTuples,
    )

    from gridtable.config import Size
    from gridtable.data_structures import DiInt

    CellLike = Union["Cell", AnyFormattedText]

log = logging.getLogger(__name__)


class SpanError(ConfigurationError):
    """Raised when cell spans overlap or extend outside the table."""


class Cell:
    """A table cell.

    Cells are not modified once created.
    """

    def __init__(
        self,
        text: AnyFormattedText = "",
        rowspan: int = 1,
        colspan: int = 1,
        align: FormattedTextAlign | str | None = None,
        valign: FormattedTextVerticalAlign | str | None = None,
        padding: DiInt | int | tuple[int, ...] | None = None,
        width: Size | Any = None,
        tab_size: int = 4,
    ) -> None:
        """Create a new table cell.

        Args:
            text: Text or formatted text to display in the cell. Strings may contain
                ANSI escape sequences
            rowspan: The number of rows this cell spans
            colspan: The number of columns this cell spans
            align: How the text in the cell should be aligned horizontally. The
                table's alignment is used if not given
            valign: How the text in the cell should be aligned vertically. The
                table's vertical alignment is used if not given
            padding: The padding around the contents of the cell. The table's
                padding is used if not given
            width: A size constraint for the width of the cell, including padding
            tab_size: The number of spaces used to represent a tab

        """
        self.text = text
        self.rowspan = rowspan
        self.colspan = colspan
        self.align = None if align is None else FormattedTextAlign(align)
        self.valign = None if valign is None else FormattedTextVerticalAlign(valign)
        self.padding = None if padding is None else to_diint(padding)
        self.width = None if width is None else to_size(width)
        self.tab_size = tab_size

    @cached_property
    def lines(self) -> list[StyleAndTextTuples]:
        """The lines of formatted text in the cell."""
        text = self.text
        if isinstance(text, str):
            text = ANSI(text, tab_size=self.tab_size)
        return list(split_lines(to_formatted_text(text)))

    @cached_property
    def content_width(self) -> int:
        """The display width of the cell's widest line."""
        return max(fragment_list_width(line) for line in self.lines)

    def content_lines(self) -> list[tuple[str, int]]:
        """Return each line's text and its display width.

        The text includes any escape sequences, which do not count towards the
        width.
        """
        return [
            (fragment_list_to_str(line), fragment_list_width(line))
            for line in self.lines
        ]

    def span(self) -> Span:
        """Return the number of rows and columns the cell occupies."""
        return Span(self.rowspan, self.colspan)

    def __repr__(self) -> str:
        """Return a string representation of the cell."""
        span = "" if self.span() == Span() else f", span={tuple(self.span())}"
        return f"{self.__class__.__name__}({self.text!r}{span})"


class Placement(NamedTuple):
    """A cell anchored at a grid coordinate."""

    row: int
    col: int
    cell: Cell

    @property
    def rows(self) -> range:
        """The row indices covered by the cell."""
        return range(self.row, self.row + self.cell.rowspan)

    @property
    def cols(self) -> range:
        """The column indices covered by the cell."""
        return range(self.col, self.col + self.cell.colspan)

    def region(self) -> Iterator[tuple[int, int]]:
        """Iterate over the grid coordinates covered by the cell."""
        for row in self.rows:
            for col in self.cols:
                yield row, col


def _to_cell(item: CellLike) -> Cell:
    return item if isinstance(item, Cell) else Cell(item)


class Matrix:
    """A grid of cells, some of which may span multiple rows or columns.

    Matrices are not validated when created. Span problems are reported by
    :py:meth:`coverage`.
    """

    def __init__(self, rows: Iterable[Iterable[CellLike]] = ()) -> None:
        """Create a matrix by flowing cells into rows.

        Each row lists the cells which start in that row. A cell is placed at the
        first column not already covered by a cell spanning from an earlier row or
        an earlier cell in the same row. Rows which are shorter than the table
        are padded with empty cells.

        Args:
            rows: The cells of each row. Items which are not cells are used as
                the text of a new cell

        """
        placements: list[Placement] = []
        covered: set[tuple[int, int]] = set()
        n_rows = n_cols = 0
        for row_index, row in enumerate(rows):
            col_index = 0
            for item in row:
                cell = _to_cell(item)
                # Fit cells into available space
                while (row_index, col_index) in covered:
                    col_index += 1
                placement = Placement(row_index, col_index, cell)
                placements.append(placement)
                covered.update(placement.region())
                col_index += max(cell.colspan, 1)
                n_cols = max(n_cols, col_index)
            n_rows = row_index + 1
        self.placements = placements
        self.shape = Span(n_rows, n_cols)

    @classmethod
    def from_cells(
        cls,
        cells: Mapping[tuple[int, int], CellLike],
        shape: tuple[int, int] | None = None,
    ) -> Matrix:
        """Create a matrix from cells at explicit anchor coordinates.

        Args:
            cells: A mapping of ``(row, col)`` anchor coordinates to cells
            shape: The number of rows and columns in the grid. If not given, the
                smallest grid containing every cell is used

        Returns:
            A new matrix

        """
        placements = [
            Placement(row, col, _to_cell(item))
            for (row, col), item in sorted(cells.items())
        ]
        if shape is None:
            shape = (
                max((p.row + max(p.cell.rowspan, 1) for p in placements), default=0),
                max((p.col + max(p.cell.colspan, 1) for p in placements), default=0),
            )
        matrix = cls()
        matrix.placements = placements
        matrix.shape = Span(*shape)
        return matrix

    @property
    def n_rows(self) -> int:
        """The number of rows in the grid."""
        return self.shape.rows

    @property
    def n_cols(self) -> int:
        """The number of columns in the grid."""
        return self.shape.cols

    def coverage(self) -> dict[tuple[int, int], Placement]:
        """Map every grid coordinate to the placement covering it.

        Coordinates which no cell covers are filled with new empty cells.

        Returns:
            A dictionary mapping ``(row, col)`` coordinates to placements

        Raises:
            SpanError: If a span is not positive, if spans overlap, or if a span
                extends outside the grid

        """
        n_rows, n_cols = self.shape
        result: dict[tuple[int, int], Placement] = {}
        for placement in self.placements:
            row, col, cell = placement
            if cell.rowspan < 1 or cell.colspan < 1:
                raise SpanError(
                    f"Cell at ({row}, {col}) has an invalid span {tuple(cell.span())}"
                )
            if (
                row < 0
                or col < 0
                or row + cell.rowspan > n_rows
                or col + cell.colspan > n_cols
            ):
                raise SpanError(
                    f"Cell at ({row}, {col}) with span {tuple(cell.span())} "
                    f"extends outside the {n_rows}x{n_cols} table"
                )
            for coord in placement.region():
                if (other := result.get(coord)) is not None:
                    raise SpanError(
                        f"Cell at ({row}, {col}) overlaps cell at "
                        f"({other.row}, {other.col}) at {coord}"
                    )
                result[coord] = placement
        for row in range(n_rows):
            for col in range(n_cols):
                if (row, col) not in result:
                    result[row, col] = Placement(row, col, Cell())
        return result

    def __repr__(self) -> str:
        """Return a string representation of the matrix."""
        return f"{self.__class__.__name__}(shape={tuple(self.shape)})"
