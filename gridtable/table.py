"""Render a matrix of cells as a bordered table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtable.border import GridPart
from gridtable.cell import Matrix
from gridtable.compose import BorderComposer
from gridtable.config import TableStyle
from gridtable.format import format_cell
from gridtable.ft.utils import fragment_list_to_str, join_lines
from gridtable.layout import resolve_dimensions

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    from gridtable.cell import CellLike

log = logging.getLogger(__name__)

BORDER_STYLE = "class:table.border"


def _empty_frame(style: TableStyle) -> list[StyleAndTextTuples]:
    """Draw the frame of a table without any rows or columns."""
    borders = style.borders
    lines = []
    for parts in (
        (GridPart.TOP_LEFT, GridPart.TOP_RIGHT),
        (GridPart.BOTTOM_LEFT, GridPart.BOTTOM_RIGHT),
    ):
        text = "".join(borders.get(part) or "" for part in parts)
        if text:
            lines.append([(BORDER_STYLE, text)])
    return lines


def render_lines(
    matrix: Matrix, style: TableStyle | None = None
) -> list[StyleAndTextTuples]:
    """Render a table as a list of lines of formatted text.

    The grid is walked from top to bottom. Each horizontal boundary is drawn once
    between the rows it separates, and each line of a row is made up of its
    vertical boundaries and the lines of the cells in it. A spanning cell's
    block is drawn where its first column starts, and covers the columns, rows
    and internal boundaries it spans.

    Args:
        matrix: The cells of the table
        style: The table style. The default style is used if not given

    Returns:
        The lines of the table, all of the same display width

    Raises:
        SpanError: If cell spans overlap or extend outside the table
        ConstraintError: If size constraints are contradictory

    """
    if style is None:
        style = TableStyle()
    # Constraints are checked even for empty tables
    style.validate()
    n_rows, n_cols = matrix.shape
    if not n_rows or not n_cols:
        log.debug("Rendering empty table")
        return _empty_frame(style) if style.empty_frame else []

    dims = resolve_dimensions(matrix, style)
    coverage = dims.coverage
    composer = BorderComposer(coverage, n_rows, n_cols, style.borders)

    blocks: dict[tuple[int, int], list[StyleAndTextTuples]] = {}
    for placement in coverage.values():
        anchor = placement.row, placement.col
        if anchor not in blocks:
            blocks[anchor] = format_cell(placement, dims, style)

    # The first output line of each row
    row_starts = []
    y_pos = 0
    for row in range(n_rows):
        y_pos += dims.hborders[row]
        row_starts.append(y_pos)
        y_pos += dims.row_heights[row]

    def draw_line(y: int | None, row: int | None, index: int) -> StyleAndTextTuples:
        """Draw one line of the table.

        Args:
            y: The horizontal boundary being drawn, if this is a border line
            row: The row being drawn, if this is a content line
            index: The output line number

        """
        line: StyleAndTextTuples = []
        drawn: set[tuple[int, int]] = set()

        def draw_block(coord: tuple[int, int]) -> None:
            placement = coverage[coord]
            anchor = placement.row, placement.col
            if anchor not in drawn:
                drawn.add(anchor)
                line.extend(blocks[anchor][index - row_starts[placement.row]])

        for x in range(n_cols + 1):
            # Vertical boundary
            if y is not None:
                if (part := composer.junction(y, x)) is None:
                    draw_block((y, x))
                elif text := composer.draw(part, dims.vborders[x]):
                    line.append((BORDER_STYLE, text))
            else:
                assert row is not None
                if (part := composer.vertical(row, x)) is None:
                    draw_block((row, x))
                elif text := composer.draw(part, dims.vborders[x]):
                    line.append((BORDER_STYLE, text))
            if x == n_cols:
                break
            # Column
            if y is not None:
                if (part := composer.horizontal(y, x)) is None:
                    draw_block((y, x))
                else:
                    line.append(
                        (
                            BORDER_STYLE,
                            composer.draw(part, dims.col_widths[x], repeat=True),
                        )
                    )
            else:
                assert row is not None
                draw_block((row, x))
        return line

    lines: list[StyleAndTextTuples] = []
    for y in range(n_rows + 1):
        if dims.hborders[y]:
            lines.append(draw_line(y, None, len(lines)))
        if y < n_rows:
            for _ in range(dims.row_heights[y]):
                lines.append(draw_line(None, y, len(lines)))
    return lines


def render(matrix: Matrix, style: TableStyle | None = None) -> str:
    """Render a table as a string.

    Args:
        matrix: The cells of the table
        style: The table style. The default style is used if not given

    Returns:
        The rendered table, with lines separated by the style's line ending

    """
    if style is None:
        style = TableStyle()
    return style.line_ending.join(
        fragment_list_to_str(line) for line in render_lines(matrix, style)
    )


class Table:
    """A table of cells with a style."""

    def __init__(
        self,
        data: Matrix | Iterable[Iterable[CellLike]] = (),
        style: TableStyle | None = None,
        **kwargs: Any,
    ) -> None:
        """Create a new table.

        Args:
            data: A matrix, or rows of cells from which to create one
            style: The table style
            kwargs: Changes to make to the table style

        """
        self.matrix = data if isinstance(data, Matrix) else Matrix(data)
        style = style or TableStyle()
        self.style = style.replace(**kwargs) if kwargs else style

    def render_lines(self) -> list[StyleAndTextTuples]:
        """Render the table as a list of lines of formatted text."""
        return render_lines(self.matrix, self.style)

    def render(self) -> str:
        """Render the table as a string."""
        return render(self.matrix, self.style)

    def __str__(self) -> str:
        """Render the table as a string."""
        return self.render()

    def __pt_formatted_text__(self) -> StyleAndTextTuples:
        """Render the table as formatted text."""
        return join_lines(self.render_lines())

    def __repr__(self) -> str:
        """Return a string representation of the table."""
        return f"{self.__class__.__name__}({self.matrix!r})"
