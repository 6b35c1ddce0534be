"""Resolve the widths of a table's columns and the heights of its rows."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from gridtable.compose import boundary_heights, boundary_widths
from gridtable.config import ConstraintError
from gridtable.format import cell_padding, fit_lines

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    from gridtable.cell import Matrix, Placement
    from gridtable.config import TableStyle

log = logging.getLogger(__name__)


class ResolvedDimensions(NamedTuple):
    """The sizes of every column, row and boundary of a table.

    Column widths include horizontal cell padding and row heights include
    vertical cell padding. ``vborders[x]`` is the width of the boundary to the
    left of column ``x`` and ``hborders[y]`` the height of the boundary above
    row ``y``.
    """

    col_widths: list[int]
    row_heights: list[int]
    vborders: list[int]
    hborders: list[int]
    coverage: dict[tuple[int, int], Placement]
    lines: dict[tuple[int, int], list[StyleAndTextTuples]]

    @property
    def width(self) -> int:
        """The total display width of the table."""
        return sum(self.col_widths) + sum(self.vborders)

    @property
    def height(self) -> int:
        """The total number of lines in the table."""
        return sum(self.row_heights) + sum(self.hborders)

    def block_width(self, placement: Placement) -> int:
        """The width of the columns a cell spans and the borders between them."""
        return _span_size(
            self.col_widths, self.vborders, placement.col, placement.cell.colspan
        )

    def block_height(self, placement: Placement) -> int:
        """The height of the rows a cell spans and the borders between them."""
        return _span_size(
            self.row_heights, self.hborders, placement.row, placement.cell.rowspan
        )


def _span_size(
    sizes: Sequence[int], borders: Sequence[int], start: int, span: int
) -> int:
    return sum(sizes[start : start + span]) + sum(borders[start + 1 : start + span])


def distribute(sizes: list[int], start: int, span: int, amount: int) -> None:
    """Grow a run of sizes by a total amount, in proportion to their current values.

    Shares are rounded down and the remainder handed out by largest fractional
    part, ties going to the lowest index. If every size is zero, the amount is
    shared equally.

    Args:
        sizes: The list of sizes to modify
        start: The index of the first size to grow
        span: The number of sizes to grow
        amount: The total amount to add

    """
    current = sizes[start : start + span]
    weights = current if any(current) else [1] * span
    total = sum(weights)
    shares = [amount * weight // total for weight in weights]
    remainders = [amount * weight % total for weight in weights]
    order = sorted(range(span), key=lambda i: (-remainders[i], i))
    for i in order[: amount - sum(shares)]:
        shares[i] += 1
    for i, share in enumerate(shares):
        sizes[start + i] += share


def _resolve_spans(
    sizes: list[int],
    borders: list[int],
    placements: Sequence[Placement],
    natural: Callable[[Placement], int],
    axis: str,
) -> None:
    """Seed sizes from single cells, then grow them to fit spanning cells.

    Args:
        sizes: The list of sizes to modify
        borders: The sizes of the boundaries between them
        placements: The placed cells
        natural: A function giving the size a cell needs
        axis: ``"col"`` or ``"row"``

    """

    def start(p: Placement) -> int:
        return p.col if axis == "col" else p.row

    def span(p: Placement) -> int:
        return p.cell.colspan if axis == "col" else p.cell.rowspan

    for p in placements:
        if span(p) == 1:
            sizes[start(p)] = max(sizes[start(p)], natural(p))

    # Smaller spans first, so larger spans see the sizes they depend on
    for p in sorted(
        (p for p in placements if span(p) > 1),
        key=lambda p: (span(p), p.row, p.col),
    ):
        deficit = natural(p) - _span_size(sizes, borders, start(p), span(p))
        if deficit > 0:
            log.debug(
                "Growing %ss %d-%d by %d for cell at (%d, %d)",
                axis,
                start(p),
                start(p) + span(p) - 1,
                deficit,
                p.row,
                p.col,
            )
            distribute(sizes, start(p), span(p), deficit)


def _validate(matrix: Matrix, style: TableStyle) -> dict[tuple[int, int], Placement]:
    """Check the matrix and every constraint before anything is resolved."""
    coverage = matrix.coverage()
    style.validate()
    for p in {(p.row, p.col): p for p in coverage.values()}.values():
        if p.cell.width is not None:
            p.cell.width.validate(f"Cell at ({p.row}, {p.col}) width")
        if any(x < 0 for x in cell_padding(p.cell, style)):
            raise ConstraintError(f"Cell at ({p.row}, {p.col}) has negative padding")
    return coverage


def _fit_budget(
    col_widths: list[int],
    minimums: list[int],
    vborders: list[int],
    style: TableStyle,
) -> None:
    """Contract or expand columns to fit the table's width budget."""
    smallest, largest = style.width_range

    def total_width() -> int:
        return sum(col_widths) + sum(vborders)

    if largest is not None and total_width() > largest:
        # Reduce the widest column until we fit in available width
        while total_width() > largest:
            candidates = [
                (i, width)
                for i, width in enumerate(col_widths)
                if width > minimums[i]
            ]
            if not candidates:
                log.debug(
                    "Table width %d cannot be reduced to %d", total_width(), largest
                )
                break
            idxmax = max(candidates, key=lambda x: x[1])[0]
            col_widths[idxmax] -= 1

    if total_width() < smallest:
        # Expand only columns which do not have a width set if possible
        free = [i for i in range(len(col_widths)) if i not in style.col_widths]
        if not free:
            free = [
                i
                for i, size in style.col_widths.items()
                if 0 <= i < len(col_widths)
                and size.fixed is None
                and size.percent is None
            ]
        while free and total_width() < smallest:
            candidates = [
                (i, col_widths[i])
                for i in free
                if (size := style.col_widths.get(i)) is None
                or size.max is None
                or col_widths[i] < size.max
            ]
            if not candidates:
                break
            idxmin = min(candidates, key=lambda x: x[1])[0]
            col_widths[idxmin] += 1


def resolve_dimensions(matrix: Matrix, style: TableStyle) -> ResolvedDimensions:
    """Calculate the size of every column and row of a table.

    Column widths are resolved first: single-column cells set a baseline,
    spanning cells grow the columns they cover, column constraints are applied,
    and the table is fitted to its width budget. Each cell's text is then fitted
    to its final width to find the row heights, which are resolved in the same
    way.

    Args:
        matrix: The cells of the table
        style: The table style

    Returns:
        The resolved dimensions

    Raises:
        SpanError: If cell spans overlap or extend outside the table
        ConstraintError: If size constraints are contradictory

    """
    coverage = _validate(matrix, style)
    n_rows, n_cols = matrix.shape
    placements = sorted(
        {(p.row, p.col): p for p in coverage.values()}.values(),
        key=lambda p: (p.row, p.col),
    )
    vborders = boundary_widths(style.borders, n_cols, style.split_cols)
    hborders = boundary_heights(style.borders, n_rows, style.split_rows)
    budget = style.width_range[1]

    # Column widths
    def natural_width(p: Placement) -> int:
        width = p.cell.content_width + cell_padding(p.cell, style).horizontal
        if p.cell.width is not None:
            width = p.cell.width.clamp(width, budget)
        return width

    col_widths = [0] * n_cols
    _resolve_spans(col_widths, vborders, placements, natural_width, "col")

    for col, size in style.col_widths.items():
        if 0 <= col < n_cols:
            if size.percent is not None and budget is None:
                log.debug("Ignoring percentage width of column %d without budget", col)
            col_widths[col] = size.clamp(col_widths[col], budget)

    # Columns do not shrink below their minimum content width plus padding
    paddings = [0] * n_cols
    for p in placements:
        if p.cell.colspan == 1:
            paddings[p.col] = max(
                paddings[p.col], cell_padding(p.cell, style).horizontal
            )
    minimums = []
    for col in range(n_cols):
        size = style.col_widths.get(col)
        if size is not None and (size.fixed is not None or size.percent is not None):
            minimum = col_widths[col]
        elif size is not None and size.min is not None:
            minimum = size.min
        else:
            minimum = paddings[col] + style.min_col_width
        minimums.append(min(minimum, col_widths[col]))
    _fit_budget(col_widths, minimums, vborders, style)

    # Row heights, from text fitted to the final column widths
    lines: dict[tuple[int, int], list[StyleAndTextTuples]] = {}
    heights: dict[tuple[int, int], int] = {}
    for p in placements:
        padding = cell_padding(p.cell, style)
        box_width = max(
            0,
            _span_size(col_widths, vborders, p.col, p.cell.colspan)
            - padding.horizontal,
        )
        lines[p.row, p.col] = fitted = fit_lines(p.cell, box_width, style)
        heights[p.row, p.col] = len(fitted) + padding.vertical

    row_heights = [0] * n_rows
    _resolve_spans(
        row_heights, hborders, placements, lambda p: heights[p.row, p.col], "row"
    )
    for row, size in style.row_heights.items():
        if 0 <= row < n_rows:
            row_heights[row] = size.clamp(row_heights[row])

    return ResolvedDimensions(
        col_widths=col_widths,
        row_heights=row_heights,
        vborders=vborders,
        hborders=hborders,
        coverage=coverage,
        lines=lines,
    )
