"""Fit cell text into the space given to it by the table layout."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtable.config import Overflow
from gridtable.ft.utils import (
    FormattedTextVerticalAlign,
    align,
    balance_sgr,
    fill,
    fragment_list_width,
    is_zero_width,
    str_width,
    truncate,
    wrap,
)

if TYPE_CHECKING:
    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    from gridtable.cell import Cell, Placement
    from gridtable.config import TableStyle
    from gridtable.data_structures import DiInt
    from gridtable.layout import ResolvedDimensions

log = logging.getLogger(__name__)


def cell_padding(cell: Cell, style: TableStyle) -> DiInt:
    """Return the padding which applies to a cell."""
    return style.padding if cell.padding is None else cell.padding


def fit_lines(cell: Cell, width: int, style: TableStyle) -> list[StyleAndTextTuples]:
    """Wrap or truncate each line of a cell so none is wider than ``width``."""
    lines: list[StyleAndTextTuples] = []
    # Styles opened on one line of the cell are closed before the line ends
    for line in balance_sgr(cell.lines):
        if style.overflow == Overflow.WRAP:
            lines.extend(wrap(line, width, keep_words=style.keep_words))
        else:
            lines.append(truncate(line, width, placeholder=style.ellipsis))
    return lines


def _mark_truncated(
    line: StyleAndTextTuples, width: int, ellipsis: str
) -> StyleAndTextTuples:
    """Add an ellipsis to the end of a line, shortening it to make room."""
    if not ellipsis or (ellipsis_width := str_width(ellipsis)) > width:
        return line
    if fragment_list_width(line) + ellipsis_width > width:
        line = truncate(line, width - ellipsis_width)
    return [*line, ("", ellipsis)]


def format_cell(
    placement: Placement,
    dims: ResolvedDimensions,
    style: TableStyle,
) -> list[StyleAndTextTuples]:
    """Lay out the content of a cell in its block of the table.

    The block covers every column and row the cell spans, including the internal
    borders between them.

    Args:
        placement: The cell and its position
        dims: The resolved sizes of the table's columns, rows and borders
        style: The table style

    Returns:
        The lines of the block, each exactly as wide as the block

    """
    cell = placement.cell
    width = dims.block_width(placement)
    height = dims.block_height(placement)
    padding = cell_padding(cell, style)

    # Padding is reduced if the block is too small to hold it
    left = min(padding.left, width)
    right = min(padding.right, width - left)
    top = min(padding.top, height)
    bottom = min(padding.bottom, height - top)
    box_width = width - left - right
    box_height = height - top - bottom

    lines = dims.lines.get((placement.row, placement.col))
    if lines is None:
        lines = fit_lines(cell, box_width, style)

    # Vertical overflow, only possible where a row height is constrained
    if len(lines) > box_height:
        log.debug(
            "Truncating cell at (%d, %d) from %d to %d lines",
            placement.row,
            placement.col,
            len(lines),
            box_height,
        )
        lines, dropped = lines[:box_height], lines[box_height:]
        if lines:
            # Keep escapes from the dropped lines so nothing is left unterminated
            lines[-1] = [
                *_mark_truncated(lines[-1], box_width, style.ellipsis),
                *(frag for line in dropped for frag in line if is_zero_width(frag[0])),
            ]
    else:
        extra = box_height - len(lines)
        valign = cell.valign or style.valign
        if valign == FormattedTextVerticalAlign.TOP:
            above = 0
        elif valign == FormattedTextVerticalAlign.MIDDLE:
            above = extra // 2
        else:
            above = extra
        lines = [
            *([] for _ in range(above)),
            *lines,
            *([] for _ in range(extra - above)),
        ]

    how = cell.align or style.align
    pad_left = [("", fill(style.padding_char.left, left))] if left else []
    pad_right = [("", fill(style.padding_char.right, right))] if right else []
    lines = [
        [*pad_left, *align(line, how, box_width, char=style.fill_char), *pad_right]
        for line in lines
    ]
    lines = [
        *([("", fill(style.padding_char.top, width))] for _ in range(top)),
        *lines,
        *([("", fill(style.padding_char.bottom, width))] for _ in range(bottom)),
    ]

    if style.decorate is not None:
        lines = [style.decorate(placement, i, line) for i, line in enumerate(lines)]
    return lines
