"""Decide which border glyph is drawn at each point of a table's grid."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtable.border import Borders, DirectionFlags, GridPart
from gridtable.ft.utils import fill, str_width

if TYPE_CHECKING:
    from collections.abc import Collection

    from gridtable.cell import Placement

__all__ = [
    "BorderComposer",
    "Borders",
    "boundary_heights",
    "boundary_widths",
]

log = logging.getLogger(__name__)

_TOP = (GridPart.TOP_LEFT, GridPart.TOP_MID, GridPart.TOP_SPLIT, GridPart.TOP_RIGHT)
_SPLIT = (
    GridPart.SPLIT_LEFT,
    GridPart.SPLIT_MID,
    GridPart.SPLIT_SPLIT,
    GridPart.SPLIT_RIGHT,
)
_BOTTOM = (
    GridPart.BOTTOM_LEFT,
    GridPart.BOTTOM_MID,
    GridPart.BOTTOM_SPLIT,
    GridPart.BOTTOM_RIGHT,
)
_LEFT = (
    GridPart.TOP_LEFT,
    GridPart.MID_LEFT,
    GridPart.SPLIT_LEFT,
    GridPart.BOTTOM_LEFT,
)
_CENTER = (
    GridPart.TOP_SPLIT,
    GridPart.MID_SPLIT,
    GridPart.SPLIT_SPLIT,
    GridPart.BOTTOM_SPLIT,
)
_RIGHT = (
    GridPart.TOP_RIGHT,
    GridPart.MID_RIGHT,
    GridPart.SPLIT_RIGHT,
    GridPart.BOTTOM_RIGHT,
)

# The grid part used for a junction, by which of its arms carry a line
_JUNCTIONS: dict[DirectionFlags, GridPart] = {
    DirectionFlags(True, True, True, True): GridPart.SPLIT_SPLIT,
    DirectionFlags(False, True, True, True): GridPart.TOP_SPLIT,
    DirectionFlags(True, True, True, False): GridPart.SPLIT_LEFT,
    DirectionFlags(True, False, True, True): GridPart.SPLIT_RIGHT,
    DirectionFlags(True, True, False, True): GridPart.BOTTOM_SPLIT,
    DirectionFlags(False, True, True, False): GridPart.TOP_LEFT,
    DirectionFlags(False, False, True, True): GridPart.TOP_RIGHT,
    DirectionFlags(True, True, False, False): GridPart.BOTTOM_LEFT,
    DirectionFlags(True, False, False, True): GridPart.BOTTOM_RIGHT,
}


def boundary_widths(
    borders: Borders, n_cols: int, split_cols: Collection[int] | None = None
) -> list[int]:
    """Calculate the width of each vertical boundary between columns.

    The outer boundaries take the width of their widest glyph. Internal
    boundaries do the same if they are selected to carry lines.

    Args:
        borders: The border glyphs
        n_cols: The number of columns in the table
        split_cols: The internal boundaries which carry lines. Boundary ``i`` lies
            to the left of column ``i``. All are used if :py:const:`None`

    Returns:
        A list of ``n_cols + 1`` widths

    """
    widths = []
    for x in range(n_cols + 1):
        if x == 0:
            parts = _LEFT
        elif x == n_cols:
            parts = _RIGHT
        elif split_cols is None or x in split_cols:
            parts = _CENTER
        else:
            parts = ()
        widths.append(borders.width(*parts))
    return widths


def boundary_heights(
    borders: Borders, n_rows: int, split_rows: Collection[int] | None = None
) -> list[int]:
    """Calculate the height of each horizontal boundary between rows.

    A boundary takes up one line if any glyph of its kind is configured.

    Args:
        borders: The border glyphs
        n_rows: The number of rows in the table
        split_rows: The internal boundaries which carry lines. Boundary ``i`` lies
            above row ``i``. All are used if :py:const:`None`

    Returns:
        A list of ``n_rows + 1`` heights

    """
    heights = []
    for y in range(n_rows + 1):
        if y == 0:
            parts = _TOP
        elif y == n_rows:
            parts = _BOTTOM
        elif split_rows is None or y in split_rows:
            parts = _SPLIT
        else:
            parts = ()
        heights.append(int(any(borders.get(part) is not None for part in parts)))
    return heights


class BorderComposer:
    """Choose the border glyphs of a table from the placement of its cells.

    Points and segments of the grid are addressed by boundary index: horizontal
    boundary ``y`` lies above row ``y`` and vertical boundary ``x`` lies to the
    left of column ``x``. A segment is suppressed where the cells on either side
    of it belong to the same span.
    """

    def __init__(
        self,
        coverage: dict[tuple[int, int], Placement],
        n_rows: int,
        n_cols: int,
        borders: Borders,
    ) -> None:
        """Create a new border composer.

        Args:
            coverage: A mapping of every grid coordinate to the cell covering it
            n_rows: The number of rows in the grid
            n_cols: The number of columns in the grid
            borders: The glyphs to draw

        """
        self.coverage = coverage
        self.n_rows = n_rows
        self.n_cols = n_cols
        self.borders = borders

    def _owner(self, row: int, col: int) -> tuple[int, int]:
        placement = self.coverage[row, col]
        return placement.row, placement.col

    def has_h_segment(self, y: int, col: int) -> bool:
        """Determine if the horizontal boundary ``y`` carries a line over a column."""
        if not 0 <= col < self.n_cols:
            return False
        if y in (0, self.n_rows):
            return True
        return self._owner(y - 1, col) != self._owner(y, col)

    def has_v_segment(self, row: int, x: int) -> bool:
        """Determine if the vertical boundary ``x`` carries a line beside a row."""
        if not 0 <= row < self.n_rows:
            return False
        if x in (0, self.n_cols):
            return True
        return self._owner(row, x - 1) != self._owner(row, x)

    def arms(self, y: int, x: int) -> DirectionFlags:
        """Determine which lines meet at a point of the grid."""
        return DirectionFlags(
            north=self.has_v_segment(y - 1, x),
            east=self.has_h_segment(y, x),
            south=self.has_v_segment(y, x),
            west=self.has_h_segment(y, x - 1),
        )

    def junction(self, y: int, x: int) -> GridPart | None:
        """Return the kind of glyph drawn where two boundaries cross.

        Returns:
            The grid part, or :py:const:`None` if the point lies inside a span

        """
        arms = self.arms(y, x)
        if not any(arms):
            return None
        if (part := _JUNCTIONS.get(arms)) is not None:
            return part
        # Straight lines
        if not (arms.east or arms.west):
            return self._vertical_part(x)
        return self._horizontal_part(y)

    def horizontal(self, y: int, col: int) -> GridPart | None:
        """Return the kind of glyph drawn along a horizontal boundary over a column.

        Returns:
            The grid part, or :py:const:`None` if the segment lies inside a span

        """
        return self._horizontal_part(y) if self.has_h_segment(y, col) else None

    def vertical(self, row: int, x: int) -> GridPart | None:
        """Return the kind of glyph drawn along a vertical boundary beside a row.

        Returns:
            The grid part, or :py:const:`None` if the segment lies inside a span

        """
        return self._vertical_part(x) if self.has_v_segment(row, x) else None

    def _horizontal_part(self, y: int) -> GridPart:
        if y == 0:
            return GridPart.TOP_MID
        if y == self.n_rows:
            return GridPart.BOTTOM_MID
        return GridPart.SPLIT_MID

    def _vertical_part(self, x: int) -> GridPart:
        if x == 0:
            return GridPart.MID_LEFT
        if x == self.n_cols:
            return GridPart.MID_RIGHT
        return GridPart.MID_SPLIT

    def draw(self, part: GridPart, width: int, repeat: bool = False) -> str:
        """Draw a glyph so it exactly fills a given width.

        Args:
            part: The kind of glyph to draw
            width: The display width to fill
            repeat: If :py:const:`True`, the glyph is repeated to fill the width.
                Otherwise it is drawn once and padded with spaces

        Returns:
            The drawn text. Positions without a configured glyph are blank

        """
        glyph = self.borders.get(part)
        if glyph is None or width <= 0:
            return " " * max(width, 0)
        if repeat:
            return fill(glyph, width)
        text = ""
        for char in glyph:
            if str_width(text + char) > width:
                break
            text += char
        return text + " " * (width - str_width(text))
