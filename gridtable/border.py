"""Define border line styles and the glyphs used to draw table grids."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache, total_ordering
from typing import NamedTuple

from prompt_toolkit.cache import FastDictCache
from prompt_toolkit.utils import get_cwidth


class GridPart(Enum):
    """Define the component characters of a grid.

    Character naming works as follows:

                ╭┈┈┈┈┈┈┈┈LEFT
                ┊ ╭┈┈┈┈┈┈MID
                ┊ ┊ ╭┈┈┈┈SPLIT
                ┊ ┊ ┊ ╭┈┈RIGHT
                ∨ ∨ ∨ v
          TOP┈> ┏ ━ ┳ ┓
          MID┈> ┃   ┃ ┃
        SPLIT┈> ┣ ━ ╋ ┫
       BOTTOM┈> ┗ ━ ┻ ┛

    """  # noqa: RUF002

    TOP_LEFT = 0
    TOP_MID = 1
    TOP_SPLIT = 2
    TOP_RIGHT = 3
    MID_LEFT = 4
    MID_MID = 5
    MID_SPLIT = 6
    MID_RIGHT = 7
    SPLIT_LEFT = 8
    SPLIT_MID = 9
    SPLIT_SPLIT = 10
    SPLIT_RIGHT = 11
    BOTTOM_LEFT = 12
    BOTTOM_MID = 13
    BOTTOM_SPLIT = 14
    BOTTOM_RIGHT = 15


class DirectionFlags(NamedTuple):
    """Flag which indicate the connection of a grid node."""

    north: bool = False
    east: bool = False
    south: bool = False
    west: bool = False


class Mask:
    """A mask which selects a subset of a grid's parts.

    Masks can be added together to construct more complex masks.
    """

    def __init__(self, mask: dict[GridPart, DirectionFlags]) -> None:
        """Create a new grid mask.

        Args:
            mask: A dictionary mapping grid parts to a tuple of direction flags.
                Parts which are not given have no connections.

        """
        self.mask = {part: mask.get(part, DirectionFlags()) for part in GridPart}

    def __add__(self, other: Mask) -> Mask:
        """Combine the direction flags of two masks."""
        return Mask(
            {
                key: DirectionFlags(
                    *(self.mask[key][i] | other.mask[key][i] for i in range(4))
                )
                for key in GridPart
            }
        )


# Arms of the four parts along a horizontal and a vertical edge
_ALONG_ROW = (
    DirectionFlags(east=True),
    DirectionFlags(east=True, west=True),
    DirectionFlags(east=True, west=True),
    DirectionFlags(west=True),
)
_ALONG_COL = (
    DirectionFlags(south=True),
    DirectionFlags(north=True, south=True),
    DirectionFlags(north=True, south=True),
    DirectionFlags(north=True),
)


def _edge(first: GridPart, step: int, flags: tuple[DirectionFlags, ...]) -> Mask:
    """Create a mask of four parts, ``step`` apart in :class:`GridPart` order."""
    parts = list(GridPart)
    return Mask(
        {parts[first.value + i * step]: flag for i, flag in enumerate(flags)}
    )


class Masks:
    """The standard regions of a grid."""

    top_edge = _edge(GridPart.TOP_LEFT, 1, _ALONG_ROW)
    middle_edge = _edge(GridPart.SPLIT_LEFT, 1, _ALONG_ROW)
    bottom_edge = _edge(GridPart.BOTTOM_LEFT, 1, _ALONG_ROW)
    left_edge = _edge(GridPart.TOP_LEFT, 4, _ALONG_COL)
    center_edge = _edge(GridPart.TOP_SPLIT, 4, _ALONG_COL)
    right_edge = _edge(GridPart.TOP_RIGHT, 4, _ALONG_COL)

    inner = center_edge + middle_edge
    outer = top_edge + right_edge + bottom_edge + left_edge
    grid = inner + outer


@total_ordering
class LineStyle:
    """A kind of line from which border glyphs are drawn.

    Accessing the name of one of the :class:`Masks` on a line style returns the
    :class:`GridStyle` drawing that region in this line, e.g. ``ThinLine.outer``.
    """

    _grid_cache: FastDictCache[tuple[LineStyle, Mask], GridStyle] = FastDictCache(
        get_value=lambda line, mask: GridStyle(line, mask)
    )

    def __init__(
        self,
        name: str,
        rank: tuple[int, int],
        parent: LineStyle | None = None,
        visible: bool = True,
    ) -> None:
        """Create a new line style.

        Args:
            name: A name for the line style
            rank: The line's weight and its decoration. Where two lines meet, the
                higher ranked one is drawn
            parent: The line style whose glyphs are used where this style has none
            visible: Whether the line is drawn at all

        """
        self.name = name
        self.rank = rank
        self.parent = parent
        self.visible = visible

    def __getattr__(self, value: str) -> GridStyle:
        """Draw a mask from :class:`Masks` in this line style.

        Raises:
            AttributeError: If there is no mask with the given name

        """
        if value.startswith("_") or not isinstance(
            mask := getattr(Masks, value, None), Mask
        ):
            raise AttributeError(f"No such attribute `{value}`")
        return self._grid_cache[self, mask]

    def __lt__(self, other: LineStyle) -> bool:
        """Order line styles by rank."""
        if isinstance(other, LineStyle):
            return self.rank < other.rank
        return NotImplemented

    def __repr__(self) -> str:
        """Return a string representation of the line style."""
        return f"LineStyle({self.name})"


NoLine = LineStyle("None", rank=(0, 0), visible=False)
AsciiLine = LineStyle("Ascii", rank=(1, 0))
ThinLine = LineStyle("Thin", rank=(1, 4), parent=AsciiLine)
RoundedLine = LineStyle("Rounded", rank=(1, 5), parent=ThinLine)
ThickLine = LineStyle("Thick", rank=(3, 4), parent=ThinLine)
DoubleLine = LineStyle("Double", rank=(3, 5), parent=ThickLine)


class GridChar(NamedTuple):
    """The line styles meeting at a point of a grid, by compass direction."""

    north: LineStyle
    east: LineStyle
    south: LineStyle
    west: LineStyle


# fmt: off
_GRID_CHARS = {
    # NONE
    GridChar(NoLine, NoLine, NoLine, NoLine): " ",
    # AsciiLine
    GridChar(AsciiLine, NoLine, AsciiLine, NoLine): "|",
    GridChar(NoLine, AsciiLine, NoLine, AsciiLine): "-",
    GridChar(AsciiLine, AsciiLine, NoLine, NoLine): "+",
    GridChar(NoLine, AsciiLine, AsciiLine, NoLine): "+",
    GridChar(NoLine, NoLine, AsciiLine, AsciiLine): "+",
    GridChar(AsciiLine, NoLine, NoLine, AsciiLine): "+",
    GridChar(AsciiLine, AsciiLine, AsciiLine, NoLine): "+",
    GridChar(NoLine, AsciiLine, AsciiLine, AsciiLine): "+",
    GridChar(AsciiLine, NoLine, AsciiLine, AsciiLine): "+",
    GridChar(AsciiLine, AsciiLine, NoLine, AsciiLine): "+",
    GridChar(AsciiLine, AsciiLine, AsciiLine, AsciiLine): "+",
    # ThinLine
    GridChar(ThinLine, NoLine, ThinLine, NoLine): "│",
    GridChar(NoLine, ThinLine, NoLine, ThinLine): "─",
    GridChar(ThinLine, ThinLine, NoLine, NoLine): "└",
    GridChar(NoLine, ThinLine, ThinLine, NoLine): "┌",
    GridChar(NoLine, NoLine, ThinLine, ThinLine): "┐",
    GridChar(ThinLine, NoLine, NoLine, ThinLine): "┘",
    GridChar(ThinLine, ThinLine, ThinLine, NoLine): "├",
    GridChar(NoLine, ThinLine, ThinLine, ThinLine): "┬",
    GridChar(ThinLine, NoLine, ThinLine, ThinLine): "┤",
    GridChar(ThinLine, ThinLine, NoLine, ThinLine): "┴",
    GridChar(ThinLine, ThinLine, ThinLine, ThinLine): "┼",
    # RoundedLine
    GridChar(RoundedLine, RoundedLine, NoLine, NoLine): "╰",
    GridChar(NoLine, RoundedLine, RoundedLine, NoLine): "╭",
    GridChar(NoLine, NoLine, RoundedLine, RoundedLine): "╮",
    GridChar(RoundedLine, NoLine, NoLine, RoundedLine): "╯",
    # DoubleLine
    GridChar(DoubleLine, NoLine, DoubleLine, NoLine): "║",
    GridChar(NoLine, DoubleLine, NoLine, DoubleLine): "═",
    GridChar(DoubleLine, DoubleLine, NoLine, NoLine): "╚",
    GridChar(NoLine, DoubleLine, DoubleLine, NoLine): "╔",
    GridChar(NoLine, NoLine, DoubleLine, DoubleLine): "╗",
    GridChar(DoubleLine, NoLine, NoLine, DoubleLine): "╝",
    GridChar(DoubleLine, DoubleLine, DoubleLine, NoLine): "╠",
    GridChar(NoLine, DoubleLine, DoubleLine, DoubleLine): "╦",
    GridChar(DoubleLine, NoLine, DoubleLine, DoubleLine): "╣",
    GridChar(DoubleLine, DoubleLine, NoLine, DoubleLine): "╩",
    GridChar(DoubleLine, DoubleLine, DoubleLine, DoubleLine): "╬",
    # DoubleLine / ThinLine
    GridChar(ThinLine, DoubleLine, ThinLine, DoubleLine): "╪",
    GridChar(DoubleLine, ThinLine, DoubleLine, ThinLine): "╫",
    GridChar(NoLine, DoubleLine, ThinLine, DoubleLine): "╤",
    GridChar(ThinLine, DoubleLine, NoLine, DoubleLine): "╧",
    GridChar(DoubleLine, ThinLine, DoubleLine, NoLine): "╟",
    GridChar(DoubleLine, NoLine, DoubleLine, ThinLine): "╢",
    GridChar(ThinLine, DoubleLine, ThinLine, NoLine): "╞",
    GridChar(ThinLine, NoLine, ThinLine, DoubleLine): "╡",
    GridChar(NoLine, ThinLine, DoubleLine, ThinLine): "╥",
    GridChar(DoubleLine, ThinLine, NoLine, ThinLine): "╨",
    # ThickLine
    GridChar(ThickLine, NoLine, ThickLine, NoLine): "┃",
    GridChar(NoLine, ThickLine, NoLine, ThickLine): "━",
    GridChar(ThickLine, ThickLine, NoLine, NoLine): "┗",
    GridChar(NoLine, ThickLine, ThickLine, NoLine): "┏",
    GridChar(NoLine, NoLine, ThickLine, ThickLine): "┓",
    GridChar(ThickLine, NoLine, NoLine, ThickLine): "┛",
    GridChar(ThickLine, ThickLine, ThickLine, NoLine): "┣",
    GridChar(NoLine, ThickLine, ThickLine, ThickLine): "┳",
    GridChar(ThickLine, NoLine, ThickLine, ThickLine): "┫",
    GridChar(ThickLine, ThickLine, NoLine, ThickLine): "┻",
    GridChar(ThickLine, ThickLine, ThickLine, ThickLine): "╋",
    # ThickLine / ThinLine
    GridChar(ThinLine, ThickLine, ThinLine, ThickLine): "┿",
    GridChar(ThickLine, ThinLine, ThickLine, ThinLine): "╂",
    GridChar(NoLine, ThickLine, ThinLine, ThickLine): "┯",
    GridChar(ThinLine, ThickLine, NoLine, ThickLine): "┷",
    GridChar(ThickLine, ThinLine, ThickLine, NoLine): "┠",
    GridChar(ThickLine, NoLine, ThickLine, ThinLine): "┨",
}
# fmt: on


@lru_cache
def get_grid_char(key: GridChar) -> str:
    """Return the character represented by a combination of :class:`LineStyle`s."""
    if key in _GRID_CHARS:
        return _GRID_CHARS[key]
    # Replace the highest ranked line which has a parent with that parent until a
    # character is found
    arms = list(key)
    while any(line.parent for line in arms):
        idx = max(
            (i for i, line in enumerate(arms) if line.parent),
            key=lambda i: arms[i].rank,
        )
        parent = arms[idx].parent
        assert parent is not None
        arms[idx] = parent
        if (char := _GRID_CHARS.get(GridChar(*arms))) is not None:
            return char
    return " "


class GridStyle:
    """The line styles meeting at each of the sixteen parts of a grid."""

    _sum_cache: FastDictCache[tuple[GridStyle, GridStyle], GridStyle] = (
        FastDictCache(get_value=lambda a, b: a._merge(b))
    )

    def __init__(self, line_style: LineStyle = NoLine, mask: Mask = Masks.grid) -> None:
        """Draw the arms selected by a mask in a single line style.

        Args:
            line_style: The line style of every selected arm
            mask: Selects which arms of each part carry a line
        """
        self.grid = {
            part: GridChar(*(line_style if arm else NoLine for arm in arms))
            for part, arms in mask.mask.items()
        }

    def _merge(self, other: GridStyle) -> GridStyle:
        """Create a grid keeping the higher ranked line of each arm."""
        merged = GridStyle()
        merged.grid = {
            part: GridChar(*map(max, self.grid[part], other.grid[part]))
            for part in GridPart
        }
        return merged

    def __getattr__(self, value: str) -> str:
        """Return the glyph of a grid part given by name."""
        if value.startswith("_") or value not in GridPart.__members__:
            raise AttributeError(f"No such attribute `{value}`")
        return get_grid_char(self.grid[GridPart[value]])

    def __add__(self, other: GridStyle) -> GridStyle:
        """Overlay two grid styles."""
        return self._sum_cache[self, other]

    def __repr__(self) -> str:
        """Draw the grid's glyphs as a small grid."""
        chars = [get_grid_char(self.grid[part]) for part in GridPart]
        return "\n".join("".join(chars[i * 4 : (i + 1) * 4]) for i in range(4))


class Borders(NamedTuple):
    """The glyph drawn at each kind of border position.

    Each field corresponds to a :class:`GridPart`. A value of :py:const:`None`
    means nothing is drawn at that position.
    """

    top_left: str | None = None
    top_mid: str | None = None
    top_split: str | None = None
    top_right: str | None = None
    mid_left: str | None = None
    mid_mid: str | None = None
    mid_split: str | None = None
    mid_right: str | None = None
    split_left: str | None = None
    split_mid: str | None = None
    split_split: str | None = None
    split_right: str | None = None
    bottom_left: str | None = None
    bottom_mid: str | None = None
    bottom_split: str | None = None
    bottom_right: str | None = None

    @classmethod
    def from_grid(cls, grid: GridStyle) -> Borders:
        """Create borders from a grid style, omitting parts without any lines."""
        return cls(
            *(
                get_grid_char(key) if any(line.visible for line in key) else None
                for key in (grid.grid[part] for part in GridPart)
            )
        )

    @classmethod
    def from_mapping(cls, mapping: dict[str, str | None]) -> Borders:
        """Create borders from a mapping of part names to glyphs."""
        return cls(**{key.lower(): value for key, value in mapping.items()})

    def get(self, part: GridPart) -> str | None:
        """Return the glyph for a grid part."""
        return self[part.value]

    def width(self, *parts: GridPart) -> int:
        """Return the widest glyph display width among the given parts."""
        return max(
            (
                sum(get_cwidth(c) for c in glyph)
                for glyph in (self.get(part) for part in parts)
                if glyph is not None
            ),
            default=0,
        )

    def __repr__(self) -> str:
        """Draw the borders as a small grid."""
        chars = [self.get(part) or " " for part in GridPart]
        return "\n".join("".join(chars[i * 4 : (i + 1) * 4]) for i in range(4))


ASCII = Borders.from_grid(AsciiLine.grid)
THIN = Borders.from_grid(ThinLine.grid)
ROUNDED = Borders.from_grid(RoundedLine.outer + ThinLine.inner)
THICK = Borders.from_grid(ThickLine.grid)
DOUBLE = Borders.from_grid(DoubleLine.grid)
HEAVY_FRAME = Borders.from_grid(DoubleLine.outer + ThinLine.inner)
MARKDOWN = Borders(
    mid_left="|",
    mid_split="|",
    mid_right="|",
    split_left="|",
    split_mid="-",
    split_split="|",
    split_right="|",
)
PSQL = Borders(mid_split="|", split_mid="-", split_split="+")
BLANK = Borders(mid_split=" ")
NONE = Borders()

PRESETS: dict[str, Borders] = {
    "ascii": ASCII,
    "thin": THIN,
    "rounded": ROUNDED,
    "thick": THICK,
    "double": DOUBLE,
    "heavy_frame": HEAVY_FRAME,
    "markdown": MARKDOWN,
    "psql": PSQL,
    "blank": BLANK,
    "none": NONE,
}
