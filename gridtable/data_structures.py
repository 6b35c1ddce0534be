"""Small tuples describing the sides and extents of cells."""

from __future__ import annotations

from typing import NamedTuple


class DiInt(NamedTuple):
    """An integer for each side of a box."""

    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0

    @classmethod
    def from_value(cls, value: int) -> DiInt:
        """Use the same value for every side."""
        return cls(top=value, right=value, bottom=value, left=value)

    @property
    def horizontal(self) -> int:
        """The combined size of the left and right edges."""
        return self.left + self.right

    @property
    def vertical(self) -> int:
        """The combined size of the top and bottom edges."""
        return self.top + self.bottom


class DiStr(NamedTuple):
    """A string for each side of a box."""

    top: str = ""
    right: str = ""
    bottom: str = ""
    left: str = ""

    @classmethod
    def from_value(cls, value: str) -> DiStr:
        """Use the same value for every side."""
        return cls(top=value, right=value, bottom=value, left=value)


def to_diint(value: DiInt | int | tuple[int, ...]) -> DiInt:
    """Convert an integer or a CSS-like sequence of integers to a :class:`DiInt`.

    Sequences follow the CSS shorthand: one value applies to every side, two
    values are ``(vertical, horizontal)`` and four values are
    ``(top, right, bottom, left)``.
    """
    if isinstance(value, DiInt):
        return value
    if isinstance(value, int):
        return DiInt.from_value(value)
    values = tuple(value)
    if len(values) == 1:
        return DiInt.from_value(values[0])
    if len(values) == 2:
        return DiInt(values[0], values[1], values[0], values[1])
    if len(values) == 4:
        return DiInt(*values)
    raise ValueError(f"Cannot convert {value!r} to directional integers")


def to_distr(value: DiStr | str) -> DiStr:
    """Convert a string to a :class:`DiStr` if required."""
    return DiStr.from_value(value) if isinstance(value, str) else value


class Span(NamedTuple):
    """The number of rows and columns occupied by a cell."""

    rows: int = 1
    cols: int = 1
