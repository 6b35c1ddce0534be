"""Define the table style and the size constraints it carries."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

import fastjsonschema
from prompt_toolkit.layout.dimension import Dimension

from gridtable.border import PRESETS, THIN, Borders
from gridtable.data_structures import DiInt, DiStr, to_diint, to_distr
from gridtable.ft.utils import FormattedTextAlign, FormattedTextVerticalAlign

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    from gridtable.cell import Placement

    DecorateFunc = Callable[[Placement, int, StyleAndTextTuples], StyleAndTextTuples]

log = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a table cannot be laid out as configured."""


class ConstraintError(ConfigurationError):
    """Raised when size constraints contradict each other."""


class Overflow(Enum):
    """How text wider than its cell is handled."""

    WRAP = "wrap"
    TRUNCATE = "truncate"


class Size(NamedTuple):
    """Size constraints for a column or a row.

    A percentage refers to the table's width budget and only applies to columns.
    """

    fixed: int | None = None
    min: int | None = None
    max: int | None = None
    percent: float | None = None

    def validate(self, name: str, allow_percent: bool = True) -> None:
        """Check that the constraints can be satisfied together.

        Args:
            name: A description of what is constrained, used in error messages
            allow_percent: Whether a percentage constraint is permitted

        Raises:
            ConstraintError: If the constraints are contradictory

        """
        for key in ("fixed", "min", "max"):
            value = getattr(self, key)
            if value is not None and value < 0:
                raise ConstraintError(f"{name}: {key} size {value} is negative")
        if self.percent is not None:
            if not allow_percent:
                raise ConstraintError(f"{name}: percentage sizes are not supported")
            if not 0 < self.percent <= 100:
                raise ConstraintError(
                    f"{name}: percentage {self.percent} is not in the range (0, 100]"
                )
            if self.fixed is not None:
                raise ConstraintError(f"{name}: both fixed and percentage sizes given")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ConstraintError(
                f"{name}: minimum size {self.min} exceeds maximum {self.max}"
            )
        if self.fixed is not None and not (
            (self.min is None or self.min <= self.fixed)
            and (self.max is None or self.fixed <= self.max)
        ):
            raise ConstraintError(
                f"{name}: fixed size {self.fixed} is outside the range "
                f"[{self.min}, {self.max}]"
            )

    def clamp(self, value: int, budget: int | None = None) -> int:
        """Apply the constraints to a size."""
        if self.fixed is not None:
            return self.fixed
        if self.percent is not None and budget is not None:
            return int(budget * self.percent / 100)
        if self.min is not None:
            value = max(value, self.min)
        if self.max is not None:
            value = min(value, self.max)
        return value


def to_size(value: Any) -> Size:
    """Convert a value to a :class:`Size`.

    Integers give a fixed size, strings such as ``"30%"`` a percentage,
    :class:`~prompt_toolkit.layout.dimension.Dimension` instances a range, and
    mappings are used as keyword arguments.
    """
    if isinstance(value, Size):
        return value
    if value is None:
        return Size()
    if isinstance(value, int):
        return Size(fixed=value)
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.endswith("%"):
                return Size(percent=float(text[:-1]))
            return Size(fixed=int(text))
        except ValueError:
            raise ConstraintError(f"Cannot interpret size {value!r}") from None
    if isinstance(value, Dimension):
        if value.min_specified and value.max_specified and value.min == value.max:
            return Size(fixed=value.min)
        return Size(
            min=value.min if value.min_specified else None,
            max=value.max if value.max_specified else None,
        )
    if isinstance(value, dict):
        return Size(**value)
    raise ConstraintError(f"Cannot interpret size {value!r}")


def _to_index_set(value: Iterable[int] | None) -> frozenset[int] | None:
    return None if value is None else frozenset(value)


_SIZE_SCHEMA: dict[str, Any] = {
    "oneOf": [
        {"type": "integer", "minimum": 0},
        {"type": "string", "pattern": r"^\s*[0-9]+(\.[0-9]+)?%\s*$"},
        {
            "type": "object",
            "properties": {
                "fixed": {"type": "integer", "minimum": 0},
                "min": {"type": "integer", "minimum": 0},
                "max": {"type": "integer", "minimum": 0},
                "percent": {"type": "number", "exclusiveMinimum": 0, "maximum": 100},
            },
            "additionalProperties": False,
        },
    ]
}

_SCHEMA: dict[str, Any] = {
    "title": "Table style",
    "type": "object",
    "properties": {
        "borders": {
            "oneOf": [
                {"type": "string", "enum": list(PRESETS)},
                {
                    "type": "object",
                    "propertyNames": {"enum": list(Borders._fields)},
                    "additionalProperties": {"type": ["string", "null"]},
                },
            ]
        },
        "padding": {
            "oneOf": [
                {"type": "integer", "minimum": 0},
                {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 0},
                    "minItems": 1,
                    "maxItems": 4,
                    "not": {"minItems": 3, "maxItems": 3},
                },
            ]
        },
        "padding_char": {
            "oneOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "minItems": 4,
                    "maxItems": 4,
                },
            ]
        },
        "fill_char": {"type": "string", "minLength": 1},
        "align": {"type": "string", "enum": [x.value for x in FormattedTextAlign]},
        "valign": {
            "type": "string",
            "enum": [x.value for x in FormattedTextVerticalAlign],
        },
        "overflow": {"type": "string", "enum": [x.value for x in Overflow]},
        "keep_words": {"type": "boolean"},
        "ellipsis": {"type": "string"},
        "col_widths": {
            "type": "object",
            "patternProperties": {"^[0-9]+$": _SIZE_SCHEMA},
            "additionalProperties": False,
        },
        "row_heights": {
            "type": "object",
            "patternProperties": {"^[0-9]+$": _SIZE_SCHEMA},
            "additionalProperties": False,
        },
        "width": {"type": ["integer", "null"], "minimum": 0},
        "expand": {"type": "boolean"},
        "min_col_width": {"type": "integer", "minimum": 0},
        "split_rows": {
            "type": ["array", "null"],
            "items": {"type": "integer", "minimum": 0},
        },
        "split_cols": {
            "type": ["array", "null"],
            "items": {"type": "integer", "minimum": 0},
        },
        "line_ending": {"type": "string"},
        "empty_frame": {"type": "boolean"},
    },
}

_schema_validate = fastjsonschema.compile(_SCHEMA, use_default=False)


@dataclass(frozen=True)
class TableStyle:
    """Describe how a table is laid out and drawn.

    Attributes:
        borders: The glyphs drawn at each kind of border position
        padding: Space between cell content and the cell's edges
        padding_char: The characters used to fill the padding on each side
        fill_char: The character used to fill unused space in cells
        align: The default horizontal alignment of cell content
        valign: The default vertical alignment of cell content
        overflow: How text wider than its cell is handled
        keep_words: Whether wrapping avoids breaking words
        ellipsis: The marker shown where text is truncated
        col_widths: Size constraints for columns, by column index
        row_heights: Size constraints for rows, by row index
        width: The total width budget for the table
        expand: Whether columns grow to fill the width budget
        min_col_width: The narrowest content width a column is shrunk to
        split_rows: Internal row boundaries which carry lines. Boundary ``i`` lies
            above row ``i``. All boundaries are used if :py:const:`None`
        split_cols: Internal column boundaries which carry lines. Boundary ``i``
            lies left of column ``i``. All boundaries are used if :py:const:`None`
        line_ending: The string placed between output lines
        empty_frame: Whether an empty table is drawn as a bare frame
        decorate: A callable which may modify every formatted line of a cell. It
            receives the cell placement, the line index and the line

    """

    borders: Borders = THIN
    padding: DiInt = DiInt(0, 1, 0, 1)
    padding_char: DiStr = DiStr.from_value(" ")
    fill_char: str = " "
    align: FormattedTextAlign = FormattedTextAlign.LEFT
    valign: FormattedTextVerticalAlign = FormattedTextVerticalAlign.TOP
    overflow: Overflow = Overflow.WRAP
    keep_words: bool = True
    ellipsis: str = ""
    col_widths: Mapping[int, Size] = field(default_factory=dict)
    row_heights: Mapping[int, Size] = field(default_factory=dict)
    width: int | Dimension | None = None
    expand: bool = False
    min_col_width: int = 1
    split_rows: frozenset[int] | None = None
    split_cols: frozenset[int] | None = None
    line_ending: str = "\n"
    empty_frame: bool = False
    decorate: DecorateFunc | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Normalize the given values."""
        set_ = object.__setattr__
        if isinstance(self.borders, str):
            try:
                set_(self, "borders", PRESETS[self.borders])
            except KeyError:
                raise ConfigurationError(
                    f"Unknown border style {self.borders!r}"
                ) from None
        elif isinstance(self.borders, dict):
            set_(self, "borders", Borders.from_mapping(self.borders))
        set_(self, "padding", to_diint(self.padding))
        set_(self, "padding_char", to_distr(self.padding_char))
        set_(self, "align", FormattedTextAlign(self.align))
        set_(self, "valign", FormattedTextVerticalAlign(self.valign))
        set_(self, "overflow", Overflow(self.overflow))
        set_(
            self,
            "col_widths",
            {int(k): to_size(v) for k, v in self.col_widths.items()},
        )
        set_(
            self,
            "row_heights",
            {int(k): to_size(v) for k, v in self.row_heights.items()},
        )
        set_(self, "split_rows", _to_index_set(self.split_rows))
        set_(self, "split_cols", _to_index_set(self.split_cols))

    def replace(self, **changes: Any) -> TableStyle:
        """Return a copy of this style with some values changed."""
        return dataclasses.replace(self, **changes)

    def validate(self) -> None:
        """Check every size constraint of the style.

        Raises:
            ConstraintError: If any constraint is contradictory

        """
        if any(x < 0 for x in self.padding):
            raise ConstraintError(f"Negative padding {tuple(self.padding)}")
        if self.min_col_width < 0:
            raise ConstraintError(f"Negative minimum column width {self.min_col_width}")
        if isinstance(self.width, int) and self.width < 0:
            raise ConstraintError(f"Negative table width {self.width}")
        for col, size in self.col_widths.items():
            size.validate(f"Column {col}")
        for row, size in self.row_heights.items():
            size.validate(f"Row {row}", allow_percent=False)

    @property
    def width_range(self) -> tuple[int, int | None]:
        """The smallest and largest total widths the table should take up."""
        if self.width is None:
            return 0, None
        if isinstance(self.width, Dimension):
            largest = self.width.max if self.width.max_specified else None
            if self.expand and self.width.preferred_specified:
                smallest = self.width.preferred
            elif self.expand and largest is not None:
                smallest = largest
            else:
                smallest = self.width.min if self.width.min_specified else 0
            return smallest, largest
        return (self.width if self.expand else 0), self.width

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableStyle:
        """Create a style from JSON-like data, ignoring invalid settings.

        Each setting is validated against a JSON schema. Settings which fail
        validation or which are not recognised are logged and skipped.
        """
        properties = _SCHEMA["properties"]
        values: dict[str, Any] = {}
        for name, value in data.items():
            if name in properties:
                # Convert to json and back to attain json types
                json_data = json.loads(json.dumps({name: value}))
                try:
                    _schema_validate(json_data)
                except fastjsonschema.JsonSchemaValueException as error:
                    # Warn about badly configured settings
                    log.warning(
                        "Error in table style setting: `%s = %r`\n%s",
                        name,
                        value,
                        error.message.replace("data.", ""),
                    )
                else:
                    values[name] = json_data[name]
            else:
                # Warn about unknown configuration options
                log.warning("Table style option '%s' not recognised", name)
        if isinstance(values.get("padding"), list):
            values["padding"] = tuple(values["padding"])
        if isinstance(values.get("padding_char"), list):
            values["padding_char"] = DiStr(*values["padding_char"])
        return cls(**values)
