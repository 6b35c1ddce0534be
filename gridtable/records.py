"""Convert sequences of records into table matrices.

Records may be objects implementing the :class:`Tabled` protocol, dataclass
instances or mappings. The columns of a dataclass can be adjusted with field
metadata:

``skip``
    Leave the field out of the table.
``rename``
    Use a different header for the field.
``order``
    Place the field's column at a given position.
``inline``
    Expand a nested record into its own columns. If a string is given, it is
    used as a prefix for the nested headers.
``display``
    A callable used to convert the field's value to text.
``rename_all``
    Change the case of the field's header, using one of the styles accepted
    by :func:`cast_case`. An explicit ``rename`` takes precedence.

The case of every header of a dataclass can be changed with the :func:`tabled`
decorator. A field's own ``rename_all`` takes precedence over it.

For example::

    @dataclass
    class Planet:
        name: str = field(metadata={"rename": "Planet"})
        mass: float = field(metadata={"display": "{:.2e}".format})
        notes: str = field(metadata={"skip": True})

    @tabled(rename_all="UPPERCASE")
    @dataclass
    class Moon:
        name: str
        orbital_period: float = field(metadata={"rename_all": "kebab-case"})

"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping
from typing import (
    TYPE_CHECKING,
    Any,
    NamedTuple,
    Protocol,
    get_type_hints,
    runtime_checkable,
)

from gridtable.cell import Matrix
from gridtable.config import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from prompt_toolkit.formatted_text.base import AnyFormattedText

log = logging.getLogger(__name__)


@runtime_checkable
class Tabled(Protocol):
    """An object which describes its own table columns."""

    def headers(self) -> Sequence[str]:
        """Return the column headers."""
        ...

    def fields(self) -> Sequence[AnyFormattedText]:
        """Return the column values."""
        ...


def to_text(value: Any) -> AnyFormattedText:
    """Convert a field value to something which can be displayed in a cell."""
    if value is None:
        return ""
    if isinstance(value, (str, list)) or hasattr(value, "__pt_formatted_text__"):
        return value
    return str(value)


# Word boundaries in identifiers: underscores, hyphens and lower to upper case
_WORD_BOUNDARY_RE = re.compile(r"[_\-]+|(?<=[a-z0-9])(?=[A-Z])")

CASES: dict[str, Callable[[list[str]], str]] = {
    "camelCase": lambda words: words[0].lower()
    + "".join(word.capitalize() for word in words[1:]),
    "PascalCase": lambda words: "".join(word.capitalize() for word in words),
    "snake_case": lambda words: "_".join(word.lower() for word in words),
    "SCREAMING_SNAKE_CASE": lambda words: "_".join(word.upper() for word in words),
    "kebab-case": lambda words: "-".join(word.lower() for word in words),
}


def cast_case(name: str, case: str) -> str:
    """Change the case of an identifier.

    ``lowercase``, ``UPPERCASE`` and ``verbatim`` change the letters of the name
    and leave its separators alone. The other styles in :data:`CASES` split the
    name into words and join them again.

    Args:
        name: The identifier to convert
        case: The name of a casing style

    Returns:
        The converted identifier

    Raises:
        ConfigurationError: If the casing style is not known

    """
    if case == "verbatim":
        return name
    if case == "lowercase":
        return name.lower()
    if case == "UPPERCASE":
        return name.upper()
    if case not in CASES:
        raise ConfigurationError(f"Unknown casing style {case!r}")
    words = [word for word in _WORD_BOUNDARY_RE.split(name) if word]
    return CASES[case](words) if words else name


def tabled(cls: type | None = None, *, rename_all: str | None = None) -> Any:
    """Set the table options of a dataclass.

    May be used with or without arguments::

        @tabled(rename_all="PascalCase")
        @dataclass
        class Planet:
            name: str

    Args:
        cls: The class to decorate
        rename_all: A casing style applied to the headers of every field

    Returns:
        The decorated class, or a decorator if no class is given

    """
    if rename_all is not None:
        # Unknown styles are rejected when the class is defined
        cast_case("", rename_all)

    def decorate(cls: type) -> type:
        cls.__tabled_rename_all__ = rename_all  # type: ignore [attr-defined]
        return cls

    return decorate if cls is None else decorate(cls)


class _Column(NamedTuple):
    """A column extracted from a dataclass field."""

    header: str
    getter: Callable[[Any], AnyFormattedText]


def _reorder(items: list[Any], order: dict[int, int]) -> list[Any]:
    """Move items to requested positions, filling the gaps with the rest in order.

    Args:
        items: The items to reorder
        order: A mapping of target positions to item indices

    Returns:
        The reordered items

    """
    placed = set(order.values())
    remaining = iter(item for i, item in enumerate(items) if i not in placed)
    return [
        items[order[pos]] if pos in order else next(remaining)
        for pos in range(len(items))
    ]


def _dataclass_columns(cls: type, prefix: str = "") -> list[_Column]:
    """Build the columns of a dataclass from its fields' metadata."""
    columns: list[_Column] = []
    order: dict[int, int] = {}
    count = len(dataclasses.fields(cls))
    class_case = getattr(cls, "__tabled_rename_all__", None)
    for field in dataclasses.fields(cls):
        meta = field.metadata
        if meta.get("skip"):
            continue
        name = field.name

        if inline := meta.get("inline"):
            nested = field.type
            if isinstance(nested, str):
                # Resolve postponed annotations
                nested = get_type_hints(cls).get(name)
            if not isinstance(nested, type) or not dataclasses.is_dataclass(nested):
                raise ConfigurationError(
                    f"Field '{name}' of {cls.__name__} is inlined but its type "
                    "is not a dataclass"
                )
            inline_prefix = prefix + (inline if isinstance(inline, str) else "")
            for column in _dataclass_columns(nested, inline_prefix):
                columns.append(
                    _Column(
                        column.header,
                        lambda record, name=name, getter=column.getter: getter(
                            getattr(record, name)
                        ),
                    )
                )
            continue

        if (position := meta.get("order")) is not None:
            if not 0 <= position < count:
                raise ConfigurationError(
                    f"Order index {position} of field '{name}' is out of range"
                )
            order[position] = len(columns)

        if "rename" in meta:
            header = meta["rename"]
        elif case := meta.get("rename_all", class_case):
            header = cast_case(name, case)
        else:
            header = name

        display = meta.get("display", to_text)
        columns.append(
            _Column(
                prefix + header,
                lambda record, name=name, display=display: display(
                    getattr(record, name)
                ),
            )
        )

    if order:
        if max(order) >= len(columns):
            raise ConfigurationError(
                f"Order index {max(order)} is out of range for {cls.__name__}"
            )
        columns = _reorder(columns, order)
    return columns


def record_headers(record: Any) -> list[str]:
    """Return the column headers for a record."""
    if isinstance(record, Tabled):
        return list(record.headers())
    if dataclasses.is_dataclass(record):
        cls = record if isinstance(record, type) else type(record)
        return [column.header for column in _dataclass_columns(cls)]
    if isinstance(record, Mapping):
        return [str(key) for key in record]
    raise TypeError(f"Cannot create table columns from {type(record).__name__}")


def record_fields(record: Any) -> list[AnyFormattedText]:
    """Return the column values for a record."""
    if isinstance(record, Tabled):
        return list(record.fields())
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return [column.getter(record) for column in _dataclass_columns(type(record))]
    if isinstance(record, Mapping):
        return [to_text(value) for value in record.values()]
    raise TypeError(f"Cannot create table row from {type(record).__name__}")


def matrix_from_records(
    records: Iterable[Any], headers: Sequence[str] | None = None
) -> Matrix:
    """Create a matrix with a header row followed by one row per record.

    Mapping records are aligned to the headers by key, with missing values left
    empty. If no headers are given, they are taken from the first record, or for
    mappings from the keys of all records in the order they are first seen.

    Args:
        records: The records to show
        headers: The column headers

    Returns:
        A new matrix

    """
    records = list(records)
    if headers is None:
        if not records:
            return Matrix()
        if all(isinstance(record, Mapping) for record in records):
            headers = list(
                dict.fromkeys(str(key) for record in records for key in record)
            )
        else:
            headers = record_headers(records[0])

    rows: list[list[AnyFormattedText]] = [list(headers)]
    for record in records:
        if isinstance(record, Mapping) and not isinstance(record, Tabled):
            values = {str(key): value for key, value in record.items()}
            rows.append([to_text(values.get(header)) for header in headers])
        else:
            rows.append(record_fields(record))
    log.debug("Created table from %d records", len(records))
    return Matrix(rows)
