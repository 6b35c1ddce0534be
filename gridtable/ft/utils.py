"""Utilities for manipulating lines of formatted text."""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

from prompt_toolkit.utils import get_cwidth

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples

    _Unit = tuple[StyleAndTextTuples, int]

_ZERO_WIDTH_FRAGMENTS = ("[ZeroWidthEscape]",)

# Select graphic rendition sequences, which set the style of the text after them
_SGR_RE = re.compile(r"(?:\x1b\[|\x9b)([0-9;:]*)m")
_SGR_RESET = "\x1b[0m"

REPLACEMENT_CHAR = "\ufffd"


class FormattedTextAlign(Enum):
    """Alignment of formatted text."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class FormattedTextVerticalAlign(Enum):
    """Vertical alignment of formatted text."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


def is_zero_width(style: str) -> bool:
    """Determine if a fragment style marks text which takes up no space."""
    return any(x in style for x in _ZERO_WIDTH_FRAGMENTS)


def str_width(text: str) -> int:
    """Return the display width of a plain string."""
    return sum(get_cwidth(c) for c in text)


def fragment_list_width(fragments: StyleAndTextTuples) -> int:
    """Return the character width of this text fragment list.

    Takes double width characters into account, and ignores zero-width escape
    fragments.

    Args:
        fragments: List of ``(style_str, text)`` or
            ``(style_str, text, mouse_handler)`` tuples.

    Returns:
        The width of the fragment list
    """
    return sum(
        get_cwidth(c)
        for item in (frag for frag in fragments if not is_zero_width(frag[0]))
        for c in item[1]
    )


def fragment_list_to_str(fragments: StyleAndTextTuples) -> str:
    """Concatenate the text of fragments, including any escape sequences."""
    return "".join(frag[1] for frag in fragments)


def join_lines(lines: Iterable[StyleAndTextTuples]) -> StyleAndTextTuples:
    """Join a list of lines of formatted text."""
    ft: StyleAndTextTuples = []
    for i, line in enumerate(lines):
        if i:
            ft.append(("", "\n"))
        ft.extend(line)
    return ft


def _active_sgr(active: list[str], line: StyleAndTextTuples) -> list[str]:
    """Return the style escapes still in effect after a line."""
    active = list(active)
    for style, text, *_ in line:
        if not is_zero_width(style):
            continue
        for match in _SGR_RE.finditer(text):
            params = match.group(1).split(";")
            if params[0] in ("", "0"):
                active.clear()
                if any(param not in ("", "0") for param in params):
                    active.append(match.group(0))
            else:
                active.append(match.group(0))
    return active


def balance_sgr(lines: Iterable[StyleAndTextTuples]) -> list[StyleAndTextTuples]:
    """Make every line close the text styles it leaves open.

    A style still set by an escape sequence at the end of a line is reset there
    and set again at the start of the next line, so lines can be laid out next to
    other text without their styles leaking into it.

    Args:
        lines: Lines of formatted text containing zero-width escape fragments

    Returns:
        The balanced lines, with unchanged display widths

    """
    result: list[StyleAndTextTuples] = []
    active: list[str] = []
    for line in lines:
        line = [*(("[ZeroWidthEscape]", seq) for seq in active), *line]
        if active := _active_sgr([], line):
            line.append(("[ZeroWidthEscape]", _SGR_RESET))
        result.append(line)
    return result


def _to_units(line: StyleAndTextTuples) -> list[_Unit]:
    """Split a line into units of one visible character each.

    Escape fragments are attached to the character which follows them, and
    zero-width characters (such as combining marks) to the character before them.
    Escapes at the end of the line are attached to the last unit.
    """
    units: list[_Unit] = []
    pending: StyleAndTextTuples = []
    for style, text, *_ in line:
        if is_zero_width(style):
            pending.append((style, text))
            continue
        for c in text:
            width = get_cwidth(c)
            if width == 0 and units and not pending:
                units[-1][0].append((style, c))
            else:
                units.append(([*pending, (style, c)], width))
                pending = []
    if pending:
        if units:
            units[-1][0].extend(pending)
        else:
            units.append((pending, 0))
    return units


def _from_units(units: Iterable[_Unit]) -> StyleAndTextTuples:
    """Join units back into a line, merging adjacent fragments of the same style."""
    result: StyleAndTextTuples = []
    for fragments, _ in units:
        for style, text, *_ in fragments:
            if result and result[-1][0] == style and not is_zero_width(style):
                result[-1] = (style, result[-1][1] + text)
            else:
                result.append((style, text))
    return result


def _visible(unit: _Unit) -> str:
    """Return the visible text of a unit."""
    return "".join(text for style, text, *_ in unit[0] if not is_zero_width(style))


def _escapes(unit: _Unit) -> _Unit:
    """Return a unit containing only the escape fragments of a unit."""
    return ([frag for frag in unit[0] if is_zero_width(frag[0])], 0)


def _is_space(unit: _Unit) -> bool:
    text = _visible(unit)
    return bool(text) and text.isspace()


def _strip_units(
    units: list[_Unit], left: bool = True, right: bool = True
) -> list[_Unit]:
    """Remove whitespace from the ends of a list of units, keeping escapes."""
    result = list(units)
    for toggle, indices in (
        (left, range(len(result))),
        (right, range(len(result) - 1, -1, -1)),
    ):
        if not toggle:
            continue
        for i in indices:
            if _is_space(result[i]):
                result[i] = _escapes(result[i])
            elif _visible(result[i]):
                break
    return [unit for unit in result if unit[0]]


def wrap(
    line: StyleAndTextTuples, width: int, keep_words: bool = True
) -> list[StyleAndTextTuples]:
    """Wrap a single line of formatted text at a given width.

    Each output line holds the longest prefix of the remaining text which fits.
    If the character after that prefix is whitespace the line is broken there.
    Otherwise, when ``keep_words`` is set, the line is broken at the last
    whitespace in the prefix, and failing that the word is broken. Whitespace at
    a break is removed.

    Args:
        line: The line of formatted text to wrap
        width: The width at which to wrap the text
        keep_words: If :py:const:`True`, avoid breaking lines within words

    Returns:
        A list of lines, none of which is wider than ``width``
    """
    if width <= 0:
        return [[]]
    units = _to_units(line)
    if sum(unit[1] for unit in units) <= width:
        return [line]

    result: list[StyleAndTextTuples] = []
    while units:
        used = end = 0
        while end < len(units) and used + units[end][1] <= width:
            used += units[end][1]
            end += 1

        # Everything left fits
        if end == len(units):
            result.append(_from_units(units))
            break

        # A wide character which can never fit in the box
        if end == 0:
            style = next(
                (s for s, *_ in units[0][0] if not is_zero_width(s)),
                "",
            )
            result.append(
                _from_units([_escapes(units[0]), ([(style, REPLACEMENT_CHAR)], 1)])
            )
            units = units[1:]
            continue

        brk = end
        if not _is_space(units[end]) and keep_words:
            for i in range(end - 1, 0, -1):
                if _is_space(units[i]) and any(
                    _visible(unit) and not _is_space(unit) for unit in units[:i]
                ):
                    brk = i
                    break

        if _is_space(units[brk]):
            head = _strip_units(units[:brk], left=False)
            units = _strip_units(units[brk:], right=False)
        else:
            head = units[:brk]
            units = units[brk:]
        result.append(_from_units(head))
        # Only escapes remain
        if units and not any(_visible(unit) for unit in units):
            result[-1] = [*result[-1], *_from_units(units)]
            break

    return balance_sgr(result)


def truncate(
    line: StyleAndTextTuples, width: int, placeholder: str = "", style: str = ""
) -> StyleAndTextTuples:
    """Truncate a line of formatted text at a given width.

    Args:
        line: The formatted text to truncate
        width: The width at which to truncate the text
        placeholder: The string that will appear at the end of a truncated line. If
            it does not fit in ``width``, the line is truncated without it
        style: The style to apply to the truncation placeholder. The style of the
            truncated text will be used if not provided

    Returns:
        The truncated formatted text

    """
    units = _to_units(line)
    if sum(unit[1] for unit in units) <= width:
        return line
    if (phw := str_width(placeholder)) > width:
        placeholder, phw = "", 0

    used = keep = 0
    while keep < len(units) and used + units[keep][1] <= width - phw:
        used += units[keep][1]
        keep += 1

    kept = units[:keep]
    if not keep and not placeholder and width >= 1:
        kept = [_escapes(units[0]), ([("", REPLACEMENT_CHAR)], 1)]
        keep = 1
    if placeholder:
        if not style:
            style = next(
                (s for s, *_ in reversed(_from_units(kept)) if not is_zero_width(s)),
                "",
            )
        kept.append(([(style, placeholder)], phw))
    # Keep escapes from the removed text so styles are closed
    kept.extend(_escapes(unit) for unit in units[keep:])
    return _from_units(unit for unit in kept if unit[0])


def align(
    line: StyleAndTextTuples,
    how: FormattedTextAlign = FormattedTextAlign.LEFT,
    width: int | None = None,
    char: str = " ",
    style: str = "",
) -> StyleAndTextTuples:
    """Pad a line of formatted text to a given width.

    When centering, the odd extra character goes on the right.

    Args:
        line: The formatted text to align
        how: The alignment direction
        width: The width to which the output should be padded
        char: The character used to fill the space
        style: The style to apply to the padding

    Returns:
        The aligned formatted text

    """
    line_width = fragment_list_width(line)
    if width is None or line_width >= width:
        return line
    pad_left = pad_right = 0
    if how == FormattedTextAlign.CENTER:
        pad_left = (width - line_width) // 2
        pad_right = width - line_width - pad_left
    elif how == FormattedTextAlign.LEFT:
        pad_right = width - line_width
    elif how == FormattedTextAlign.RIGHT:
        pad_left = width - line_width
    result: StyleAndTextTuples = []
    if pad_left:
        result.append((style, fill(char, pad_left)))
    result.extend(line)
    if pad_right:
        result.append((style, fill(char, pad_right)))
    return result


def fill(char: str, width: int) -> str:
    """Repeat a string to exactly fill a given display width.

    Any remaining space which cannot hold a whole copy of the string is filled
    with spaces.
    """
    if width <= 0:
        return ""
    if not char or (char_width := str_width(char)) == 0:
        return " " * width
    count, remainder = divmod(width, char_width)
    text = char * count
    if remainder:
        partial = ""
        for c in char:
            if str_width(partial + c) > remainder:
                break
            partial += c
        text += partial + " " * (remainder - str_width(partial))
    return text


def enclose(
    line: StyleAndTextTuples, prefix: str = "", suffix: str = ""
) -> StyleAndTextTuples:
    """Wrap a line of formatted text in zero-width escape sequences.

    Args:
        line: The formatted text to decorate
        prefix: An escape sequence to insert before the text
        suffix: An escape sequence to insert after the text

    Returns:
        The decorated formatted text, with the same display width

    """
    return [
        *([("[ZeroWidthEscape]", prefix)] if prefix else []),
        *line,
        *([("[ZeroWidthEscape]", suffix)] if suffix else []),
    ]
