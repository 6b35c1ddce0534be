"""Parse strings containing terminal escape sequences into formatted text."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from prompt_toolkit.formatted_text import ANSI as PTANSI

if TYPE_CHECKING:
    from collections.abc import Generator

log = logging.getLogger(__name__)

_ESCAPE = "[ZeroWidthEscape]"


class ANSI(PTANSI):
    """Convert ANSI text into formatted text, preserving all control sequences.

    Unlike :class:`prompt_toolkit.formatted_text.ANSI`, escape sequences are not
    converted to styles. They are kept verbatim as zero-width fragments, so the
    original text can be reproduced exactly while being excluded from width
    calculations.
    """

    def __init__(self, value: str, tab_size: int = 4) -> None:
        """Parse a string of text and escape sequences.

        Args:
            value: The text to parse
            tab_size: The column interval of tab stops

        """
        # Tabs become spaces up to the next tab stop
        value = value.expandtabs(tabsize=tab_size)
        # Normalise line endings
        value = value.replace("\r\n", "\n")
        # A bare carriage return overwrites the line so far
        value = re.sub(r"^.*\r(?!\n)", "", value, count=0, flags=re.MULTILINE)
        self._pending = ""
        super().__init__(value)
        # Input ending part way through an escape sequence
        if self._pending:
            log.debug("Unterminated escape sequence %r", self._pending)
            self._flush_escape()

    def _append_text(self, char: str) -> None:
        """Add a printable character, merging it with a preceding plain fragment."""
        formatted_text = self._formatted_text
        if formatted_text and formatted_text[-1][0] == "":
            formatted_text[-1] = ("", formatted_text[-1][1] + char)
        else:
            formatted_text.append(("", char))

    def _backspace(self) -> None:
        """Remove the last printable character."""
        formatted_text = self._formatted_text
        for i in range(len(formatted_text) - 1, -1, -1):
            style, text, *_ = formatted_text[i]
            if style == _ESCAPE or not text:
                continue
            if len(text) > 1:
                formatted_text[i] = (style, text[:-1])
            else:
                del formatted_text[i]
            break

    def _flush_escape(self) -> None:
        """Store the escape sequence read so far as a zero-width fragment."""
        if self._pending:
            self._formatted_text.append((_ESCAPE, self._pending))
        self._pending = ""

    def _parse_corot(self) -> Generator[None, str, None]:
        """Receive characters one at a time, storing text and escape fragments.

        The escape sequence being read is held in ``_pending`` until it is
        complete.

        Yields:
            Nothing; each character is sent to the coroutine

        """
        char = yield
        while True:
            # Text between \001 and \002 is zero-width
            if char == "\001":
                char = yield
                while char != "\002":
                    self._pending += char
                    char = yield
                self._flush_escape()
                char = yield
                continue

            # Backspace
            if char == "\x08":
                self._backspace()
                char = yield
                continue

            if char in ("\x1b", "\x9b"):
                self._pending = char
                if char == "\x1b":
                    char = yield
                    self._pending += char

                # Operating system commands and device control strings run until a
                # string terminator
                if self._pending in ("\x1b]", "\x1bP"):
                    while True:
                        char = yield
                        self._pending += char
                        if char == "\x07" or self._pending.endswith("\x1b\\"):
                            break
                    self._flush_escape()
                    char = yield
                    continue

                # Control sequences
                if self._pending in ("\x1b[", "\x9b"):
                    char = yield
                    # Parameter bytes
                    while 0x30 <= ord(char) <= 0x3F:
                        self._pending += char
                        char = yield
                    # Intermediate bytes
                    while 0x20 <= ord(char) <= 0x2F:
                        self._pending += char
                        char = yield
                    # Final byte
                    if 0x40 <= ord(char) <= 0x7E:
                        self._pending += char
                        self._flush_escape()
                        char = yield
                    else:
                        log.debug("Malformed control sequence %r", self._pending)
                        self._flush_escape()
                    continue

                # Any other two-character escape
                self._flush_escape()
                char = yield
                continue

            self._append_text(char)
            char = yield
