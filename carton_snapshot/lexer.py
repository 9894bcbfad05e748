"""Lexical primitives over a forward-only cursor.

Every scanner either consumes its match and returns it, or returns ``None``
and leaves the cursor where it was.
"""

from __future__ import annotations

import re

DIST_INDENT = 2
FIELD_INDENT = 4
PROPERTY_INDENT = 6

UNDEF = "undef"

_NEWLINE_PATTERN = re.compile(r"\r?\n")
_BARE_TOKEN_PATTERN = re.compile(r"\S+")
_LINE_REMAINDER_PATTERN = re.compile(r".*?(?=\r?\n)")
_KEY_TOKEN_PATTERN = re.compile(r"[\w:]+")
_SPACES_PATTERN = re.compile(r" +")
# Runs of version characters joined by spaces form one token; tabs never separate.
_VERSION_TOKEN_PATTERN = re.compile(r"[\dv._,=!<>]+(?: +[\dv._,=!<>]+)*")


class Cursor:
    """Position within a source text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, ahead={self.text[self.pos:self.pos + 20]!r})"

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, size: int = 1) -> str:
        return self.text[self.pos:self.pos + size]

    def _match(self, pattern: re.Pattern[str]) -> str | None:
        found = pattern.match(self.text, self.pos)
        if found is None or found.end() == self.pos:
            return None
        self.pos = found.end()
        return found.group()

    def literal(self, expected: str) -> str | None:
        if self.text.startswith(expected, self.pos):
            self.pos += len(expected)
            return expected
        return None

    def indent(self, depth: int) -> bool:
        """Consume exactly ``depth`` spaces."""
        return self.literal(" " * depth) is not None

    def newline(self) -> str | None:
        return self._match(_NEWLINE_PATTERN)

    def spaces(self) -> str | None:
        return self._match(_SPACES_PATTERN)

    def bare_token(self) -> str | None:
        return self._match(_BARE_TOKEN_PATTERN)

    def line_remainder(self) -> str | None:
        """Text up to the line terminator; empty text is a valid match."""
        found = _LINE_REMAINDER_PATTERN.match(self.text, self.pos)
        if found is None:
            return None
        self.pos = found.end()
        return found.group()

    def key_token(self) -> str | None:
        return self._match(_KEY_TOKEN_PATTERN)

    def version_token(self) -> str | None:
        start = self.pos
        self.spaces()
        token = self._match(_VERSION_TOKEN_PATTERN)
        if token is None:
            self.pos = start
        return token

    def undef_literal(self) -> str | None:
        return self.literal(UNDEF)
