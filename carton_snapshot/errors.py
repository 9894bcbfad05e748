"""Error taxonomy for snapshot parsing."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classes of parse failure."""

    HEADER_MISMATCH = "header_mismatch"
    MALFORMED_DISTRIBUTION = "malformed_distribution"
    MALFORMED_PROPERTY = "malformed_property"
    TRAILING_INPUT = "trailing_input"


def locate(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of a character offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


class SnapshotParseError(ValueError):
    """Raised when a snapshot document does not match the grammar.

    No partial document accompanies the error: callers must treat the
    snapshot as unreadable.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        text: str,
        offset: int,
        name: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.offset = offset
        self.line, self.column = locate(text, offset)
        self.name = name
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.kind.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "offset": self.offset,
            "line": self.line,
            "column": self.column,
            "name": self.name,
        }
