"""Document assembly: header, then distribution blocks until none begins."""

from __future__ import annotations

from time import perf_counter

import structlog

from carton_snapshot import grammar, metrics
from carton_snapshot.errors import ErrorKind, SnapshotParseError
from carton_snapshot.lexer import Cursor
from carton_snapshot.models import Document
from carton_snapshot.settings import get_settings

LOGGER = structlog.get_logger(__name__)

_TRAILING_PREVIEW = 40


def _assemble(cursor: Cursor, *, strict: bool) -> Document:
    grammar.header(cursor)

    document: Document = {}
    while (entry := grammar.distribution(cursor)) is not None:
        name, record = entry
        document[name] = record

    if not cursor.at_end:
        remainder = cursor.text[cursor.pos:]
        if strict:
            raise SnapshotParseError(
                ErrorKind.TRAILING_INPUT,
                f"unrecognized text after last distribution: {remainder[:_TRAILING_PREVIEW]!r}",
                text=cursor.text,
                offset=cursor.pos,
            )
        LOGGER.warning(
            "snapshot.trailing_input",
            offset=cursor.pos,
            length=len(remainder),
            preview=remainder[:_TRAILING_PREVIEW],
        )
    return document


def parse_snapshot(text: str, *, strict: bool | None = None) -> Document:
    """Parse a carton snapshot document.

    Args:
        text: The complete document.
        strict: Reject unrecognized text after the last distribution block.
            ``None`` uses the ``strict_trailing`` setting.

    Returns:
        Mapping of distribution name to its record. A name that appears
        twice keeps the later block.

    Raises:
        SnapshotParseError: The text does not match the grammar. No partial
            document is produced.
    """
    settings = get_settings()
    if strict is None:
        strict = settings.strict_trailing

    start = perf_counter()
    LOGGER.debug("snapshot.parse.start", length=len(text), strict=strict)

    try:
        document = _assemble(Cursor(text), strict=strict)
    except SnapshotParseError as exc:
        if settings.metrics_enabled:
            metrics.observe_failure(kind=exc.kind.value)
        LOGGER.warning(
            "snapshot.parse.failed",
            kind=exc.kind.value,
            line=exc.line,
            column=exc.column,
            distribution=exc.name,
        )
        raise

    latency_ms = (perf_counter() - start) * 1000
    if settings.metrics_enabled:
        metrics.observe_parse(latency_ms=latency_ms, distributions=len(document))

    LOGGER.debug(
        "snapshot.parse.end",
        distributions=len(document),
        latency_ms=latency_ms,
    )
    return document


def try_parse_snapshot(text: str, *, strict: bool | None = None) -> Document | None:
    """Return the parsed document, or None if the text is not a valid snapshot."""
    try:
        return parse_snapshot(text, strict=strict)
    except SnapshotParseError:
        return None
