"""Grammar rules for the snapshot format.

    Distribution  := indent(2) bare_token NEWLINE
                     indent(4) "pathname: " line_remainder NEWLINE
                     [ indent(4) "provides:" NEWLINE PropertyList ]
                     [ indent(4) "requirements:" NEWLINE PropertyList ]
    PropertyList  := PropertyLine*
    PropertyLine  := indent(6) key_token SP+ (version_token | "undef") NEWLINE

Rules that have not started return ``None`` with the cursor untouched. Once a
rule has committed, any mismatch raises :class:`SnapshotParseError`.
"""

from __future__ import annotations

from carton_snapshot.errors import ErrorKind, SnapshotParseError
from carton_snapshot.lexer import DIST_INDENT, FIELD_INDENT, PROPERTY_INDENT, Cursor
from carton_snapshot.models import (
    UNDEFINED,
    DistributionRecord,
    PropertySet,
    PropertyValue,
    VersionSpec,
)

HEADER_LINES: tuple[str, ...] = (
    "# carton snapshot format: version 1.0",
    "DISTRIBUTIONS",
)
PATHNAME_TAG = "pathname: "
PROVIDES_TAG = "provides:"
REQUIREMENTS_TAG = "requirements:"


def _fail(
    cursor: Cursor,
    kind: ErrorKind,
    message: str,
    *,
    offset: int | None = None,
    name: str | None = None,
) -> SnapshotParseError:
    return SnapshotParseError(
        kind,
        message,
        text=cursor.text,
        offset=cursor.pos if offset is None else offset,
        name=name,
    )


def header(cursor: Cursor) -> None:
    """Consume the two fixed header lines."""
    for expected in HEADER_LINES:
        start = cursor.pos
        if cursor.literal(expected) is None or cursor.newline() is None:
            raise _fail(
                cursor,
                ErrorKind.HEADER_MISMATCH,
                f"expected header line {expected!r}",
                offset=start,
            )


def property_line(cursor: Cursor, *, name: str) -> tuple[str, PropertyValue] | None:
    start = cursor.pos
    if not cursor.indent(PROPERTY_INDENT):
        cursor.pos = start
        return None

    key = cursor.key_token()
    if key is None:
        raise _fail(cursor, ErrorKind.MALFORMED_PROPERTY, "invalid property key", name=name)
    if cursor.spaces() is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_PROPERTY,
            f"expected spaces after property {key!r}",
            name=name,
        )

    value: PropertyValue
    version = cursor.version_token()
    if version is not None:
        value = VersionSpec(version)
    elif cursor.undef_literal() is not None:
        value = UNDEFINED
    else:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_PROPERTY,
            f"invalid value for property {key!r}",
            name=name,
        )

    if cursor.newline() is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_PROPERTY,
            f"unexpected text after value of property {key!r}",
            name=name,
        )
    return key, value


def property_block(cursor: Cursor, tag: str, *, name: str) -> PropertySet | None:
    """Parse ``tag`` followed by its property lines, or return None if absent."""
    start = cursor.pos
    if not cursor.indent(FIELD_INDENT) or cursor.literal(tag) is None:
        cursor.pos = start
        return None
    if cursor.newline() is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_DISTRIBUTION,
            f"expected end of line after {tag!r}",
            name=name,
        )

    properties: PropertySet = {}
    while (entry := property_line(cursor, name=name)) is not None:
        key, value = entry
        properties[key] = value
    return properties


def _pathname(cursor: Cursor, *, name: str) -> str:
    if not cursor.indent(FIELD_INDENT) or cursor.literal(PATHNAME_TAG) is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_DISTRIBUTION,
            f"expected {PATHNAME_TAG!r} line",
            name=name,
        )
    path = cursor.line_remainder()
    if path is None or cursor.newline() is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_DISTRIBUTION,
            "unterminated pathname line",
            name=name,
        )
    return path


def distribution(cursor: Cursor) -> tuple[str, DistributionRecord] | None:
    """Parse one distribution block.

    The block starts once a two-space indent is followed by a name. From
    there it either completes or raises; no partial record is produced.
    """
    start = cursor.pos
    if not cursor.indent(DIST_INDENT) or cursor.peek().isspace():
        cursor.pos = start
        return None
    name = cursor.bare_token()
    if name is None:
        cursor.pos = start
        return None

    if cursor.newline() is None:
        raise _fail(
            cursor,
            ErrorKind.MALFORMED_DISTRIBUTION,
            f"unexpected text after distribution name {name!r}",
            name=name,
        )

    path = _pathname(cursor, name=name)
    provides = property_block(cursor, PROVIDES_TAG, name=name)
    requires = property_block(cursor, REQUIREMENTS_TAG, name=name)

    # Field-level lines left over here are out of order or unknown.
    if cursor.peek(FIELD_INDENT) == " " * FIELD_INDENT:
        message = "unexpected field line in distribution block"
        if requires is not None and cursor.text.startswith(
            PROVIDES_TAG, cursor.pos + FIELD_INDENT
        ):
            message = f"{PROVIDES_TAG!r} must precede {REQUIREMENTS_TAG!r}"
        raise _fail(cursor, ErrorKind.MALFORMED_DISTRIBUTION, message, name=name)

    record = DistributionRecord(
        path=path,
        provides=provides,
        requires=requires,
        span=(start, cursor.pos),
    )
    return name, record
