"""
Parser for carton dependency snapshots (cpanfile.snapshot).

Usage:
    from carton_snapshot import parse_snapshot

    document = parse_snapshot(text)
    record = document["Foo-Bar-1.0"]
    record.path, record.provides, record.requires
"""

from carton_snapshot.errors import ErrorKind, SnapshotParseError
from carton_snapshot.loader import invalidate_snapshot_cache, load_snapshot
from carton_snapshot.models import (
    UNDEFINED,
    DistributionRecord,
    Document,
    PropertySet,
    PropertyValue,
    Undefined,
    VersionSpec,
    document_asdict,
)
from carton_snapshot.parser import parse_snapshot, try_parse_snapshot

__all__ = [
    "ErrorKind",
    "SnapshotParseError",
    "load_snapshot",
    "invalidate_snapshot_cache",
    "UNDEFINED",
    "DistributionRecord",
    "Document",
    "PropertySet",
    "PropertyValue",
    "Undefined",
    "VersionSpec",
    "document_asdict",
    "parse_snapshot",
    "try_parse_snapshot",
]
