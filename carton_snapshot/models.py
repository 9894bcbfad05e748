"""Data model produced by the snapshot parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class Undefined:
    """Explicit ``undef``: the key is present but carries no version."""

    def __str__(self) -> str:
        return "undef"


@dataclass(frozen=True, slots=True)
class VersionSpec:
    """Raw version-constraint text, kept exactly as matched."""

    text: str

    def __str__(self) -> str:
        return self.text


UNDEFINED = Undefined()

PropertyValue = Union[Undefined, VersionSpec]
PropertySet = dict[str, PropertyValue]


@dataclass(frozen=True, slots=True)
class DistributionRecord:
    """One distribution block.

    ``provides`` and ``requires`` are ``None`` when the block was absent
    and an empty dict when its header appeared without property lines.
    """

    path: str
    provides: PropertySet | None = None
    requires: PropertySet | None = None
    span: tuple[int, int] = field(default=(0, 0), compare=False, repr=False)

    @property
    def pathname(self) -> PurePosixPath:
        return PurePosixPath(self.path)

    def asdict(self) -> dict[str, Any]:
        return {
            "pathname": self.path,
            "provides": _properties_asdict(self.provides),
            "requirements": _properties_asdict(self.requires),
        }


Document = dict[str, DistributionRecord]


def _properties_asdict(properties: PropertySet | None) -> dict[str, str | None] | None:
    if properties is None:
        return None
    return {
        key: None if isinstance(value, Undefined) else value.text
        for key, value in sorted(properties.items())
    }


def document_asdict(document: Document) -> dict[str, dict[str, Any]]:
    """Return a JSON-ready view of the document with keys sorted."""
    return {name: document[name].asdict() for name in sorted(document)}
