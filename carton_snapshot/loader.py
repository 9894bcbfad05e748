"""Load snapshot files from disk with an mtime-keyed cache."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from threading import RLock

import structlog

from carton_snapshot.models import Document
from carton_snapshot.parser import parse_snapshot
from carton_snapshot.settings import get_settings

LOGGER = structlog.get_logger(__name__)

_SNAPSHOT_CACHE: dict[tuple[Path, bool], tuple[float, Document]] = {}
_SNAPSHOT_LOCK = RLock()


def _detached(document: Document) -> Document:
    """Copy the containers so callers never share the cached dicts."""
    return {
        name: replace(
            record,
            provides=None if record.provides is None else dict(record.provides),
            requires=None if record.requires is None else dict(record.requires),
        )
        for name, record in document.items()
    }


def load_snapshot(
    path: Path | str,
    *,
    strict: bool | None = None,
    use_cache: bool | None = None,
) -> Document:
    """Read and parse a snapshot file.

    Each call returns its own document. With the cache enabled an unchanged
    file is not re-parsed, and changes a caller makes to the returned dicts
    never reach the cache or other callers.
    """
    settings = get_settings()
    if strict is None:
        strict = settings.strict_trailing
    if use_cache is None:
        use_cache = settings.cache_enabled

    resolved = Path(path).resolve()
    try:
        mtime = resolved.stat().st_mtime
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Snapshot file {resolved} not found") from exc

    key = (resolved, strict)
    if use_cache:
        with _SNAPSHOT_LOCK:
            cached = _SNAPSHOT_CACHE.get(key)
            if cached and cached[0] == mtime:
                LOGGER.debug("snapshot.cache.hit", path=str(resolved))
                return _detached(cached[1])

    document = parse_snapshot(resolved.read_text(encoding="utf-8"), strict=strict)

    if use_cache:
        with _SNAPSHOT_LOCK:
            _SNAPSHOT_CACHE[key] = (mtime, document)
        return _detached(document)

    return document


def invalidate_snapshot_cache(path: Path | str | None = None) -> None:
    """Clear cached snapshot entries (all or a specific file)."""

    with _SNAPSHOT_LOCK:
        if path is None:
            _SNAPSHOT_CACHE.clear()
            return
        resolved = Path(path).resolve()
        for key in [key for key in _SNAPSHOT_CACHE if key[0] == resolved]:
            del _SNAPSHOT_CACHE[key]
