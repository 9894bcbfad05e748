from __future__ import annotations

import os
from pathlib import Path

import pytest
from carton_snapshot import loader
from carton_snapshot.errors import ErrorKind, SnapshotParseError
from carton_snapshot.loader import invalidate_snapshot_cache, load_snapshot
from carton_snapshot.models import UNDEFINED, VersionSpec
from carton_snapshot.parser import parse_snapshot

SNAPSHOT = (
    "# carton snapshot format: version 1.0\n"
    "DISTRIBUTIONS\n"
    "  Try-Tiny-0.31\n"
    "    pathname: E/ET/ETHER/Try-Tiny-0.31.tar.gz\n"
    "    provides:\n"
    "      Try::Tiny 0.31\n"
    "    requirements:\n"
    "      Carp 0\n"
    "      perl 5.006\n"
)


@pytest.fixture(autouse=True)
def _clear_cache():
    invalidate_snapshot_cache()
    yield
    invalidate_snapshot_cache()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_snapshot_parses_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "cpanfile.snapshot", SNAPSHOT)
    document = load_snapshot(path, use_cache=False)
    assert document["Try-Tiny-0.31"].path == "E/ET/ETHER/Try-Tiny-0.31.tar.gz"
    assert len(document["Try-Tiny-0.31"].requires) == 2


@pytest.fixture()
def parse_calls(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    calls: list[str] = []

    def counting_parse(text: str, *, strict: bool | None = None):
        calls.append(text)
        return parse_snapshot(text, strict=strict)

    monkeypatch.setattr(loader, "parse_snapshot", counting_parse)
    return calls


def test_cache_skips_reparse_until_mtime_changes(
    tmp_path: Path, parse_calls: list[str]
) -> None:
    path = _write(tmp_path / "cpanfile.snapshot", SNAPSHOT)
    first = load_snapshot(path, use_cache=True)
    second = load_snapshot(str(path), use_cache=True)
    assert second == first
    assert len(parse_calls) == 1

    _write(path, SNAPSHOT.replace("0.31", "0.32"))
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    reloaded = load_snapshot(path, use_cache=True)
    assert len(parse_calls) == 2
    assert "Try-Tiny-0.32" in reloaded


def test_cached_document_is_not_shared_between_callers(tmp_path: Path) -> None:
    path = _write(tmp_path / "cpanfile.snapshot", SNAPSHOT)
    first = load_snapshot(path, use_cache=True)
    first["Try-Tiny-0.31"].requires["Injected"] = UNDEFINED
    first["Extra"] = first.pop("Try-Tiny-0.31")

    second = load_snapshot(path, use_cache=True)
    assert list(second) == ["Try-Tiny-0.31"]
    assert second["Try-Tiny-0.31"].requires == {
        "Carp": VersionSpec("0"),
        "perl": VersionSpec("5.006"),
    }


def test_invalidate_single_path(tmp_path: Path, parse_calls: list[str]) -> None:
    path = _write(tmp_path / "cpanfile.snapshot", SNAPSHOT)
    load_snapshot(path, use_cache=True)
    invalidate_snapshot_cache(path)
    load_snapshot(path, use_cache=True)
    assert len(parse_calls) == 2


def test_strictness_is_part_of_cache_key(tmp_path: Path) -> None:
    path = _write(tmp_path / "cpanfile.snapshot", SNAPSHOT + "\n")
    assert "Try-Tiny-0.31" in load_snapshot(path, strict=False, use_cache=True)
    with pytest.raises(SnapshotParseError) as excinfo:
        load_snapshot(path, strict=True, use_cache=True)
    assert excinfo.value.kind is ErrorKind.TRAILING_INPUT


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_snapshot(tmp_path / "missing.snapshot")
