from __future__ import annotations

import pytest
from carton_snapshot.models import VersionSpec
from carton_snapshot.parser import parse_snapshot
from tests.regression.runner import CORPUS_DIR, check_sample, load_golden, run_golden_suite

GOLDEN = load_golden()


def test_golden_covers_corpus() -> None:
    assert run_golden_suite() == []


@pytest.mark.parametrize("sample", sorted(GOLDEN))
def test_sample_matches_golden(sample: str) -> None:
    assert check_sample(CORPUS_DIR / sample, GOLDEN[sample]) == []


def test_duplicate_name_keeps_second_block() -> None:
    text = (CORPUS_DIR / "duplicate_names.snapshot").read_text(encoding="utf-8")
    record = parse_snapshot(text)["Dup"]
    assert record.path == "D/DU/DUP/Dup-2.0.tar.gz"
    assert record.provides is None
    assert record.requires == {"Moo": VersionSpec(">=1.2, <2.0")}


def test_trailing_text_tolerated_when_lenient() -> None:
    text = (CORPUS_DIR / "trailing_text.snapshot").read_text(encoding="utf-8")
    assert list(parse_snapshot(text, strict=False)) == ["Foo-1.0"]
