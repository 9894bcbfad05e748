"""Command-line entry point for inspecting snapshot files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog

from carton_snapshot.errors import SnapshotParseError
from carton_snapshot.loader import load_snapshot
from carton_snapshot.models import Document, document_asdict
from carton_snapshot.settings import get_settings

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_MISSING_FILE = 2  # also directories and unreadable files


def configure_logging(log_level: str) -> None:
    numeric_level = logging.getLevelName(log_level.upper())
    if isinstance(numeric_level, str):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def summarize(document: Document) -> dict[str, int]:
    provides = 0
    requirements = 0
    for record in document.values():
        provides += len(record.provides or {})
        requirements += len(record.requires or {})
    return {
        "distributions": len(document),
        "provides": provides,
        "requirements": requirements,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carton-snapshot",
        description="Parse a carton snapshot file and report its contents.",
    )
    parser.add_argument("path", type=Path, help="Path to a cpanfile.snapshot file.")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Ignore unrecognized text after the last distribution block.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print every distribution as JSON instead of a summary.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    strict = False if args.lenient else None
    try:
        document = load_snapshot(args.path, strict=strict, use_cache=False)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_MISSING_FILE
    except OSError as exc:
        print(f"{args.path}: unreadable snapshot: {exc.strerror or exc}", file=sys.stderr)
        return EXIT_MISSING_FILE
    except UnicodeDecodeError as exc:
        print(f"{args.path}: not valid UTF-8 at byte {exc.start}", file=sys.stderr)
        return EXIT_PARSE_ERROR
    except SnapshotParseError as exc:
        print(f"{args.path}:{exc}", file=sys.stderr)
        return EXIT_PARSE_ERROR

    if args.json:
        print(json.dumps(document_asdict(document), indent=2))
    else:
        counts = summarize(document)
        print(
            f"{counts['distributions']} distributions, "
            f"{counts['provides']} provides, "
            f"{counts['requirements']} requirements"
        )
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - manual run helper
    raise SystemExit(main())
