"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PARSE_LATENCY = Histogram(
    "carton_snapshot_parse_latency_seconds",
    "Latency of snapshot document parses",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    registry=REGISTRY,
)

DISTRIBUTIONS_TOTAL = Counter(
    "carton_snapshot_distributions_total",
    "Number of distribution records parsed",
    registry=REGISTRY,
)

PARSE_FAILURES = Counter(
    "carton_snapshot_parse_failures_total",
    "Number of failed parses grouped by error kind",
    labelnames=("kind",),
    registry=REGISTRY,
)


def observe_parse(*, latency_ms: float, distributions: int) -> None:
    PARSE_LATENCY.observe(latency_ms / 1000.0)
    DISTRIBUTIONS_TOTAL.inc(distributions)


def observe_failure(*, kind: str) -> None:
    PARSE_FAILURES.labels(kind=kind).inc()


def render_metrics() -> tuple[bytes, str]:
    payload = generate_latest(REGISTRY)
    return payload, CONTENT_TYPE_LATEST
