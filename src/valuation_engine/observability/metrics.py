"""Prometheus metrics recorded by the valuation facade."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


OPERATION_LATENCY = Histogram(
    "ve_operation_latency_seconds",
    "Time spent executing valuation operations",
    labelnames=("operation",),
    buckets=(
        0.00005,
        0.0001,
        0.0005,
        0.001,
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
    ),
)

OPERATION_FAILURES = Counter(
    "ve_operation_failures_total",
    "Number of typed failures returned by valuation operations",
    labelnames=("operation", "error"),
)
