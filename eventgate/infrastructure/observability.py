# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "eventgate_request_latency_seconds",
    "Request latency",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "eventgate_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
LOGIN_ATTEMPTS = Counter(
    "eventgate_login_attempts_total",
    "Login attempts by outcome",
    labelnames=("result",),
)
SHORT_LINK_LOOKUPS = Counter(
    "eventgate_short_link_lookups_total",
    "Short code lookups by outcome",
    labelnames=("result",),
)
SHORT_CODE_COLLISIONS = Counter(
    "eventgate_short_code_collisions_total",
    "Generated short codes rejected as duplicates",
)


def observe_request(endpoint: str, status: int, duration: float) -> None:
    REQUEST_LATENCY.observe(duration)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "LOGIN_ATTEMPTS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "SHORT_CODE_COLLISIONS",
    "SHORT_LINK_LOOKUPS",
    "observe_request",
    "render_metrics",
]
