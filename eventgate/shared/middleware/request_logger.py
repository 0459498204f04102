# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request correlation ids, access logging and request metrics."""

from __future__ import annotations

import hashlib
import secrets
import time

from flask import Flask, g, request
from werkzeug.http import parse_cookie

from eventgate.infrastructure.observability import observe_request
from eventgate.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes are polled constantly; their access lines go to debug.
_QUIET_PATHS = frozenset({"/api/health", "/metrics"})
_SECRET_QUERY_KEYS = ("password", "token", "secret", "code")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()[:8]


def _debug_headers() -> dict[str, str]:
    """Request headers with credentials replaced by names or fingerprints."""

    headers: dict[str, str] = {}
    for key, value in request.headers.items():
        lowered = key.lower()
        if lowered == "cookie":
            headers[key] = f"<names:{','.join(sorted(parse_cookie(value)))}>"
        elif lowered in ("authorization", "x-csrf-token"):
            headers[key] = f"<sha256:{_fingerprint(value)}>"
        else:
            headers[key] = value
    return headers


def _debug_query() -> dict[str, str]:
    return {
        key: "<redacted>" if any(s in key.lower() for s in _SECRET_QUERY_KEYS) else value
        for key, value in request.args.items()
    }


def configure_request_logging(
    app: Flask, *, debug_mode: bool = False, metrics_enabled: bool = False
) -> None:
    @app.before_request
    def _start() -> None:
        set_correlation_id(request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8))
        g.request_started = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"-> {request.method} {request.path} ip={_client_ip()} "
                f"query={_debug_query()} headers={_debug_headers()}"
            )

    @app.after_request
    def _finish(response):
        duration = time.perf_counter() - g.get("request_started", time.perf_counter())
        quiet = request.path in _QUIET_PATHS
        log = logger.debug if quiet else logger.info
        log(
            f"<- {request.method} {request.path} status={response.status_code} "
            f"{duration * 1000:.1f}ms user={g.get('user_id')}"
        )
        if metrics_enabled:
            endpoint = request.url_rule.rule if request.url_rule else "unmatched"
            observe_request(endpoint, response.status_code, duration)
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request aborted: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
