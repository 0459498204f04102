# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping

from flask import Blueprint, Response, jsonify

from eventgate.infrastructure.db import Database
from eventgate.infrastructure.health import Countable, check_database, collect_counts
from eventgate.infrastructure.observability import render_metrics
from eventgate.shared.errors import StoreError
from eventgate.shared.logging import logger


class MiscController:
    def __init__(
        self,
        *,
        database: Database,
        stores: Mapping[str, Countable],
        metrics_enabled: bool = False,
    ) -> None:
        self._database = database
        self._stores = stores
        self._metrics_enabled = metrics_enabled

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        if self._metrics_enabled:
            bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database(self._database)
            status["database"] = "ok"
            status["counts"] = collect_counts(self._stores)
        except StoreError as exc:
            logger.error(f"health: store check failed: {exc.__cause__!r}")
            status["ok"] = False
            status["database"] = "unavailable"
            return jsonify(status), 503
        return jsonify(status), 200

    def metrics(self) -> Response:
        body, content_type = render_metrics()
        return Response(body, content_type=content_type)
