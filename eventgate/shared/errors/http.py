# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from eventgate.shared.logging import logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _http_error_code(exc: HTTPException) -> str:
    return (exc.name or "http_error").lower().replace(" ", "_")


def register_error_handler(app: Flask, *, debug_mode: bool = False) -> None:
    """Every error leaves the app as ``{"error": <code>}`` JSON."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        where = f"{request.method} {request.path}"
        if isinstance(exc, InfrastructureError):
            logger.error(f"{exc.code} on {where}: {exc.__cause__!r}")
        else:
            logger.warning(f"{exc.code} on {where}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        response = jsonify({"error": _http_error_code(exc)})
        response.status_code = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        where = f"{request.method} {request.path} user={g.get('user_id')}"
        if debug_mode:
            logger.exception(f"unhandled {type(exc).__name__} on {where}")
        else:
            logger.error(f"unhandled {type(exc).__name__} on {where}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR


__all__ = ["handle_app_error", "register_error_handler"]
