# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup shared by the web app and the maintenance scripts.

Every record carries the request's correlation id and, once a session has
been resolved, the authenticated user id. Messages pass through
:func:`sanitize_record` before reaching any sink, so a token or password
that slips into an f-string is redacted.
"""

from __future__ import annotations

import inspect
import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<yellow>u={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
_UNSET = "-"

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default=_UNSET)
_USER_ID: ContextVar[str] = ContextVar("user_id", default=_UNSET)

# Chatty third-party loggers and the level they are capped at.
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


def _resolve_log_file(log_file: str | None) -> Path:
    if log_file:
        path = Path(log_file)
    elif os.getenv("LOG_FILE"):
        path = Path(os.environ["LOG_FILE"])
    else:
        path = Path.cwd() / "instance" / "eventgate.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class _InterceptHandler(logging.Handler):
    """Forward stdlib records (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        _logger.opt(depth=depth, exception=record.exc_info).bind(
            correlation_id=_CORRELATION_ID.get(), user_id=_USER_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """Loguru proxy that binds the current request context on every call."""

    def __getattr__(self, name):
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get(), user_id=_USER_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or _UNSET)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def bind_user_id(user_id: int | None) -> None:
    _USER_ID.set(str(user_id) if user_id is not None else _UNSET)


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(_UNSET)
    _USER_ID.set(_UNSET)


def setup_logging(
    level: str | None = None,
    *,
    log_file: str | None = None,
    json_logs: bool = False,
) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    path = _resolve_log_file(log_file)

    _logger.remove()
    _logger.configure(
        extra={"correlation_id": _UNSET, "user_id": _UNSET},
        patcher=sanitize_record,
    )
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        colorize=not json_logs,
        serialize=json_logs,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        path,
        level=level,
        format=_FMT,
        colorize=False,
        serialize=json_logs,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation=os.getenv("LOG_ROTATION", "10 MB"),
        retention=os.getenv("LOG_RETENTION", "14 days"),
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)


logger = ContextualLogger()

__all__ = [
    "bind_user_id",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
