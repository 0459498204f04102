# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error taxonomy shared by every layer.

Each error carries a stable ``code`` (the JSON ``error`` field) and the HTTP
status the web layer answers with. Subclasses declare both as class
attributes; instances may override them.
"""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any


class AppError(Exception):
    code: str = "internal_error"
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        code: str | None = None,
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.code = code or type(self).code
        self.status = status or type(self).status
        self.context = dict(context) if context else None
        super().__init__(self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST


class InfrastructureError(AppError):
    code = "infrastructure_error"


class ValidationError(AppError):
    code = "validation_error"
    status = HTTPStatus.UNPROCESSABLE_ENTITY


class StoreError(InfrastructureError):
    """Persistence failure. Always surfaced to the caller."""

    code = "store_unavailable"
    status = HTTPStatus.SERVICE_UNAVAILABLE


class StoreConflictError(StoreError):
    """Insert rejected by a uniqueness or foreign key constraint."""

    code = "store_conflict"
    status = HTTPStatus.CONFLICT

    def __init__(self, entity: str | None = None) -> None:
        super().__init__(context={"entity": entity} if entity else None)
        self.entity = entity


class UnauthorizedError(AppError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED


class ShortLinkNotFoundError(AppError):
    code = "short_link_not_found"
    status = HTTPStatus.NOT_FOUND
