# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from eventgate.shared.errors.base import DomainError


class CapacityError(DomainError):
    """Every short-code attempt collided with an existing code."""

    code = "short_code_capacity_exhausted"
    status = HTTPStatus.SERVICE_UNAVAILABLE

    def __init__(self, attempts: int) -> None:
        super().__init__(context={"attempts": attempts})
