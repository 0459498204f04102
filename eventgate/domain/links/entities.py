# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from eventgate.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class ShortLink:
    """Short code pointing at a target URL, optionally time-bounded."""

    code: str
    target_url: str
    created_at: datetime
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.code:
            raise InvariantViolation("code must not be empty", field="code")
        if not self.target_url:
            raise InvariantViolation("target url must not be empty", field="target_url")

    def is_active(self, now: datetime) -> bool:
        return self.expires_at is None or now < self.expires_at
