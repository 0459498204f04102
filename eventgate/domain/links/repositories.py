# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import ShortLink


class ShortLinkRepository(Protocol):
    def get(self, code: str) -> ShortLink | None: ...
    def add(self, link: ShortLink) -> ShortLink: ...
    def delete(self, code: str) -> bool: ...
    def count(self) -> int: ...
    def purge_expired(self, now: datetime) -> int: ...
