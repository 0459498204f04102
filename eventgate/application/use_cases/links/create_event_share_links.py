# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import quote

from eventgate.application.services.short_links import ShortLinkResolver


@dataclass(slots=True, frozen=True)
class EventShareLinks:
    view_url: str
    check_in_url: str


class CreateEventShareLinksUseCase:
    """Short links for an event's public view page and its check-in page."""

    def __init__(
        self, *, resolver: ShortLinkResolver, app_url: str, ttl: timedelta
    ) -> None:
        self._resolver = resolver
        self._app_url = app_url.rstrip("/")
        self._ttl = ttl

    def execute(self, event_code: str) -> EventShareLinks:
        segment = quote(event_code, safe="")
        view_code = self._resolver.create_short_code(
            f"{self._app_url}/view/{segment}", ttl=self._ttl
        )
        check_in_code = self._resolver.create_short_code(
            f"{self._app_url}/check-in/{segment}", ttl=self._ttl
        )
        return EventShareLinks(
            view_url=self._resolver.short_url(view_code),
            check_in_url=self._resolver.short_url(check_in_code),
        )
