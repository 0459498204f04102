# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from eventgate.domain.links.repositories import ShortLinkRepository
from eventgate.domain.users.repositories import (
    SessionRepository,
    VerificationTokenRepository,
)
from eventgate.shared.logging import logger
from eventgate.shared.utils.clock import Clock, utc_now


@dataclass(slots=True, frozen=True)
class PurgeReport:
    sessions: int
    short_links: int
    verification_tokens: int


class PurgeExpiredUseCase:
    def __init__(
        self,
        *,
        sessions: SessionRepository,
        links: ShortLinkRepository,
        verification_tokens: VerificationTokenRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._sessions = sessions
        self._links = links
        self._verification_tokens = verification_tokens
        self._clock = clock

    def execute(self) -> PurgeReport:
        now = self._clock()
        report = PurgeReport(
            sessions=self._sessions.purge_expired(now),
            short_links=self._links.purge_expired(now),
            verification_tokens=self._verification_tokens.purge_expired(now),
        )
        logger.info(
            f"maintenance.purge: sessions={report.sessions} "
            f"short_links={report.short_links} "
            f"verification_tokens={report.verification_tokens}"
        )
        return report
