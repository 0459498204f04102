# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Server-side session lifecycle.

Every validation is a fresh repository read, so deleting a row revokes the
session for all subsequent requests immediately. Expired rows are left in
place on read; :class:`PurgeExpiredUseCase` removes them out of band.
"""

from __future__ import annotations

from datetime import timedelta

from eventgate.application.services.token_codec import DEFAULT_TOKEN_BYTES, generate_token
from eventgate.domain.users.entities import Session
from eventgate.domain.users.repositories import SessionRepository
from eventgate.shared.logging import logger
from eventgate.shared.utils.clock import Clock, utc_now
from eventgate.shared.utils.cookies import extract_cookie

DEFAULT_COOKIE_NAME = "session_token"
DEFAULT_SESSION_TTL = timedelta(days=7)


class SessionManager:
    def __init__(
        self,
        *,
        sessions: SessionRepository,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
        clock: Clock = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("session ttl must be positive")
        self._sessions = sessions
        self._ttl = ttl
        self._cookie_name = cookie_name
        self._token_bytes = token_bytes
        self._clock = clock

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def create_session(self, user_id: int, ttl: timedelta | None = None) -> Session:
        lifetime = ttl if ttl is not None else self._ttl
        if lifetime <= timedelta(0):
            raise ValueError("session ttl must be positive")
        now = self._clock()
        session = Session(
            token=generate_token(self._token_bytes),
            user_id=user_id,
            created_at=now,
            expires_at=now + lifetime,
        )
        persisted = self._sessions.add(session)
        logger.info(
            f"session.create: user={user_id} exp={persisted.expires_at.isoformat()} "
            f"tok={persisted.token[:8]}…"
        )
        return persisted

    def get_session(self, token: str) -> Session | None:
        if not token:
            return None
        session = self._sessions.get(token)
        if session is None:
            logger.debug(f"session.lookup: unknown tok={token[:8]}…")
            return None
        if not session.is_valid(self._clock()):
            logger.debug(f"session.lookup: expired user={session.user_id} tok={token[:8]}…")
            return None
        return session

    def get_session_from_cookie(self, raw_cookie_header: str | None) -> Session | None:
        token = extract_cookie(raw_cookie_header, self._cookie_name)
        if token is None:
            return None
        return self.get_session(token)

    def delete_session(self, token: str) -> None:
        if not token:
            return
        removed = self._sessions.delete(token)
        logger.info(f"session.delete: tok={token[:8]}… removed={removed}")
