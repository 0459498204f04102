# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from eventgate.application.services.session_manager import SessionManager
from eventgate.domain.users.entities import UserProfile
from eventgate.domain.users.repositories import UserRepository


class GetSessionUserUseCase:
    """Profile joined onto the session row."""

    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, raw_cookie_header: str | None) -> UserProfile | None:
        session = self._sessions.get_session_from_cookie(raw_cookie_header)
        if session is None:
            return None
        return session.user


class GetCurrentUserUseCase:
    """Resolves the session, then reads the profile by id."""

    def __init__(self, *, sessions: SessionManager, users: UserRepository) -> None:
        self._sessions = sessions
        self._users = users

    def execute(self, raw_cookie_header: str | None) -> UserProfile | None:
        session = self._sessions.get_session_from_cookie(raw_cookie_header)
        if session is None:
            return None
        return self._users.find_profile(session.user_id)
