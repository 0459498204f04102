# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for revoking the session named by a request cookie."""

from __future__ import annotations

from eventgate.application.services.session_manager import SessionManager


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, raw_cookie_header: str | None) -> bool:
        session = self._sessions.get_session_from_cookie(raw_cookie_header)
        if session is None:
            return False
        self._sessions.delete_session(session.token)
        return True
