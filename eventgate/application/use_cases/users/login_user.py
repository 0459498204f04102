# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from eventgate.application.services.session_manager import SessionManager
from eventgate.domain.users.entities import Session, User
from eventgate.domain.users.exceptions import InvalidCredentialsError
from eventgate.domain.users.repositories import PasswordHasher, UserRepository
from eventgate.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionManager,
        password_hasher: PasswordHasher,
        remember_ttl: timedelta,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher
        self._remember_ttl = remember_ttl

    def execute(
        self, login: str, password: str, remember_me: bool = False
    ) -> tuple[User, Session]:
        user = self._users.find_by_login(login)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )
        if user is None or not password_valid:
            logger.warning("auth.login: invalid credentials")
            raise InvalidCredentialsError()

        session = self._sessions.create_session(
            user.id, ttl=self._remember_ttl if remember_me else None
        )
        return user, session
