# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from eventgate.application.services.verification import VerificationTokenService
from eventgate.domain.users.entities import VerificationToken
from eventgate.domain.users.exceptions import InvalidResetTokenError
from eventgate.domain.users.repositories import PasswordHasher, UserRepository
from eventgate.shared.logging import logger


class RequestPasswordResetUseCase:
    """Issue a reset token for ``email``; delivering it is the mailer's job.

    Unknown addresses yield ``None`` so callers can answer identically either
    way.
    """

    def __init__(self, *, tokens: VerificationTokenService, users: UserRepository) -> None:
        self._tokens = tokens
        self._users = users

    def execute(self, email: str) -> VerificationToken | None:
        user = self._users.find_by_email(email)
        if user is None:
            logger.info("auth.reset_request: unknown address")
            return None
        return self._tokens.issue(user.id)


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        tokens: VerificationTokenService,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, token: str, new_password: str) -> int:
        consumed = self._tokens.consume(token)
        if consumed is None:
            raise InvalidResetTokenError()
        password_hash = self._password_hasher.hash(new_password)
        if not self._users.update_password_hash(consumed.user_id, password_hash):
            raise InvalidResetTokenError()
        logger.info(f"auth.reset_password: ok user_id={consumed.user_id}")
        return consumed.user_id
