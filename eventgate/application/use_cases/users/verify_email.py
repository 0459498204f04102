# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from eventgate.application.services.verification import VerificationTokenService
from eventgate.domain.users.exceptions import InvalidVerificationTokenError
from eventgate.domain.users.repositories import UserRepository
from eventgate.shared.logging import logger


class VerifyEmailUseCase:
    def __init__(
        self, *, tokens: VerificationTokenService, users: UserRepository
    ) -> None:
        self._tokens = tokens
        self._users = users

    def execute(self, token: str) -> int:
        consumed = self._tokens.consume(token)
        if consumed is None:
            raise InvalidVerificationTokenError()
        if not self._users.mark_email_verified(consumed.user_id):
            raise InvalidVerificationTokenError()
        logger.info(f"auth.verify_email: ok user_id={consumed.user_id}")
        return consumed.user_id
