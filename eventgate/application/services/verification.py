# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from eventgate.application.services.token_codec import DEFAULT_TOKEN_BYTES, generate_token
from eventgate.domain.users.entities import TokenPurpose, VerificationToken
from eventgate.domain.users.repositories import VerificationTokenRepository
from eventgate.shared.logging import logger
from eventgate.shared.utils.clock import Clock, utc_now

DEFAULT_VERIFICATION_TTL = timedelta(hours=24)
DEFAULT_PASSWORD_RESET_TTL = timedelta(hours=1)


class VerificationTokenService:
    """Single-use tokens proving control of an email address.

    One instance serves one :class:`TokenPurpose`; a token issued for email
    verification is never accepted as a password reset token and vice versa.
    """

    def __init__(
        self,
        *,
        tokens: VerificationTokenRepository,
        ttl: timedelta = DEFAULT_VERIFICATION_TTL,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
        purpose: TokenPurpose = TokenPurpose.EMAIL_VERIFICATION,
        clock: Clock = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        self._tokens = tokens
        self._ttl = ttl
        self._token_bytes = token_bytes
        self._purpose = purpose
        self._clock = clock

    @property
    def purpose(self) -> TokenPurpose:
        return self._purpose

    def issue(self, user_id: int, ttl: timedelta | None = None) -> VerificationToken:
        lifetime = ttl if ttl is not None else self._ttl
        if lifetime <= timedelta(0):
            raise ValueError("token ttl must be positive")
        token = VerificationToken(
            token=generate_token(self._token_bytes),
            user_id=user_id,
            expires_at=self._clock() + lifetime,
            purpose=self._purpose,
        )
        persisted = self._tokens.add(token)
        logger.info(f"{self._purpose}.issue: user={user_id} tok={token.token[:8]}…")
        return persisted

    def consume(self, token: str) -> VerificationToken | None:
        # The delete decides the winner; an expired row is removed all the same.
        if not token:
            return None
        consumed = self._tokens.consume(token, self._purpose)
        if consumed is None:
            return None
        if not consumed.is_valid(self._clock()):
            logger.info(f"{self._purpose}.consume: expired user={consumed.user_id}")
            return None
        return consumed
