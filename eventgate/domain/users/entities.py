# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from eventgate.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class UserProfile:
    """User fields that are safe to hand to callers."""

    id: int
    username: str
    email: str
    email_verified: bool


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    email_verified: bool
    password_hash: str = field(repr=False)

    def profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            username=self.username,
            email=self.email,
            email_verified=self.email_verified,
        )


@dataclass(slots=True, frozen=True)
class Session:

    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime
    user: UserProfile | None = None

    def __post_init__(self) -> None:
        if not self.token:
            raise InvariantViolation("token must not be empty", field="token")

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class TokenPurpose(StrEnum):
    EMAIL_VERIFICATION = "verify_email"
    PASSWORD_RESET = "password_reset"


@dataclass(slots=True, frozen=True)
class VerificationToken:
    """Single-use token; ``purpose`` keeps reset and verification tokens apart."""

    token: str
    user_id: int
    expires_at: datetime
    purpose: TokenPurpose = TokenPurpose.EMAIL_VERIFICATION

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at
