# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Session, TokenPurpose, User, UserProfile, VerificationToken


class UserRepository(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_profile(self, user_id: int) -> UserProfile | None: ...
    def find_by_login(self, login: str) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def mark_email_verified(self, user_id: int) -> bool: ...
    def update_password_hash(self, user_id: int, password_hash: str) -> bool: ...
    def count(self) -> int: ...


class SessionRepository(Protocol):
    def get(self, token: str) -> Session | None: ...
    def add(self, session: Session) -> Session: ...
    def delete(self, token: str) -> bool: ...
    def count(self) -> int: ...
    def purge_expired(self, now: datetime) -> int: ...


class VerificationTokenRepository(Protocol):
    def add(self, token: VerificationToken) -> VerificationToken: ...
    def consume(self, token: str, purpose: TokenPurpose) -> VerificationToken | None: ...
    def count(self) -> int: ...
    def purge_expired(self, now: datetime) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
