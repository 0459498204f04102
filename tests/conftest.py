from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from eventgate.domain.links.entities import ShortLink
from eventgate.domain.links.repositories import ShortLinkRepository
from eventgate.domain.users.entities import (
    Session,
    TokenPurpose,
    User,
    UserProfile,
    VerificationToken,
)
from eventgate.domain.users.repositories import (
    PasswordHasher,
    SessionRepository,
    UserRepository,
    VerificationTokenRepository,
)
from eventgate.shared.errors import StoreConflictError

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self._seq = 1

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def find_profile(self, user_id: int) -> UserProfile | None:
        user = self.users.get(user_id)
        return user.profile() if user else None

    def find_by_login(self, login: str) -> User | None:
        for user in self.users.values():
            if login in (user.username, user.email):
                return user
        return None

    def find_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def add(self, user: User) -> User:
        user_id = user.id or self._seq
        self._seq = max(self._seq, user_id) + 1
        stored = replace(user, id=user_id)
        self.users[user_id] = stored
        return stored

    def mark_email_verified(self, user_id: int) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        self.users[user_id] = replace(user, email_verified=True)
        return True

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        self.users[user_id] = replace(user, password_hash=password_hash)
        return True

    def count(self) -> int:
        return len(self.users)


class InMemorySessionRepository(SessionRepository):
    def __init__(self, users: InMemoryUserRepository) -> None:
        self.rows: dict[str, Session] = {}
        self._users = users

    def get(self, token: str) -> Session | None:
        row = self.rows.get(token)
        if row is None:
            return None
        return replace(row, user=self._users.find_profile(row.user_id))

    def add(self, session: Session) -> Session:
        if session.token in self.rows or session.user_id not in self._users.users:
            raise StoreConflictError("session")
        self.rows[session.token] = session
        return session

    def delete(self, token: str) -> bool:
        return self.rows.pop(token, None) is not None

    def count(self) -> int:
        return len(self.rows)

    def purge_expired(self, now: datetime) -> int:
        expired = [token for token, row in self.rows.items() if row.expires_at <= now]
        for token in expired:
            del self.rows[token]
        return len(expired)


class InMemoryShortLinkRepository(ShortLinkRepository):
    def __init__(self) -> None:
        self.rows: dict[str, ShortLink] = {}
        self.add_calls = 0

    def get(self, code: str) -> ShortLink | None:
        return self.rows.get(code)

    def add(self, link: ShortLink) -> ShortLink:
        self.add_calls += 1
        if link.code in self.rows:
            raise StoreConflictError("short_link")
        self.rows[link.code] = link
        return link

    def delete(self, code: str) -> bool:
        return self.rows.pop(code, None) is not None

    def count(self) -> int:
        return len(self.rows)

    def purge_expired(self, now: datetime) -> int:
        expired = [
            code
            for code, row in self.rows.items()
            if row.expires_at is not None and row.expires_at <= now
        ]
        for code in expired:
            del self.rows[code]
        return len(expired)


class InMemoryVerificationTokenRepository(VerificationTokenRepository):
    def __init__(self) -> None:
        self.rows: dict[str, VerificationToken] = {}

    def add(self, token: VerificationToken) -> VerificationToken:
        if token.token in self.rows:
            raise StoreConflictError("verification_token")
        self.rows[token.token] = token
        return token

    def consume(self, token: str, purpose: TokenPurpose) -> VerificationToken | None:
        row = self.rows.get(token)
        if row is None or row.purpose != purpose:
            return None
        return self.rows.pop(token)

    def count(self) -> int:
        return len(self.rows)

    def purge_expired(self, now: datetime) -> int:
        expired = [token for token, row in self.rows.items() if row.expires_at <= now]
        for token in expired:
            del self.rows[token]
        return len(expired)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture(autouse=True)
def _log_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "eventgate.log"))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    repo.add(
        User(
            id=42,
            username="alice",
            email="alice@example.com",
            email_verified=False,
            password_hash="hashed:correct horse",
        )
    )
    return repo


@pytest.fixture()
def session_rows(users: InMemoryUserRepository) -> InMemorySessionRepository:
    return InMemorySessionRepository(users)


@pytest.fixture()
def link_rows() -> InMemoryShortLinkRepository:
    return InMemoryShortLinkRepository()


@pytest.fixture()
def verification_rows() -> InMemoryVerificationTokenRepository:
    return InMemoryVerificationTokenRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()
