# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import joinedload

from eventgate.domain.users.entities import Session as DomainSession
from eventgate.domain.users.entities import User as DomainUser
from eventgate.domain.users.entities import TokenPurpose, UserProfile
from eventgate.domain.users.entities import VerificationToken as DomainVerificationToken
from eventgate.domain.users.repositories import (
    SessionRepository,
    UserRepository,
    VerificationTokenRepository,
)
from eventgate.infrastructure.db.models import SessionRow, User, VerificationTokenRow
from eventgate.infrastructure.repositories.base import SqlAlchemyRepository
from eventgate.shared.utils.clock import ensure_utc


def _to_profile(row: User) -> UserProfile:
    return UserProfile(
        id=row.id,
        username=row.username,
        email=row.email,
        email_verified=bool(row.email_verified),
    )


def _to_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        email_verified=bool(row.email_verified),
        password_hash=row.password_hash,
    )


class SqlAlchemyUserRepository(SqlAlchemyRepository, UserRepository):
    entity = "user"
    model = User

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with self._scope(read_only=True) as session:
            row = session.get(User, user_id)
            return _to_user(row) if row else None

    def find_profile(self, user_id: int) -> UserProfile | None:
        with self._scope(read_only=True) as session:
            row = session.get(User, user_id)
            return _to_profile(row) if row else None

    def find_by_login(self, login: str) -> DomainUser | None:
        with self._scope(read_only=True) as session:
            row = session.scalars(
                select(User).where(or_(User.username == login, User.email == login))
            ).first()
            return _to_user(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with self._scope(read_only=True) as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        with self._scope() as session:
            row = User(
                username=user.username,
                email=user.email,
                email_verified=user.email_verified,
                password_hash=user.password_hash,
            )
            session.add(row)
            session.flush()
            return _to_user(row)

    def mark_email_verified(self, user_id: int) -> bool:
        with self._scope() as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id)
                .values(email_verified=True)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with self._scope() as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1


class SqlAlchemySessionRepository(SqlAlchemyRepository, SessionRepository):
    entity = "session"
    model = SessionRow

    def get(self, token: str) -> DomainSession | None:
        with self._scope(read_only=True) as session:
            row = session.scalars(
                select(SessionRow)
                .options(joinedload(SessionRow.user))
                .where(SessionRow.token == token)
            ).first()
            if row is None:
                return None
            return DomainSession(
                token=row.token,
                user_id=row.user_id,
                created_at=ensure_utc(row.created_at),
                expires_at=ensure_utc(row.expires_at),
                user=_to_profile(row.user) if row.user else None,
            )

    def add(self, entity: DomainSession) -> DomainSession:
        with self._scope() as session:
            session.add(
                SessionRow(
                    token=entity.token,
                    user_id=entity.user_id,
                    created_at=entity.created_at,
                    expires_at=entity.expires_at,
                )
            )
            session.flush()
        return entity

    def delete(self, token: str) -> bool:
        with self._scope() as session:
            result = session.execute(
                delete(SessionRow)
                .where(SessionRow.token == token)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def purge_expired(self, now: datetime) -> int:
        with self._scope() as session:
            result = session.execute(
                delete(SessionRow)
                .where(SessionRow.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)


class SqlAlchemyVerificationTokenRepository(SqlAlchemyRepository, VerificationTokenRepository):
    entity = "verification_token"
    model = VerificationTokenRow

    def add(self, token: DomainVerificationToken) -> DomainVerificationToken:
        with self._scope() as session:
            session.add(
                VerificationTokenRow(
                    token=token.token,
                    user_id=token.user_id,
                    purpose=token.purpose.value,
                    expires_at=token.expires_at,
                )
            )
            session.flush()
        return token

    def consume(self, token: str, purpose: TokenPurpose) -> DomainVerificationToken | None:
        with self._scope() as session:
            row = session.get(VerificationTokenRow, token)
            if row is None or row.purpose != purpose.value:
                return None
            consumed = DomainVerificationToken(
                token=row.token,
                user_id=row.user_id,
                expires_at=ensure_utc(row.expires_at),
                purpose=purpose,
            )
            # Concurrent consumers may both read the row; only one delete hits it.
            result = session.execute(
                delete(VerificationTokenRow)
                .where(
                    VerificationTokenRow.token == token,
                    VerificationTokenRow.purpose == purpose.value,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
        return consumed

    def purge_expired(self, now: datetime) -> int:
        with self._scope() as session:
            result = session.execute(
                delete(VerificationTokenRow)
                .where(VerificationTokenRow.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)
