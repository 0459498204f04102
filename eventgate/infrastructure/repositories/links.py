# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete

from eventgate.domain.links.entities import ShortLink
from eventgate.domain.links.repositories import ShortLinkRepository
from eventgate.infrastructure.db.models import ShortLinkRow
from eventgate.infrastructure.repositories.base import SqlAlchemyRepository
from eventgate.shared.utils.clock import ensure_utc


class SqlAlchemyShortLinkRepository(SqlAlchemyRepository, ShortLinkRepository):
    entity = "short_link"
    model = ShortLinkRow

    def get(self, code: str) -> ShortLink | None:
        with self._scope(read_only=True) as session:
            row = session.get(ShortLinkRow, code)
            if row is None:
                return None
            return ShortLink(
                code=row.code,
                target_url=row.target_url,
                created_at=ensure_utc(row.created_at),
                expires_at=ensure_utc(row.expires_at) if row.expires_at else None,
            )

    def add(self, link: ShortLink) -> ShortLink:
        # flush() makes a duplicate primary key fail inside the scope.
        with self._scope() as session:
            session.add(
                ShortLinkRow(
                    code=link.code,
                    target_url=link.target_url,
                    created_at=link.created_at,
                    expires_at=link.expires_at,
                )
            )
            session.flush()
        return link

    def delete(self, code: str) -> bool:
        with self._scope() as session:
            result = session.execute(
                delete(ShortLinkRow)
                .where(ShortLinkRow.code == code)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def purge_expired(self, now: datetime) -> int:
        with self._scope() as session:
            result = session.execute(
                delete(ShortLinkRow)
                .where(ShortLinkRow.expires_at.is_not(None), ShortLinkRow.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)
