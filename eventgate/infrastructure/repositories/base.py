# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from contextlib import AbstractContextManager

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventgate.infrastructure.db import Base
from eventgate.infrastructure.unit_of_work import SessionFactory, unit_of_work_scope


class SqlAlchemyRepository:
    """Shared plumbing: one transaction per call, labelled by entity."""

    entity: str = "unknown"
    model: type[Base]

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def _scope(self, *, read_only: bool = False) -> AbstractContextManager[Session]:
        return unit_of_work_scope(self._session_factory, entity=self.entity, read_only=read_only)

    def count(self) -> int:
        with self._scope(read_only=True) as session:
            return int(session.scalar(select(func.count()).select_from(self.model)) or 0)
