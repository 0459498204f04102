# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope for repository calls.

Each repository method runs in its own short transaction. Driver errors never
leave this module as SQLAlchemy exceptions: a violated constraint becomes
:class:`StoreConflictError` and anything else :class:`StoreError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from eventgate.shared.errors import StoreConflictError, StoreError
from eventgate.shared.logging import logger

SessionFactory = Callable[[], Session]


@contextmanager
def _transaction(factory: SessionFactory, *, read_only: bool) -> Iterator[Session]:
    session = factory()
    try:
        yield session
        if read_only:
            session.rollback()
        else:
            session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def unit_of_work_scope(
    factory: SessionFactory, *, entity: str | None = None, read_only: bool = False
) -> Iterator[Session]:
    label = entity or "unknown"
    try:
        with _transaction(factory, read_only=read_only) as session:
            yield session
    except IntegrityError as exc:
        logger.warning(f"store: constraint violation on {label}")
        raise StoreConflictError(entity) from exc
    except SQLAlchemyError as exc:
        logger.error(f"store: {type(exc).__name__} on {label}")
        raise StoreError() from exc


__all__ = ["SessionFactory", "unit_of_work_scope"]
