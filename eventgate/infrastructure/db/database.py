# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Process-wide database engine with an explicit start/dispose lifecycle."""

from __future__ import annotations

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from eventgate.shared.config import DatabaseConfig
from eventgate.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    finally:
        cur.close()


class Database:
    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_sqlite(self) -> bool:
        return self._config.url.startswith("sqlite")

    def start(self) -> Database:
        if self._engine is not None:
            return self

        connect_args: dict[str, object] = {}
        if self.is_sqlite:
            connect_args = {
                "check_same_thread": False,
                "timeout": int(self._config.pool_timeout),
            }

        engine = create_engine(
            self._config.url,
            echo=False,
            pool_pre_ping=True,
            pool_size=self._config.pool_size,
            max_overflow=self._config.max_overflow,
            pool_timeout=self._config.pool_timeout,
            connect_args=connect_args,
        )
        if self.is_sqlite:
            event.listen(engine, "connect", _set_sqlite_pragmas)

        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
        logger.info(f"db: engine started url={engine.url!r}")
        return self

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database accessed before start()")
        return self._engine

    def session_factory(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database accessed before start()")
        return self._session_factory()

    def create_schema(self) -> None:
        from eventgate.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("db: engine disposed")
