# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from eventgate.infrastructure.db import Database
from eventgate.shared.errors import StoreError


class Countable(Protocol):
    def count(self) -> int: ...


def check_database(database: Database) -> bool:
    try:
        database.ping()
    except SQLAlchemyError as exc:
        raise StoreError() from exc
    return True


def collect_counts(stores: Mapping[str, Countable]) -> dict[str, int]:
    return {name: store.count() for name, store in stores.items()}


__all__ = ["Countable", "check_database", "collect_counts"]
