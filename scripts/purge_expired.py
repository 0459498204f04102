# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delete expired sessions, short links and verification tokens."""

from __future__ import annotations

import argparse

from eventgate.infrastructure.container import Container
from eventgate.infrastructure.db import Database
from eventgate.shared.config import load_config
from eventgate.shared.logging import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Purge expired auth and short-link rows")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL",
    )
    args = parser.parse_args()

    config = load_config()
    if args.database_url:
        config = config.model_copy(
            update={"database": config.database.model_copy(update={"url": args.database_url})}
        )
    setup_logging(config.log_level, json_logs=config.log_json)

    database = Database(config.database).start()
    try:
        report = Container(config=config, database=database).purge_expired_use_case.execute()
    finally:
        database.dispose()
    print(
        f"Purged sessions={report.sessions} short_links={report.short_links} "
        f"verification_tokens={report.verification_tokens}"
    )


if __name__ == "__main__":
    main()
