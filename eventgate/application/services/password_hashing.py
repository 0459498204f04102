# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from eventgate.domain.users.repositories import PasswordHasher
from eventgate.shared.logging import logger

DEFAULT_HASH_METHOD = "scrypt"


class WerkzeugPasswordHasher(PasswordHasher):
    """Hashes are stored in werkzeug's ``method$salt$hash`` form."""

    def __init__(self, method: str = DEFAULT_HASH_METHOD) -> None:
        self._method = method

    def hash(self, password: str) -> str:
        return str(generate_password_hash(password, method=self._method))

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError:
            # werkzeug raises on an unknown method prefix; treat as a mismatch
            logger.warning("password: stored hash has an unrecognised method")
            return False
