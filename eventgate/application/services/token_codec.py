# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Opaque token and short code generation.

Both generators draw from :mod:`secrets`. Tokens are URL-safe base64 and
short codes are restricted to RFC 3986 unreserved characters, so neither
needs escaping in a URL path segment or a cookie value.
"""

from __future__ import annotations

import secrets
import string

MIN_TOKEN_BYTES = 16
DEFAULT_TOKEN_BYTES = 32
DEFAULT_SHORT_CODE_ALPHABET = string.ascii_letters + string.digits

_UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")


def ensure_safe_alphabet(alphabet: str) -> str:
    if len(set(alphabet)) < 2:
        raise ValueError("alphabet must contain at least two distinct characters")
    if len(set(alphabet)) != len(alphabet):
        raise ValueError("alphabet must not repeat characters")
    unsafe = sorted(set(alphabet) - _UNRESERVED)
    if unsafe:
        raise ValueError(f"alphabet contains unsafe characters: {unsafe!r}")
    return alphabet


def generate_token(byte_length: int = DEFAULT_TOKEN_BYTES) -> str:
    if byte_length < MIN_TOKEN_BYTES:
        raise ValueError(f"token must carry at least {MIN_TOKEN_BYTES} random bytes")
    return secrets.token_urlsafe(byte_length)


def generate_short_code(length: int, alphabet: str = DEFAULT_SHORT_CODE_ALPHABET) -> str:
    if length < 1:
        raise ValueError("short code length must be positive")
    ensure_safe_alphabet(alphabet)
    return "".join(secrets.choice(alphabet) for _ in range(length))


__all__ = [
    "DEFAULT_SHORT_CODE_ALPHABET",
    "DEFAULT_TOKEN_BYTES",
    "MIN_TOKEN_BYTES",
    "ensure_safe_alphabet",
    "generate_short_code",
    "generate_token",
]
