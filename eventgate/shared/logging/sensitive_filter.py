# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_REDACTED = "***REDACTED***"
_TOKEN_CHARS = r"[A-Za-z0-9_\-\.~]"


@dataclass(frozen=True, slots=True)
class _Rule:
    pattern: re.Pattern[str]
    replacement: str


def _rule(pattern: str, replacement: str, flags: int = 0) -> _Rule:
    return _Rule(re.compile(pattern, flags), replacement)


# Order matters: cookie and header rules run before the generic token rule.
RULES: tuple[_Rule, ...] = (
    _rule(r"(secret[_-]?key\s*[:=]\s*['\"]?)([A-Za-z0-9_\-]{8,})", rf"\1{_REDACTED}"),
    _rule(r"(cookie\s*:\s*['\"]?)([^'\"\n]{10,})", rf"\1{_REDACTED}", re.IGNORECASE),
    _rule(r"(authorization\s*:\s*['\"]?)([^'\"\n]{10,})", rf"\1{_REDACTED}", re.IGNORECASE),
    _rule(rf"(bearer\s+)({_TOKEN_CHARS}{{20,}})", rf"\1{_REDACTED}", re.IGNORECASE),
    # Session cookies and verification tokens: nothing of the value survives.
    _rule(rf"(session[_-]?token\s*[:=]\s*['\"]?)({_TOKEN_CHARS}{{16,}})", rf"\1{_REDACTED}"),
    _rule(rf"(\btoken\s*[:=]\s*['\"]?)({_TOKEN_CHARS}{{20,}})", rf"\1{_REDACTED}"),
    # Verification and reset links keep an 8-character prefix for correlation.
    _rule(rf"(/(?:verify-email|reset-password)/)({_TOKEN_CHARS}{{8}}){_TOKEN_CHARS}+", r"\1\2…"),
    _rule(r"(password[_-]?hash\s*[:=]\s*['\"]?)([^'\"\s,)]+)", rf"\1{_REDACTED}", re.IGNORECASE),
    _rule(r"(password\s*[:=]\s*['\"]?)([^'\"]{6,})", rf"\1{_REDACTED}", re.IGNORECASE),
    _rule(r"\b(?:scrypt|pbkdf2)[^\s'\"$]*\$[^\s'\"$]+\$[0-9a-f]+", _REDACTED),
    _rule(
        r"((?:postgres(?:ql)?|mysql|mariadb)(?:\+\w+)?://[^:/\s]+:)([^@\s]+)@",
        rf"\1{_REDACTED}@",
    ),
    _rule(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})", r"***@\1"),
)


def sanitize_message(message: str) -> str:
    for rule in RULES:
        message = rule.pattern.sub(rule.replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> None:
    """Loguru patcher: scrub the formatted message in place."""

    if "message" in record:
        record["message"] = sanitize_message(record["message"])
