# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation
from .links.entities import ShortLink
from .users.entities import Session, TokenPurpose, User, UserProfile, VerificationToken

__all__ = [
    "InvariantViolation",
    "Session",
    "ShortLink",
    "TokenPurpose",
    "User",
    "UserProfile",
    "VerificationToken",
]
