# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from eventgate.shared.errors.base import DomainError


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class InvalidVerificationTokenError(DomainError):
    code = "invalid_verification_token"


class InvalidResetTokenError(DomainError):
    code = "invalid_reset_token"
