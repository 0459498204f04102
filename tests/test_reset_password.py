from __future__ import annotations

from datetime import timedelta

import pytest

from eventgate.application.services.verification import (
    DEFAULT_PASSWORD_RESET_TTL,
    VerificationTokenService,
)
from eventgate.application.use_cases.users.reset_password import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from eventgate.application.use_cases.users.verify_email import VerifyEmailUseCase
from eventgate.domain.users.entities import TokenPurpose
from eventgate.domain.users.exceptions import (
    InvalidResetTokenError,
    InvalidVerificationTokenError,
)


@pytest.fixture()
def reset_tokens(verification_rows, clock) -> VerificationTokenService:
    return VerificationTokenService(
        tokens=verification_rows,
        ttl=DEFAULT_PASSWORD_RESET_TTL,
        purpose=TokenPurpose.PASSWORD_RESET,
        clock=clock,
    )


@pytest.fixture()
def request_reset(reset_tokens, users) -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(tokens=reset_tokens, users=users)


@pytest.fixture()
def reset(reset_tokens, users, hasher) -> ResetPasswordUseCase:
    return ResetPasswordUseCase(tokens=reset_tokens, users=users, password_hasher=hasher)


def test_request_issues_one_hour_token(request_reset, clock) -> None:
    issued = request_reset.execute("alice@example.com")

    assert issued is not None
    assert issued.user_id == 42
    assert issued.purpose is TokenPurpose.PASSWORD_RESET
    assert issued.expires_at == clock.now + timedelta(hours=1)


def test_request_for_unknown_address_issues_nothing(request_reset, verification_rows) -> None:
    assert request_reset.execute("nobody@example.com") is None
    assert verification_rows.count() == 0


def test_request_matches_email_not_username(request_reset) -> None:
    assert request_reset.execute("alice") is None


def test_reset_stores_new_hash_and_consumes_token(request_reset, reset, users) -> None:
    issued = request_reset.execute("alice@example.com")

    assert reset.execute(issued.token, "new horse battery") == 42
    assert users.find_by_id(42).password_hash == "hashed:new horse battery"

    with pytest.raises(InvalidResetTokenError):
        reset.execute(issued.token, "another password")
    assert users.find_by_id(42).password_hash == "hashed:new horse battery"


def test_expired_reset_token_is_rejected(request_reset, reset, users, clock) -> None:
    issued = request_reset.execute("alice@example.com")
    clock.advance(3600)

    with pytest.raises(InvalidResetTokenError):
        reset.execute(issued.token, "new horse battery")
    assert users.find_by_id(42).password_hash == "hashed:correct horse"


def test_reset_token_cannot_verify_email(request_reset, verification_rows, users, clock) -> None:
    issued = request_reset.execute("alice@example.com")
    verify = VerifyEmailUseCase(
        tokens=VerificationTokenService(tokens=verification_rows, clock=clock), users=users
    )

    with pytest.raises(InvalidVerificationTokenError):
        verify.execute(issued.token)
    assert verification_rows.count() == 1


def test_reset_for_vanished_user_fails(reset_tokens, reset) -> None:
    issued = reset_tokens.issue(7)

    with pytest.raises(InvalidResetTokenError):
        reset.execute(issued.token, "new horse battery")
