from __future__ import annotations

from http import HTTPStatus

import pytest
from pydantic import ValidationError as PydanticValidationError

from eventgate.domain.links.exceptions import CapacityError
from eventgate.interfaces.http.dto.auth import LoginRequestDTO
from eventgate.shared.errors import (
    StoreConflictError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from eventgate.shared.errors.validation import format_pydantic_errors, validate_payload
from eventgate.shared.logging import sanitize_message


def test_store_error_defaults_to_service_unavailable() -> None:
    err = StoreError()
    assert err.status == HTTPStatus.SERVICE_UNAVAILABLE
    assert err.to_dict() == {"error": "store_unavailable"}


def test_conflict_carries_entity() -> None:
    err = StoreConflictError("short_link")
    assert err.status == HTTPStatus.CONFLICT
    assert err.to_dict() == {"error": "store_conflict", "context": {"entity": "short_link"}}


def test_capacity_error_payload() -> None:
    err = CapacityError(5)
    assert err.status == HTTPStatus.SERVICE_UNAVAILABLE
    assert err.to_dict()["context"] == {"attempts": 5}


def test_unauthorized_code_override() -> None:
    assert UnauthorizedError("not_authenticated").to_dict() == {"error": "not_authenticated"}


def test_pydantic_errors_are_flattened() -> None:
    with pytest.raises(PydanticValidationError) as excinfo:
        LoginRequestDTO.model_validate({"password": 1})

    payload = format_pydantic_errors(excinfo.value)

    assert "username" in payload["fields"]
    assert all("input" not in entry for entry in payload["errors"])


def test_validate_payload_wraps_pydantic_error() -> None:
    with pytest.raises(ValidationError) as wrapped:
        validate_payload(LoginRequestDTO, None)

    assert wrapped.value.status == HTTPStatus.UNPROCESSABLE_ENTITY
    assert isinstance(wrapped.value.__cause__, PydanticValidationError)
    assert wrapped.value.context["fields"] == ["password", "username"]


def test_validate_payload_returns_model() -> None:
    dto = validate_payload(LoginRequestDTO, {"username": "alice", "password": "pw"})

    assert dto.remember_me is False


@pytest.mark.parametrize(
    ("message", "leaked"),
    [
        ("Cookie: session_token=Zm9vYmFyYmF6cXV4cXV1eA", "Zm9vYmFyYmF6cXV4cXV1eA"),
        ("session_token=Zm9vYmFyYmF6cXV4cXV1eA", "Zm9vYmFyYmF6cXV4cXV1eA"),
        ("login for alice@example.com", "alice@"),
        ("hash scrypt:32768:8:1$abcd$0123abcdef", "0123abcdef"),
        ("postgresql://app:hunter22@db/app", "hunter22"),
    ],
)
def test_sanitize_message_redacts(message: str, leaked: str) -> None:
    assert leaked not in sanitize_message(message)


def test_sanitize_keeps_token_prefix() -> None:
    assert sanitize_message("session.create: user=42 tok=abcdefgh…") == (
        "session.create: user=42 tok=abcdefgh…"
    )


def test_verification_link_keeps_only_prefix() -> None:
    token = "AbCdEfGh" + "x" * 35

    sanitized = sanitize_message(f"POST /auth/verify-email/{token} status=200")

    assert "AbCdEfGh…" in sanitized
    assert token not in sanitized


def test_reset_link_keeps_only_prefix() -> None:
    token = "ZyXwVuTs" + "y" * 35

    sanitized = sanitize_message(f"POST /auth/reset-password/{token} status=200")

    assert "ZyXwVuTs…" in sanitized
    assert token not in sanitized
