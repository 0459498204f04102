# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Field paths and error types only; submitted values are never echoed."""

    errors = [
        {
            "field": _field_path(error["loc"]),
            "type": error["type"],
            **({"ctx": {k: str(v) for k, v in error["ctx"].items()}} if "ctx" in error else {}),
        }
        for error in exc.errors(include_url=False, include_input=False)
    ]
    return {"fields": sorted({entry["field"] for entry in errors}), "errors": errors}


def validate_payload(model: type[ModelT], payload: Mapping[str, Any] | None) -> ModelT:
    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as exc:
        raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = ["format_pydantic_errors", "validate_payload"]
