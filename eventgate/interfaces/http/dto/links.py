# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def _check_http_url(value: str) -> str:
    """Validate as an http(s) URL but keep the caller's spelling."""

    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError as exc:
        raise ValueError("must be an absolute http(s) URL") from exc
    return value


TargetUrl = Annotated[str, Field(min_length=1, max_length=2048), AfterValidator(_check_http_url)]


class CreateShortLinkRequestDTO(BaseModel):
    target_url: TargetUrl
    ttl_seconds: int | None = Field(default=None, ge=1, le=60 * 60 * 24 * 365 * 5)


class ShortLinkDTO(BaseModel):
    code: str
    short_url: str = Field(serialization_alias="shortUrl")
    expires_at: datetime | None = Field(serialization_alias="expiresAt")


class EventShareLinksDTO(BaseModel):
    success: bool = True
    view_url: str = Field(serialization_alias="viewUrl")
    check_in_url: str = Field(serialization_alias="checkInUrl")
