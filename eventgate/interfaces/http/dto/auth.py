# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventgate.domain.users.entities import UserProfile


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=128)
    remember_me: bool = False


class AuthSuccessDTO(BaseModel):
    success: bool = True


class LoginSuccessDTO(AuthSuccessDTO):
    email_verified: bool = Field(serialization_alias="emailVerified")


class UserPublicDTO(BaseModel):
    """Everything about a user except the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    email_verified: bool = Field(serialization_alias="emailVerified")

    @classmethod
    def from_profile(cls, profile: UserProfile) -> UserPublicDTO:
        return cls.model_validate(profile)


class ResetPasswordRequestDTO(BaseModel):
    password: str = Field(min_length=8, max_length=128)
    confirm_password: str = Field(min_length=8, max_length=128)

    @model_validator(mode="after")
    def _passwords_match(self) -> ResetPasswordRequestDTO:
        if self.password != self.confirm_password:
            raise ValueError("passwords don't match")
        return self
