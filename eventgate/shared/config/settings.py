# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import string
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from eventgate.application.services.token_codec import ensure_safe_alphabet

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)

_INSECURE_SECRETS = frozenset({"", "dev", "development", "test", "changeme"})


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///eventgate.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class SessionConfig(BaseSettings):
    cookie_name: str = Field("session_token", min_length=1, alias="SESSION_COOKIE_NAME")
    ttl_seconds: int = Field(60 * 60 * 24 * 7, ge=1, alias="SESSION_TTL_SECONDS")
    remember_ttl_seconds: int = Field(
        60 * 60 * 24 * 30, ge=1, alias="SESSION_REMEMBER_TTL_SECONDS"
    )
    token_bytes: int = Field(32, ge=16, le=128, alias="SESSION_TOKEN_BYTES")

    model_config = _SECTION_CONFIG


class ShortLinkConfig(BaseSettings):
    code_length: int = Field(8, ge=4, le=64, alias="SHORT_CODE_LENGTH")
    alphabet: str = Field(
        string.ascii_letters + string.digits, min_length=2, alias="SHORT_CODE_ALPHABET"
    )
    max_attempts: int = Field(5, ge=1, le=20, alias="SHORT_CODE_MAX_ATTEMPTS")
    share_ttl_seconds: int = Field(
        60 * 60 * 24 * 365, ge=1, alias="SHORT_LINK_SHARE_TTL_SECONDS"
    )

    model_config = _SECTION_CONFIG

    @field_validator("alphabet", mode="after")
    @classmethod
    def _check_alphabet(cls, value: str) -> str:
        return ensure_safe_alphabet(value)


class VerificationConfig(BaseSettings):
    ttl_seconds: int = Field(60 * 60 * 24, ge=1, alias="VERIFICATION_TTL_SECONDS")
    reset_ttl_seconds: int = Field(60 * 60, ge=1, alias="PASSWORD_RESET_TTL_SECONDS")
    token_bytes: int = Field(32, ge=16, le=128, alias="VERIFICATION_TOKEN_BYTES")

    model_config = _SECTION_CONFIG


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("eventgate", alias="SERVICE_NAME")

    model_config = _SECTION_CONFIG

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _short_link_config_factory() -> ShortLinkConfig:
    return ShortLinkConfig()  # type: ignore[call-arg]


def _verification_config_factory() -> VerificationConfig:
    return VerificationConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    app_url: str = Field("http://localhost:3000", alias="APP_URL")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    sessions: SessionConfig = Field(default_factory=_session_config_factory)
    short_links: ShortLinkConfig = Field(default_factory=_short_link_config_factory)
    verification: VerificationConfig = Field(default_factory=_verification_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        validate_by_name=True,
    )

    @field_validator("app_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("debug_logging", "log_json", mode="before")
    @classmethod
    def _parse_logging_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _reject_insecure_secret(self) -> "AppConfig":
        if self.is_production() and self.secret_key in _INSECURE_SECRETS:
            raise ValueError("SECRET_KEY must be a strong random value in production")
        return self

    def security_warnings(self) -> list[str]:
        """Settings that are tolerated in production but should be fixed."""

        if not self.is_production():
            return []
        checks = {
            "session cookies are sent without the Secure flag": not self.security.cookie_secure,
            "CORS allows any origin": "*" in self.security.allowed_origins,
            "HSTS is disabled": not self.security.enable_hsts,
            "APP_URL is not https, short links will be insecure": not self.app_url.startswith(
                "https://"
            ),
        }
        return [message for message, failed in checks.items() if failed]

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "SessionConfig",
    "ShortLinkConfig",
    "VerificationConfig",
    "load_config",
]
