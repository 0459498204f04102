# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from eventgate.application.services.password_hashing import WerkzeugPasswordHasher
from eventgate.application.services.session_manager import SessionManager
from eventgate.application.services.short_links import ShortLinkResolver
from eventgate.application.services.verification import VerificationTokenService
from eventgate.application.use_cases.links.create_event_share_links import (
    CreateEventShareLinksUseCase,
)
from eventgate.application.use_cases.maintenance.purge_expired import PurgeExpiredUseCase
from eventgate.application.use_cases.users.get_current_user import (
    GetCurrentUserUseCase,
    GetSessionUserUseCase,
)
from eventgate.application.use_cases.users.login_user import LoginUserUseCase
from eventgate.application.use_cases.users.logout_user import LogoutUserUseCase
from eventgate.application.use_cases.users.reset_password import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from eventgate.application.use_cases.users.verify_email import VerifyEmailUseCase
from eventgate.domain.users.entities import TokenPurpose
from eventgate.infrastructure.db import Database
from eventgate.infrastructure.repositories.links import SqlAlchemyShortLinkRepository
from eventgate.infrastructure.repositories.users import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
    SqlAlchemyVerificationTokenRepository,
)
from eventgate.interfaces.http.controllers.auth_controller import AuthController
from eventgate.interfaces.http.controllers.links_controller import LinksController
from eventgate.interfaces.http.controllers.misc_controller import MiscController
from eventgate.interfaces.http.controllers.user_controller import UserController
from eventgate.shared.config import AppConfig
from eventgate.shared.utils.clock import Clock, utc_now


class Container:
    def __init__(self, *, config: AppConfig, database: Database, clock: Clock = utc_now) -> None:
        self.config = config
        self.database = database
        self.clock = clock

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database.session_factory)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(self.database.session_factory)

    @cached_property
    def short_link_repository(self) -> SqlAlchemyShortLinkRepository:
        return SqlAlchemyShortLinkRepository(self.database.session_factory)

    @cached_property
    def verification_token_repository(self) -> SqlAlchemyVerificationTokenRepository:
        return SqlAlchemyVerificationTokenRepository(self.database.session_factory)

    # Services

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def session_manager(self) -> SessionManager:
        cfg = self.config.sessions
        return SessionManager(
            sessions=self.session_repository,
            ttl=timedelta(seconds=cfg.ttl_seconds),
            cookie_name=cfg.cookie_name,
            token_bytes=cfg.token_bytes,
            clock=self.clock,
        )

    @cached_property
    def short_link_resolver(self) -> ShortLinkResolver:
        cfg = self.config.short_links
        return ShortLinkResolver(
            links=self.short_link_repository,
            base_url=self.config.app_url,
            code_length=cfg.code_length,
            alphabet=cfg.alphabet,
            max_attempts=cfg.max_attempts,
            clock=self.clock,
        )

    @cached_property
    def verification_service(self) -> VerificationTokenService:
        cfg = self.config.verification
        return VerificationTokenService(
            tokens=self.verification_token_repository,
            ttl=timedelta(seconds=cfg.ttl_seconds),
            token_bytes=cfg.token_bytes,
            clock=self.clock,
        )

    @cached_property
    def password_reset_service(self) -> VerificationTokenService:
        cfg = self.config.verification
        return VerificationTokenService(
            tokens=self.verification_token_repository,
            ttl=timedelta(seconds=cfg.reset_ttl_seconds),
            token_bytes=cfg.token_bytes,
            purpose=TokenPurpose.PASSWORD_RESET,
            clock=self.clock,
        )

    # Use cases

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_manager,
            password_hasher=self.password_hasher,
            remember_ttl=timedelta(seconds=self.config.sessions.remember_ttl_seconds),
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def get_session_user_use_case(self) -> GetSessionUserUseCase:
        return GetSessionUserUseCase(sessions=self.session_manager)

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(sessions=self.session_manager, users=self.user_repository)

    @cached_property
    def verify_email_use_case(self) -> VerifyEmailUseCase:
        return VerifyEmailUseCase(tokens=self.verification_service, users=self.user_repository)

    @cached_property
    def request_password_reset_use_case(self) -> RequestPasswordResetUseCase:
        return RequestPasswordResetUseCase(
            tokens=self.password_reset_service, users=self.user_repository
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            tokens=self.password_reset_service,
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def create_event_share_links_use_case(self) -> CreateEventShareLinksUseCase:
        return CreateEventShareLinksUseCase(
            resolver=self.short_link_resolver,
            app_url=self.config.app_url,
            ttl=timedelta(seconds=self.config.short_links.share_ttl_seconds),
        )

    @cached_property
    def purge_expired_use_case(self) -> PurgeExpiredUseCase:
        return PurgeExpiredUseCase(
            sessions=self.session_repository,
            links=self.short_link_repository,
            verification_tokens=self.verification_token_repository,
            clock=self.clock,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            session_user_use_case=self.get_session_user_use_case,
            verify_email_use_case=self.verify_email_use_case,
            reset_password_use_case=self.reset_password_use_case,
            cookie_name=self.config.sessions.cookie_name,
            security=self.config.security,
        )

    @cached_property
    def user_controller(self) -> UserController:
        return UserController(current_user_use_case=self.get_current_user_use_case)

    @cached_property
    def links_controller(self) -> LinksController:
        return LinksController(
            resolver=self.short_link_resolver,
            sessions=self.session_manager,
            share_links_use_case=self.create_event_share_links_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            database=self.database,
            stores={
                "users": self.user_repository,
                "sessions": self.session_repository,
                "short_links": self.short_link_repository,
                "verification_tokens": self.verification_token_repository,
            },
            metrics_enabled=self.config.observability.metrics_enabled,
        )
