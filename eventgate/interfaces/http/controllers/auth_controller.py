# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request

from eventgate.application.use_cases.users.get_current_user import GetSessionUserUseCase
from eventgate.application.use_cases.users.login_user import LoginUserUseCase
from eventgate.application.use_cases.users.logout_user import LogoutUserUseCase
from eventgate.application.use_cases.users.reset_password import ResetPasswordUseCase
from eventgate.application.use_cases.users.verify_email import VerifyEmailUseCase
from eventgate.domain.users.exceptions import InvalidCredentialsError
from eventgate.infrastructure.observability import LOGIN_ATTEMPTS
from eventgate.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    LoginSuccessDTO,
    ResetPasswordRequestDTO,
    UserPublicDTO,
)
from eventgate.shared.config import SecurityConfig
from eventgate.shared.errors import UnauthorizedError
from eventgate.shared.errors.validation import validate_payload
from eventgate.shared.logging import bind_user_id, logger


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        session_user_use_case: GetSessionUserUseCase,
        verify_email_use_case: VerifyEmailUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        cookie_name: str,
        security: SecurityConfig,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._session_user_use_case = session_user_use_case
        self._verify_email_use_case = verify_email_use_case
        self._reset_password_use_case = reset_password_use_case
        self._cookie_name = cookie_name
        self._security = security

    def login(self) -> tuple[Response, int]:
        dto = validate_payload(LoginRequestDTO, request.get_json(silent=True))

        try:
            user, session = self._login_use_case.execute(
                dto.username, dto.password, dto.remember_me
            )
        except InvalidCredentialsError:
            LOGIN_ATTEMPTS.labels(result="rejected").inc()
            raise
        LOGIN_ATTEMPTS.labels(result="ok").inc()
        g.user_id = user.id
        bind_user_id(user.id)

        payload = LoginSuccessDTO(email_verified=user.email_verified)
        response = jsonify(payload.model_dump(by_alias=True))
        response.set_cookie(
            self._cookie_name,
            session.token,
            expires=session.expires_at,
            path="/",
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        logger.info(f"auth.login: ok user_id={user.id} remember_me={dto.remember_me}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        revoked = self._logout_use_case.execute(request.headers.get("Cookie"))

        response = jsonify(AuthSuccessDTO().model_dump())
        response.delete_cookie(
            self._cookie_name,
            path="/",
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        logger.info(f"auth.logout: ok revoked={revoked}")
        return response, 200

    def session_user(self) -> tuple[Response, int]:
        profile = self._session_user_use_case.execute(request.headers.get("Cookie"))
        if profile is None:
            raise UnauthorizedError()
        return jsonify(UserPublicDTO.from_profile(profile).model_dump(by_alias=True)), 200

    def verify_email(self, token: str) -> tuple[Response, int]:
        self._verify_email_use_case.execute(token)
        return jsonify(AuthSuccessDTO().model_dump()), 200

    def reset_password(self, token: str) -> tuple[Response, int]:
        dto = validate_payload(ResetPasswordRequestDTO, request.get_json(silent=True))
        self._reset_password_use_case.execute(token, dto.password)
        return jsonify(AuthSuccessDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/users", view_func=self.session_user, methods=["GET"])
        bp.add_url_rule(
            "/verify-email/<token>", view_func=self.verify_email, methods=["POST"]
        )
        bp.add_url_rule(
            "/reset-password/<token>", view_func=self.reset_password, methods=["POST"]
        )
        return bp
