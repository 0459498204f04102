# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from eventgate.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from eventgate.interfaces.http.dto.auth import UserPublicDTO
from eventgate.shared.errors import UnauthorizedError


class UserController:
    def __init__(self, *, current_user_use_case: GetCurrentUserUseCase) -> None:
        self._current_user_use_case = current_user_use_case

    def current_user(self) -> tuple[Response, int]:
        profile = self._current_user_use_case.execute(request.headers.get("Cookie"))
        if profile is None:
            raise UnauthorizedError("not_authenticated")
        return jsonify(UserPublicDTO.from_profile(profile).model_dump(by_alias=True)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("user", __name__)
        bp.add_url_rule("/user", view_func=self.current_user, methods=["GET"])
        return bp
