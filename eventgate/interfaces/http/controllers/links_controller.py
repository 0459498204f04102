# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from flask import Blueprint, Response, g, jsonify, redirect, request

from eventgate.application.services.session_manager import SessionManager
from eventgate.application.services.short_links import ShortLinkResolver
from eventgate.application.use_cases.links.create_event_share_links import (
    CreateEventShareLinksUseCase,
)
from eventgate.interfaces.http.dto.links import (
    CreateShortLinkRequestDTO,
    EventShareLinksDTO,
    ShortLinkDTO,
)
from eventgate.shared.errors import ShortLinkNotFoundError, UnauthorizedError
from eventgate.shared.errors.validation import validate_payload
from eventgate.shared.logging import bind_user_id, logger


class LinksController:
    def __init__(
        self,
        *,
        resolver: ShortLinkResolver,
        sessions: SessionManager,
        share_links_use_case: CreateEventShareLinksUseCase,
    ) -> None:
        self._resolver = resolver
        self._sessions = sessions
        self._share_links_use_case = share_links_use_case

    def _require_session(self) -> None:
        session = self._sessions.get_session_from_cookie(request.headers.get("Cookie"))
        if session is None:
            raise UnauthorizedError()
        g.user_id = session.user_id
        bind_user_id(session.user_id)

    def resolve(self, code: str) -> Response:
        target_url = self._resolver.get_original_url(code)
        if target_url is None:
            raise ShortLinkNotFoundError()
        logger.info(f"short_link.resolve: code={code} -> redirect")
        return redirect(target_url, code=302)

    def create(self) -> tuple[Response, int]:
        self._require_session()
        dto = validate_payload(CreateShortLinkRequestDTO, request.get_json(silent=True))

        ttl = timedelta(seconds=dto.ttl_seconds) if dto.ttl_seconds else None
        link = self._resolver.create_short_link(dto.target_url, ttl)
        payload = ShortLinkDTO(
            code=link.code,
            short_url=self._resolver.short_url(link.code),
            expires_at=link.expires_at,
        )
        return jsonify(payload.model_dump(by_alias=True, mode="json")), 201

    def create_event_share_links(self, event_code: str) -> tuple[Response, int]:
        self._require_session()
        links = self._share_links_use_case.execute(event_code)
        payload = EventShareLinksDTO(
            view_url=links.view_url, check_in_url=links.check_in_url
        )
        return jsonify(payload.model_dump(by_alias=True)), 201

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("links", __name__, url_prefix="/short")
        bp.add_url_rule("/<code>", view_func=self.resolve, methods=["GET"])
        bp.add_url_rule("", view_func=self.create, methods=["POST"], strict_slashes=False)
        bp.add_url_rule(
            "/events/<event_code>",
            view_func=self.create_event_share_links,
            methods=["POST"],
        )
        return bp
