# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Short code issuing and resolution."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from functools import partial

from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from eventgate.application.services.token_codec import (
    DEFAULT_SHORT_CODE_ALPHABET,
    ensure_safe_alphabet,
    generate_short_code,
)
from eventgate.domain.links.entities import ShortLink
from eventgate.domain.links.exceptions import CapacityError
from eventgate.domain.links.repositories import ShortLinkRepository
from eventgate.infrastructure.observability import SHORT_CODE_COLLISIONS, SHORT_LINK_LOOKUPS
from eventgate.shared.errors import StoreConflictError
from eventgate.shared.logging import logger
from eventgate.shared.utils.clock import Clock, utc_now

DEFAULT_CODE_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 5
SHORT_PATH = "/short"


class ShortLinkResolver:
    def __init__(
        self,
        *,
        links: ShortLinkRepository,
        base_url: str = "",
        code_length: int = DEFAULT_CODE_LENGTH,
        alphabet: str = DEFAULT_SHORT_CODE_ALPHABET,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        code_generator: Callable[[], str] | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._links = links
        self._base_url = base_url.rstrip("/")
        self._max_attempts = max_attempts
        self._generate = code_generator or partial(
            generate_short_code, code_length, ensure_safe_alphabet(alphabet)
        )
        self._clock = clock

    def create_short_code(self, target_url: str, ttl: timedelta | None = None) -> str:
        return self.create_short_link(target_url, ttl).code

    def create_short_link(
        self, target_url: str, ttl: timedelta | None = None
    ) -> ShortLink:
        """Persist a fresh code for ``target_url``.

        Codes are random, so two writers can race for the same one. The
        store's uniqueness constraint rejects the loser, which draws again
        until ``max_attempts`` is exhausted.
        """

        if ttl is not None and ttl <= timedelta(0):
            raise ValueError("ttl must be positive")

        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            retry=retry_if_exception_type(StoreConflictError),
        )
        try:
            for attempt in retrying:
                with attempt:
                    number = attempt.retry_state.attempt_number
                    now = self._clock()
                    link = ShortLink(
                        code=self._generate(),
                        target_url=target_url,
                        created_at=now,
                        expires_at=now + ttl if ttl is not None else None,
                    )
                    try:
                        self._links.add(link)
                    except StoreConflictError:
                        SHORT_CODE_COLLISIONS.inc()
                        logger.warning(
                            f"short_link.create: code collision attempt={number}/{self._max_attempts}"
                        )
                        raise
        except RetryError as exc:
            logger.error(f"short_link.create: gave up after {self._max_attempts} attempts")
            raise CapacityError(self._max_attempts) from exc.last_attempt.exception()

        logger.info(f"short_link.create: code={link.code} attempt={number}")
        return link

    def get_original_url(self, code: str) -> str | None:
        if not code:
            return None
        link = self._links.get(code)
        if link is None or not link.is_active(self._clock()):
            SHORT_LINK_LOOKUPS.labels(result="miss").inc()
            logger.debug(f"short_link.resolve: miss code={code}")
            return None
        SHORT_LINK_LOOKUPS.labels(result="hit").inc()
        return link.target_url

    def short_url(self, code: str) -> str:
        return f"{self._base_url}{SHORT_PATH}/{code}"
