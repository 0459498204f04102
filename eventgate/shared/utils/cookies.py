# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Raw ``Cookie`` header helpers that do not touch the request context."""

from __future__ import annotations

from werkzeug.http import parse_cookie


def extract_cookie(raw_header: str | None, name: str) -> str | None:
    """Return the value of cookie ``name`` from a raw ``Cookie`` header.

    Missing header, missing field and an empty value all yield ``None``.
    When the field is repeated the first occurrence wins, matching how
    browsers order the most specific path first.
    """

    if not raw_header:
        return None
    value = parse_cookie(raw_header).get(name)
    return value or None
