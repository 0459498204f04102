from __future__ import annotations

from eventgate.shared.utils.cookies import extract_cookie


def test_missing_header_yields_none() -> None:
    assert extract_cookie(None, "session_token") is None
    assert extract_cookie("", "session_token") is None


def test_extracts_named_field_among_others() -> None:
    header = "theme=dark; session_token=abc123XYZ; csrf_token=zzz"

    assert extract_cookie(header, "session_token") == "abc123XYZ"
    assert extract_cookie(header, "theme") == "dark"


def test_absent_field_yields_none() -> None:
    assert extract_cookie("theme=dark", "session_token") is None


def test_empty_value_yields_none() -> None:
    assert extract_cookie("session_token=; theme=dark", "session_token") is None


def test_name_match_is_exact() -> None:
    header = "my_session_token=nope; session_token_old=nope"

    assert extract_cookie(header, "session_token") is None
