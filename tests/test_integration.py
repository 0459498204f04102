from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from werkzeug.security import generate_password_hash

from eventgate.app import create_app, get_container
from eventgate.domain.users.entities import TokenPurpose, User
from eventgate.infrastructure.db.models import SessionRow, ShortLinkRow
from eventgate.shared.config import AppConfig, DatabaseConfig
from eventgate.shared.errors import StoreConflictError

from conftest import FakeClock

APP_URL = "https://events.example.com"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime.now(UTC))


@pytest.fixture()
def app(tmp_path: Path, clock: FakeClock):
    config = AppConfig(
        app_url=f"{APP_URL}/",
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'eventgate.db'}"),
    )
    app = create_app(config, clock=clock)
    container = get_container(app)
    container.user_repository.add(
        User(
            id=0,
            username="alice",
            email="alice@example.com",
            email_verified=False,
            password_hash=generate_password_hash("correct horse"),
        )
    )
    yield app
    container.database.dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


def _login(client, **extra):
    return client.post(
        "/auth/login", json={"username": "alice", "password": "correct horse", **extra}
    )


def test_full_session_and_short_link_flow(client) -> None:
    assert _login(client).status_code == 200
    cookie = client.get_cookie("session_token")
    assert cookie is not None
    assert cookie.http_only

    me = client.get("/auth/users")
    assert me.status_code == 200
    assert "passwordHash" not in me.get_json()
    assert "password_hash" not in me.get_json()
    assert client.get("/user").get_json()["username"] == "alice"

    created = client.post(
        "/short", json={"target_url": "https://example.com/event/ABCD"}
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["shortUrl"] == f"{APP_URL}/short/{body['code']}"
    assert body["expiresAt"] is None

    follow = client.get(f"/short/{body['code']}")
    assert follow.status_code == 302
    assert follow.headers["Location"] == "https://example.com/event/ABCD"

    assert client.post("/auth/logout").status_code == 200
    assert client.get_cookie("session_token") is None
    assert client.get("/auth/users").status_code == 401

    # The link outlives the session that created it.
    assert client.get(f"/short/{body['code']}").status_code == 302


def test_revoked_token_is_rejected_when_replayed(app, client) -> None:
    _login(client)
    token = client.get_cookie("session_token").value
    client.post("/auth/logout")

    replay = app.test_client().get("/user", headers={"Cookie": f"session_token={token}"})

    assert replay.status_code == 401


def test_session_expires_with_clock(app, clock) -> None:
    client = app.test_client()
    _login(client)
    token = client.get_cookie("session_token").value
    headers = {"Cookie": f"session_token={token}"}
    fresh = app.test_client()

    assert fresh.get("/user", headers=headers).status_code == 200

    clock.advance(timedelta(days=7).total_seconds())

    assert fresh.get("/user", headers=headers).status_code == 401


def test_remember_me_session_outlives_default(app, clock) -> None:
    client = app.test_client()
    _login(client, remember_me=True)
    headers = {"Cookie": f"session_token={client.get_cookie('session_token').value}"}

    clock.advance(timedelta(days=8).total_seconds())

    assert app.test_client().get("/user", headers=headers).status_code == 200


def test_share_links_expire_with_configured_ttl(app, client, clock) -> None:
    _login(client)

    resp = client.post("/short/events/EVT42")
    assert resp.status_code == 201
    view_path = resp.get_json()["viewUrl"].removeprefix(APP_URL)

    assert client.get(view_path).headers["Location"] == f"{APP_URL}/view/EVT42"

    clock.advance(timedelta(days=365).total_seconds())

    assert client.get(view_path).status_code == 404


def test_short_link_stored_already_expired_is_not_found(app, client, clock) -> None:
    now = clock()
    with get_container(app).database.session_factory() as db:
        db.add(
            ShortLinkRow(
                code="zeroTTL", target_url="https://example.com/", created_at=now, expires_at=now
            )
        )
        db.commit()

    resp = client.get("/short/zeroTTL")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "short_link_not_found"}


@pytest.mark.parametrize("skew", [timedelta(0), timedelta(seconds=-30)])
def test_session_stored_already_expired_is_unauthorized(app, client, clock, skew) -> None:
    container = get_container(app)
    user = container.user_repository.find_by_login("alice")
    now = clock()
    token = "expired" + "x" * 36
    with container.database.session_factory() as db:
        db.add(SessionRow(token=token, user_id=user.id, created_at=now, expires_at=now + skew))
        db.commit()

    resp = client.get("/auth/users", headers={"Cookie": f"session_token={token}"})

    assert resp.status_code == 401
    assert container.session_manager.get_session(token) is None


def test_verify_email_is_single_use(app, client) -> None:
    container = get_container(app)
    user = container.user_repository.find_by_login("alice")
    issued = container.verification_service.issue(user.id)

    assert client.post(f"/auth/verify-email/{issued.token}").status_code == 200
    assert client.post(f"/auth/verify-email/{issued.token}").status_code == 400
    assert container.user_repository.find_profile(user.id).email_verified is True


def test_concurrent_consumers_of_one_token_have_one_winner(app) -> None:
    container = get_container(app)
    user = container.user_repository.find_by_login("alice")
    issued = container.verification_service.issue(user.id)
    repo = container.verification_token_repository
    workers = 4
    start = threading.Barrier(workers)

    def consume(_):
        start.wait()
        return repo.consume(issued.token, TokenPurpose.EMAIL_VERIFICATION)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(consume, range(workers)))

    assert sum(result is not None for result in results) == 1
    assert repo.count() == 0


def test_reset_password_end_to_end(app, client) -> None:
    container = get_container(app)
    issued = container.request_password_reset_use_case.execute("alice@example.com")
    body = {"password": "new horse battery", "confirm_password": "new horse battery"}

    assert client.post(f"/auth/reset-password/{issued.token}", json=body).status_code == 200
    assert client.post(f"/auth/reset-password/{issued.token}", json=body).status_code == 400
    assert _login(client).status_code == 401
    assert client.post(
        "/auth/login", json={"username": "alice", "password": "new horse battery"}
    ).status_code == 200


def test_reset_token_is_not_a_verification_token(app, client) -> None:
    container = get_container(app)
    issued = container.request_password_reset_use_case.execute("alice@example.com")

    assert client.post(f"/auth/verify-email/{issued.token}").status_code == 400
    assert container.verification_token_repository.count() == 1


def test_duplicate_user_is_a_conflict(app) -> None:
    with pytest.raises(StoreConflictError):
        get_container(app).user_repository.add(
            User(
                id=0,
                username="alice",
                email="other@example.com",
                email_verified=False,
                password_hash="x",
            )
        )


def test_purge_removes_expired_rows(app, client, clock) -> None:
    _login(client)
    container = get_container(app)
    link = container.short_link_resolver.create_short_link(
        "https://example.com/", ttl=timedelta(minutes=1)
    )

    clock.advance(timedelta(days=8).total_seconds())
    report = container.purge_expired_use_case.execute()

    assert report.sessions == 1
    assert report.short_links == 1
    assert container.short_link_repository.get(link.code) is None


def test_health_reports_counts(client) -> None:
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["database"] == "ok"
    assert body["counts"]["users"] == 1
    assert body["counts"]["sessions"] == 0


def test_security_headers_are_set(client) -> None:
    resp = client.get("/api/health")

    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["Cache-Control"] == "no-store"


def test_metrics_endpoint_exposes_counters(client) -> None:
    _login(client)
    client.get("/short/zzzzzz")

    resp = client.get("/metrics")

    assert resp.status_code == 200
    text = resp.get_data(as_text=True)
    assert 'eventgate_login_attempts_total{result="ok"}' in text
    assert 'eventgate_short_link_lookups_total{result="miss"}' in text
    assert 'endpoint="/short/<code>"' in text
