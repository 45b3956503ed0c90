"""End-to-end double opt-in verification tests."""

from __future__ import annotations

from datetime import timedelta

from flask import Flask

from models import db
from models.waitlist_signup import WaitlistSignup, utcnow
from utils.errors import StoreError

from conftest import SITE_URL


def _verify(client, token: str | None):
    query = {} if token is None else {"token": token}
    return client.get("/waitlist/verify", query_string=query)


def _flag(response) -> str:
    assert response.status_code == 302
    location = response.headers["Location"]
    assert location.startswith(f"{SITE_URL}/?verified=")
    return location.rsplit("=", 1)[-1]


def _join(client, notifier, email: str = "user@example.com") -> str:
    response = client.post("/waitlist", json={"email": email})
    assert response.status_code == 200
    return notifier.last_token()


def _signup(app: Flask, email: str = "user@example.com") -> WaitlistSignup:
    with app.app_context():
        return WaitlistSignup.query.filter_by(email=email).one()


def test_valid_token_verifies_signup(app, client, notifier):
    token = _join(client, notifier)

    assert _flag(_verify(client, token)) == "success"

    signup = _signup(app)
    assert signup.verified_at is not None
    assert signup.verification_token_digest is None
    assert signup.verification_expires_at is None
    assert signup.verification_state == "verified"


def test_second_click_reports_already_without_touching_timestamp(app, client, notifier):
    token = _join(client, notifier)

    assert _flag(_verify(client, token)) == "success"
    first_verified_at = _signup(app).verified_at

    assert _flag(_verify(client, token)) == "already"
    assert _signup(app).verified_at == first_verified_at


def test_missing_token(client):
    assert _flag(_verify(client, None)) == "missing"
    assert _flag(_verify(client, "   ")) == "missing"


def test_unknown_token_is_invalid(client):
    assert _flag(_verify(client, "f" * 64)) == "invalid"


def test_reissued_token_invalidates_previous(app, client, notifier):
    token_a = _join(client, notifier)
    token_b = _join(client, notifier)

    assert _flag(_verify(client, token_a)) == "invalid"
    assert _signup(app).verified_at is None

    assert _flag(_verify(client, token_b)) == "success"


def test_expired_token_is_rejected_without_mutation(app, client, notifier):
    token = _join(client, notifier)
    with app.app_context():
        signup = WaitlistSignup.query.filter_by(email="user@example.com").one()
        signup.verification_expires_at = utcnow() - timedelta(minutes=1)
        db.session.commit()
        digest = signup.verification_token_digest

    assert _flag(_verify(client, token)) == "expired"

    signup = _signup(app)
    assert signup.verified_at is None
    assert signup.verification_token_digest == digest
    assert signup.verification_expires_at is not None


def test_token_without_expiry_is_treated_as_expired(app, client, notifier):
    token = _join(client, notifier)
    with app.app_context():
        signup = WaitlistSignup.query.filter_by(email="user@example.com").one()
        signup.verification_expires_at = None
        db.session.commit()

    assert _flag(_verify(client, token)) == "expired"
    assert _signup(app).verified_at is None


def test_store_failure_redirects_to_error(app, client, notifier, monkeypatch):
    token = _join(client, notifier)
    store = app.extensions["waitlist_store"]

    def _fail(digest):
        raise StoreError()

    monkeypatch.setattr(store, "find_by_token_digest", _fail)

    assert _flag(_verify(client, token)) == "error"


def test_lost_update_redirects_to_error(app, client, notifier, monkeypatch):
    token = _join(client, notifier)
    store = app.extensions["waitlist_store"]
    monkeypatch.setattr(store, "conditional_update", lambda digest, fields: None)

    assert _flag(_verify(client, token)) == "error"
    assert _signup(app).verified_at is None


def test_concurrent_click_with_same_token_reports_already(app, client, notifier, monkeypatch):
    token = _join(client, notifier)
    store = app.extensions["waitlist_store"]
    real_update = store.conditional_update

    def _racing_update(digest, fields):
        # Another request wins the compare-and-set first.
        assert real_update(digest, fields) is not None
        return None

    monkeypatch.setattr(store, "conditional_update", _racing_update)

    assert _flag(_verify(client, token)) == "already"
    assert _signup(app).verified_at is not None


def test_redirect_falls_back_to_request_host(app, client, notifier):
    app.config["SITE_URL"] = ""

    response = _verify(client, None)

    assert response.headers["Location"] == "http://localhost/?verified=missing"
