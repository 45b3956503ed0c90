"""Tests for the Flask application factory."""
from __future__ import annotations

from storage import SQLSignupStore
from utils.rate_limiter import RateLimiter


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_blueprints_registered(app):
    """Application factory should register the waitlist blueprint."""
    assert "waitlist" in app.blueprints


def test_waitlist_collaborators_are_app_scoped(app):
    limiter = app.extensions["waitlist_rate_limiter"]
    assert isinstance(limiter, RateLimiter)
    assert limiter.window_seconds == 60
    assert limiter.max_requests == 8
    assert isinstance(app.extensions["waitlist_store"], SQLSignupStore)


def test_waitlist_route_probe(client):
    response = client.get("/waitlist")
    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "route": "waitlist"}
