"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from notifications import AbstractNotifier, Failed, Sent  # noqa: E402

SITE_URL = "https://site.example"
TOKEN_PATTERN = re.compile(r"token=([0-9a-f]{64})")


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SITE_URL = SITE_URL
    RESEND_API_KEY = "re_test"
    RESEND_FROM = "Waitlist <hello@site.example>"
    RATELIMIT_STORAGE_URI = "memory://"


class FakeNotifier(AbstractNotifier):
    """Records outgoing mail instead of calling the provider."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_with: str | None = None

    def send(self, to_address, subject, html_body):
        self.sent.append({"to": to_address, "subject": subject, "html": html_body})
        if self.fail_with:
            return Failed(reason=self.fail_with)
        return Sent(id=f"msg_{len(self.sent)}")

    def last_token(self) -> str:
        match = TOKEN_PATTERN.search(self.sent[-1]["html"])
        assert match is not None, "verification link missing from email body"
        return match.group(1)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def app(notifier: FakeNotifier) -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig)
    application.extensions["waitlist_notifier"] = notifier

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()
