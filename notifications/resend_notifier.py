"""Resend HTTP API notifier."""

from __future__ import annotations

import logging
from typing import Mapping

import requests

from utils.errors import NotifierConfigError

from .abstract_notifier import AbstractNotifier, Failed, Sent, SendResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.resend.com/emails"
DEFAULT_TIMEOUT_SECONDS = 5.0


class ResendNotifier(AbstractNotifier):
    """Send email through the Resend REST API."""

    def __init__(
        self,
        api_key: str | None,
        sender: str | None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        if not api_key:
            raise NotifierConfigError("Missing RESEND_API_KEY.")
        if not sender:
            raise NotifierConfigError("Missing RESEND_FROM.")
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping) -> "ResendNotifier":
        """Build a notifier from a Flask config mapping."""

        return cls(
            config.get("RESEND_API_KEY"),
            config.get("RESEND_FROM"),
            api_url=config.get("RESEND_API_URL") or DEFAULT_API_URL,
            timeout=float(config.get("NOTIFIER_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
        )

    def send(self, to_address: str, subject: str, html_body: str) -> SendResult:
        try:
            response = self.session.post(
                self.api_url,
                json={
                    "from": self.sender,
                    "to": [to_address],
                    "subject": subject,
                    "html": html_body,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Resend request failed: %s", exc)
            return Failed(reason=f"request failed: {exc.__class__.__name__}")

        if not response.ok:
            logger.warning("Resend rejected message: status=%s", response.status_code)
            return Failed(reason=f"provider returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            return Failed(reason="provider returned a non-JSON body")

        message_id = payload.get("id") if isinstance(payload, dict) else None
        if not message_id:
            return Failed(reason="provider response had no message id")
        return Sent(id=str(message_id))
