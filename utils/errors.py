"""HTTP-aware error types raised by the waitlist subsystem."""

from __future__ import annotations

from werkzeug.exceptions import BadGateway, BadRequest, InternalServerError, TooManyRequests


class ValidationError(BadRequest):
    """Malformed or missing input the caller can correct."""


class RateLimited(TooManyRequests):
    """The client exceeded its submission quota for the current window."""

    description = "Too many requests. Try again shortly."


class StoreError(InternalServerError):
    """The signup store failed to read or write."""

    description = "Unable to save your signup right now."


class NotifierConfigError(InternalServerError):
    """Email delivery is not configured (missing API key or sender)."""

    description = "Email delivery is not configured."


class NotifierSendError(BadGateway):
    """The email provider rejected or failed a delivery attempt."""

    description = "The email provider rejected the message."
