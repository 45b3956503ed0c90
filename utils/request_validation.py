"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import re
from typing import Any, Iterable

from flask import Request

from utils.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")
MAX_EMAIL_LENGTH = 254
MAX_FIELD_LENGTH = 255
MAX_LONG_FIELD_LENGTH = 2000
LONG_FIELDS = frozenset({"notes", "landing_url", "referrer"})


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise ValidationError(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def normalize_email(raw_email: Any) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    if raw_email is None:
        return ""
    if not isinstance(raw_email, str):
        raise ValidationError("Email must be a string.")
    return raw_email.strip().lower()


def require_valid_email(raw_email: Any) -> str:
    """Return the normalized email or raise ``ValidationError``."""

    email = normalize_email(raw_email)
    if not email:
        raise ValidationError("Email is required.")
    if len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email address.")
    return email


def clean_optional(data: dict, key: str) -> str | None:
    """Return a trimmed optional string field, with blanks mapped to None."""

    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Field '{key}' must be a string.")

    value = value.strip()
    if not value:
        return None

    limit = MAX_LONG_FIELD_LENGTH if key in LONG_FIELDS else MAX_FIELD_LENGTH
    if len(value) > limit:
        raise ValidationError(f"Field '{key}' must be at most {limit} characters.")
    return value
