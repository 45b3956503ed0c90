"""Verification token generation and hashing."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

TOKEN_BYTES = 32
DEFAULT_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued token. Only ``digest`` and ``expires_at`` are stored."""

    token: str
    digest: str
    expires_at: datetime


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest of ``token``."""

    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def digests_match(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    return hmac.compare_digest(left, right)


def issue_token(now: datetime | None = None, ttl: timedelta = DEFAULT_TTL) -> IssuedToken:
    """Generate a token along with its digest and absolute expiry."""

    issued_at = now or datetime.now(UTC)
    token = generate_token()
    return IssuedToken(token=token, digest=hash_token(token), expires_at=issued_at + ttl)
