"""Signup store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from models.waitlist_signup import WaitlistSignup


class AbstractSignupStore(ABC):
    """Interface for signup persistence backends keyed by email."""

    @abstractmethod
    def find(self, email: str) -> WaitlistSignup | None:
        """Return the signup for a normalized email, if any."""

    @abstractmethod
    def find_by_token_digest(self, digest: str) -> WaitlistSignup | None:
        """Return the signup whose outstanding or confirmed digest equals ``digest``."""

    @abstractmethod
    def upsert(self, email: str, fields: Mapping[str, Any]) -> WaitlistSignup:
        """Insert or update the signup for ``email``, writing only ``fields``."""

    @abstractmethod
    def conditional_update(
        self, match_digest: str, fields: Mapping[str, Any]
    ) -> WaitlistSignup | None:
        """Apply ``fields`` only while the pending digest still equals ``match_digest``.

        Returns the updated signup, or None when nothing matched.
        """
