"""Email notifier abstraction and delivery result types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Sent:
    """The provider accepted the message and assigned it an identifier."""

    id: str


@dataclass(frozen=True)
class Failed:
    """Delivery was attempted and did not succeed."""

    reason: str


SendResult = Union[Sent, Failed]


class AbstractNotifier(ABC):
    """Interface for transactional email delivery."""

    @abstractmethod
    def send(self, to_address: str, subject: str, html_body: str) -> SendResult:
        """Send a single HTML email and report the outcome."""
