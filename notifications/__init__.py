"""Email notifier backends."""

from .abstract_notifier import AbstractNotifier, Failed, SendResult, Sent
from .resend_notifier import ResendNotifier

__all__ = ["AbstractNotifier", "Failed", "ResendNotifier", "SendResult", "Sent"]
