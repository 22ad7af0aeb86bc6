"""Notification dispatch for the account workflow."""

import logging
from typing import Protocol

from bienes_raices.tasks.emails import send_confirmation_email, send_password_reset_email

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Sends the account lifecycle emails."""

    def send_confirmation(self, to: str, name: str, token: str) -> None: ...

    def send_reset(self, to: str, name: str, token: str) -> None: ...


class CeleryNotificationDispatcher:
    """Queues the emails on Celery and returns immediately.

    Broker failures are logged and do not reach the caller.
    """

    def send_confirmation(self, to: str, name: str, token: str) -> None:
        try:
            send_confirmation_email.delay(to, name, token)
        except Exception as e:
            logger.error(f"Failed to queue confirmation email for {to}: {e}")

    def send_reset(self, to: str, name: str, token: str) -> None:
        try:
            send_password_reset_email.delay(to, name, token)
        except Exception as e:
            logger.error(f"Failed to queue password reset email for {to}: {e}")
