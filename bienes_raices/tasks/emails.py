"""Celery tasks that deliver account emails."""

import logging
import smtplib

from bienes_raices.celery_app import app as celery_app
from bienes_raices.services.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=2, default_retry_delay=30)
def send_confirmation_email(self, to: str, name: str, token: str) -> bool:
    """Send the account confirmation link.

    Args:
        to: recipient address
        name: account display name
        token: pending confirmation token

    Returns:
        True if the message was handed to the SMTP server
    """
    service = EmailService()
    try:
        return service.send(service.build_confirmation_message(to, name, token))
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Confirmation email to {to} failed: {e}")
        raise self.retry(exc=e) from e


@celery_app.task(bind=True, max_retries=2, default_retry_delay=30)
def send_password_reset_email(self, to: str, name: str, token: str) -> bool:
    """Send the password reset link."""
    service = EmailService()
    try:
        return service.send(service.build_reset_message(to, name, token))
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Password reset email to {to} failed: {e}")
        raise self.retry(exc=e) from e
