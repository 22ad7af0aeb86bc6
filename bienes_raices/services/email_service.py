"""Transactional email: account confirmation and password reset."""

import logging
import smtplib
from email.message import EmailMessage

from bienes_raices.config import Settings, get_settings

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Confirma tu cuenta en BienesRaices.com"
RESET_SUBJECT = "Restablece tu password en BienesRaices.com"


class EmailService:
    """Builds the account emails and hands them to the SMTP server."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def confirmation_link(self, token: str) -> str:
        return f"{self.settings.app_url.rstrip('/')}/confirmar/{token}"

    def reset_link(self, token: str) -> str:
        return f"{self.settings.app_url.rstrip('/')}/olvide-password/{token}"

    def build_confirmation_message(self, to: str, name: str, token: str) -> EmailMessage:
        link = self.confirmation_link(token)
        body = (
            f"Hola {name}, comprueba tu cuenta en BienesRaices.com\n\n"
            "Tu cuenta ya está lista, solo debes confirmarla en el siguiente enlace:\n"
            f"{link}\n\n"
            "Si tú no creaste esta cuenta, puedes ignorar el mensaje."
        )
        return self._message(to, CONFIRMATION_SUBJECT, body)

    def build_reset_message(self, to: str, name: str, token: str) -> EmailMessage:
        link = self.reset_link(token)
        body = (
            f"Hola {name}, has solicitado restablecer tu password en BienesRaices.com\n\n"
            "Sigue el siguiente enlace para generar un password nuevo:\n"
            f"{link}\n\n"
            "Si tú no solicitaste el cambio de password, puedes ignorar el mensaje."
        )
        return self._message(to, RESET_SUBJECT, body)

    def send(self, message: EmailMessage) -> bool:
        """Deliver a message over SMTP.

        Returns False without sending when no SMTP host is configured.
        SMTP errors propagate so the calling task can retry.
        """
        if not self.settings.smtp_configured:
            logger.info(f"SMTP not configured, email to {message['To']} not sent")
            return False

        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as smtp:
            if self.settings.smtp_use_tls:
                smtp.starttls()
            if self.settings.smtp_username and self.settings.smtp_password:
                smtp.login(self.settings.smtp_username, self.settings.smtp_password)
            smtp.send_message(message)

        logger.info(f"Sent '{message['Subject']}' to {message['To']}")
        return True

    def _message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message
