"""Отправка писем через SMTP."""
import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

from codix.core.config import Settings, get_settings
from codix.utils.exceptions import InternalError
from codix.utils.logger import get_logger

logger = get_logger(__name__)


class EmailDeliveryError(InternalError):
    default_message = "Failed to send email"


class Mailer:
    """SMTP-отправитель. Блокирующая отправка выполняется в отдельном потоке."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _build(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f"{self.settings.smtp_sender_name} <{self.settings.smtp_user}>"
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as conn:
            conn.starttls()
            if self.settings.smtp_user:
                conn.login(self.settings.smtp_user, self.settings.smtp_password)
            conn.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        """
        Отправить HTML-письмо.

        Raises:
            EmailDeliveryError: SMTP-сервер недоступен или отклонил письмо
        """
        message = self._build(to, subject, html)
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_send_failed", to=to, subject=subject, error=str(e))
            raise EmailDeliveryError()
        logger.info("email_sent", to=to, subject=subject)

    async def send_verification_email(self, to: str, full_name: str, token: str) -> None:
        link = f"{self.settings.frontend_url}/verify-email?token={token}"
        html = (
            f"<p>Hi {full_name},</p>"
            "<p>Thanks for registering with Codix Studio. Please verify your email address:</p>"
            f'<p><a href="{link}">Verify email</a></p>'
        )
        await self.send(to, "Verify your email", html)

    async def send_password_reset_email(self, to: str, full_name: str, token: str, admin: bool = False) -> None:
        path = "admin/reset-password" if admin else "reset-password"
        link = f"{self.settings.frontend_url}/{path}?token={token}"
        minutes = self.settings.reset_token_expire_minutes
        html = (
            f"<p>Hi {full_name},</p>"
            f"<p>Use the link below to reset your password. It expires in {minutes} minutes.</p>"
            f'<p><a href="{link}">Reset password</a></p>'
            "<p>If you did not request this, ignore this email.</p>"
        )
        await self.send(to, "Password reset request", html)


_mailer: Optional[Mailer] = None


def get_mailer() -> Mailer:
    """Dependency: отправитель писем."""
    global _mailer
    if _mailer is None:
        _mailer = Mailer(get_settings())
    return _mailer
