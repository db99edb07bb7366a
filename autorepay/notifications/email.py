"""Email notification channel."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from ..config import EmailConfig

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Send vault alerts by SMTP; log-level messages are not emailed."""

    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    def _build(self, message: str, subject: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._config.sender_email
        msg["To"] = self._config.alert_email
        msg["Subject"] = subject or "Vault notification"
        msg.set_content(message)
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self._config.smtp_server, self._config.smtp_port) as server:
            server.starttls()
            server.login(self._config.sender_email, self._config.sender_password)
            server.send_message(msg)

    async def send_alert(self, message: str, subject: str = "") -> bool:
        if not self._config.alert_email:
            logger.debug("No alert email configured, skipping email")
            return False
        if not self._config.sender_email or not self._config.sender_password:
            logger.warning("Email credentials not configured")
            return False

        try:
            # smtplib blocks; keep it off the event loop
            await asyncio.to_thread(self._deliver, self._build(message, subject))
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email: %s", e)
            return False

        logger.info("Alert email sent to %s", self._config.alert_email)
        return True

    async def send_log(self, message: str, silent: bool = True) -> bool:
        return False
