import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from src.app.services.email_sender import IEmailSender
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class SmtpEmailSender(IEmailSender):
    """Sends plain-text email over SMTP from a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _send_sync(self, to_address: str, subject: str, body: str) -> None:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(msg)

    async def send(self, to_address: str, subject: str, body: str) -> Result[None]:
        try:
            await asyncio.to_thread(self._send_sync, to_address, subject, body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email '{subject}': {str(e)}", exc_info=True)
            return Return.err(Error("DELIVERY_ERROR", "Email could not be delivered"))

        logger.info(f"Sent email '{subject}'")
        return Return.ok(None)


class LoggingEmailSender(IEmailSender):
    """Development sender used when no SMTP host is configured; the body is never logged"""

    async def send(self, to_address: str, subject: str, body: str) -> Result[None]:
        logger.info(f"SMTP not configured, email '{subject}' was not sent")
        return Return.ok(None)
