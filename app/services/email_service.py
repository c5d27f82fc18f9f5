"""
Email Service - SMTP transport used to deliver OTP codes
"""
import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the SMTP transport rejects or cannot send a message"""


class EmailService:
    """Thin SMTP-over-SSL client; blocking sends run in a worker thread"""

    def __init__(self, username: str, password: str, host: str = "smtp.gmail.com",
                 port: int = 465, timeout: float = 30.0):
        self.username = username
        self.password = password
        self.host = host
        self.port = port
        self.timeout = timeout

    def _send(self, recipient: str, subject: str, body: str) -> None:
        message = MIMEMultipart()
        message["From"] = self.username
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))

        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
            server.login(self.username, self.password)
            server.sendmail(self.username, [recipient], message.as_string())

    async def send(self, recipient: str, subject: str, body: str) -> None:
        if not self.username or not self.password:
            raise EmailDeliveryError("Email transport credentials are not configured")

        try:
            await asyncio.to_thread(self._send, recipient, subject, body)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email '{subject}' sent to {recipient}")

    async def send_otp(self, recipient: str, code: str, subject: str, ttl_minutes: int) -> None:
        body = (
            f"Your OTP for KannadaMatch verification is {code}. "
            f"It is valid for {ttl_minutes} minutes."
        )
        await self.send(recipient, subject, body)
