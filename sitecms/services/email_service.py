"""EmailService: SMTP delivery configured from the site settings row.

smtplib is blocking, so each send runs in a worker thread via
asyncio.to_thread(). Transient connection failures are retried with
exponential backoff; everything else fails the send immediately.
"""

import asyncio
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage as MimeMessage
from email.utils import formataddr, make_msgid
from typing import Callable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sitecms.core.exceptions import EmailDeliveryError, EmailNotConfiguredError
from sitecms.db.models.site_settings import SiteSettings

logger = structlog.get_logger(__name__)

DEFAULT_SMTP_PORT = 587
SMTPS_PORT = 465

# Failures worth another attempt; SMTP rejections are not
TRANSIENT_ERRORS = (
    smtplib.SMTPServerDisconnected,
    smtplib.SMTPConnectError,
    ConnectionError,
    TimeoutError,
)


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str | None = None
    reply_to: str | None = None


@dataclass
class EmailResult:
    recipient: str
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass
class SmtpConfig:
    host: str
    port: int
    username: str | None
    password: str | None
    from_email: str
    from_name: str
    reply_to: str | None = None

    @classmethod
    def from_settings(cls, settings: SiteSettings | None) -> "SmtpConfig":
        """Build the config, or raise EmailNotConfiguredError when SMTP is off or incomplete."""
        if settings is None or not settings.smtp_enabled:
            raise EmailNotConfiguredError("SMTP is not enabled in site settings")
        if not settings.smtp_host:
            raise EmailNotConfiguredError("SMTP host is not configured")
        from_email = settings.smtp_from_email or settings.smtp_username
        if not from_email:
            raise EmailNotConfiguredError("SMTP sender address is not configured")
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port or DEFAULT_SMTP_PORT,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_email=from_email,
            from_name=settings.smtp_from_name or "Website",
            reply_to=settings.smtp_reply_to,
        )


def build_mime_message(config: SmtpConfig, message: EmailMessage) -> MimeMessage:
    mime = MimeMessage()
    mime["From"] = formataddr((config.from_name, config.from_email))
    mime["To"] = message.to
    mime["Subject"] = message.subject
    mime["Message-ID"] = make_msgid(domain=config.from_email.rsplit("@", 1)[-1])
    reply_to = message.reply_to or config.reply_to
    if reply_to:
        mime["Reply-To"] = reply_to
    mime.set_content(message.text or message.subject)
    mime.add_alternative(message.html, subtype="html")
    return mime


def smtp_transport(config: SmtpConfig, message: EmailMessage, timeout: float) -> str:
    """Deliver one message over SMTP and return its Message-ID.

    Port 465 uses implicit TLS; other ports upgrade with STARTTLS when the
    server offers it.
    """
    mime = build_mime_message(config, message)
    context = ssl.create_default_context()

    if config.port == SMTPS_PORT:
        client = smtplib.SMTP_SSL(config.host, config.port, timeout=timeout, context=context)
    else:
        client = smtplib.SMTP(config.host, config.port, timeout=timeout)

    with client:
        if config.port != SMTPS_PORT:
            client.ehlo()
            if client.has_extn("starttls"):
                client.starttls(context=context)
                client.ehlo()
        if config.username and config.password:
            client.login(config.username, config.password)
        client.send_message(mime)

    return mime["Message-ID"]


Transport = Callable[[SmtpConfig, EmailMessage, float], str]


class EmailService:
    """Sends transactional email; never raises from ``send``."""

    def __init__(
        self,
        transport: Transport = smtp_transport,
        timeout: float = 30.0,
        max_attempts: int = 3,
        backoff_min: float = 1.0,
    ):
        self.transport = transport
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_min = backoff_min

    async def load_config(self, session: AsyncSession) -> SmtpConfig:
        result = await session.execute(select(SiteSettings).order_by(SiteSettings.id).limit(1))
        return SmtpConfig.from_settings(result.scalar_one_or_none())

    async def _deliver(self, config: SmtpConfig, message: EmailMessage) -> str:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_min, min=self.backoff_min, max=10),
            reraise=True,
            before_sleep=lambda rs: logger.warning(
                "email_send_retrying",
                recipient=message.to,
                attempt=rs.attempt_number,
                sleep_seconds=rs.next_action.sleep,
            ),
        ):
            with attempt:
                return await asyncio.to_thread(self.transport, config, message, self.timeout)
        raise EmailDeliveryError(f"No delivery attempt made to {message.to}")

    async def send(self, config: SmtpConfig, message: EmailMessage) -> EmailResult:
        try:
            message_id = await self._deliver(config, message)
        # ValueError: header values the email package refuses (CR/LF)
        except (smtplib.SMTPException, OSError, ValueError, EmailDeliveryError) as exc:
            logger.warning("email_send_failed", recipient=message.to, error=str(exc))
            return EmailResult(recipient=message.to, success=False, error=str(exc) or exc.__class__.__name__)

        logger.info("email_sent", recipient=message.to, message_id=message_id)
        return EmailResult(recipient=message.to, success=True, message_id=message_id)
