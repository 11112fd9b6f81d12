"""Outbound mail transports used to deliver digests."""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Sequence
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Protocol

from town_hall.core.settings import settings
from town_hall.services.errors import BackendFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    """A single message addressed to every recipient as Bcc."""

    sender: str
    subject: str
    body: str
    html_body: str
    bcc: Sequence[str] = field(default_factory=tuple)

    def to_email(self) -> EmailMessage:
        """Build a multipart/alternative message with text and HTML parts."""
        message = EmailMessage()
        message["From"] = self.sender
        message["Subject"] = self.subject
        message.set_content(self.body)
        message.add_alternative(self.html_body, subtype="html")
        return message


class MailTransport(Protocol):
    """Anything able to deliver a :class:`MailMessage`."""

    def send(self, message: MailMessage) -> None:
        """Deliver ``message`` or raise ``BackendFailure``."""


class SmtpMailTransport:
    """Delivers messages through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, message: MailMessage) -> None:
        """Send ``message`` to its Bcc recipients.

        Raises:
            BackendFailure: If the relay cannot be reached or refuses the message.
        """
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                if self.use_tls:
                    client.starttls()
                if self.username and self.password:
                    client.login(self.username, self.password)
                # Bcc recipients travel in the envelope only, never in headers.
                client.send_message(message.to_email(), to_addrs=list(message.bcc))
        except (OSError, smtplib.SMTPException) as err:
            raise BackendFailure(f"error sending email via {self.host}") from err
        logger.info("Sent %r to %d recipients", message.subject, len(message.bcc))


class LoggingMailTransport:
    """Writes messages to the log instead of sending them.

    Used when no SMTP host is configured, e.g. in development.
    """

    def send(self, message: MailMessage) -> None:
        logger.info(
            "Mail transport not configured; would send %r to %d recipients",
            message.subject,
            len(message.bcc),
        )
        logger.debug("%s", message.body)


_transport: MailTransport | None = None


def get_mail_transport() -> MailTransport:
    """Return the shared transport configured from settings."""
    global _transport
    if _transport is None:
        if settings.smtp_host:
            _transport = SmtpMailTransport(
                settings.smtp_host,
                settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                use_tls=settings.smtp_use_tls,
                timeout=settings.smtp_timeout_seconds,
            )
        else:
            _transport = LoggingMailTransport()
    return _transport
