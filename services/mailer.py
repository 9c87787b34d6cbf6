# services/mailer.py
"""
Contact mail dispatcher

Turns a validated ContactSubmission into a multipart email and hands it to
the SMTP relay configured in AppConfig. Delivery is attempted once; any
transport failure surfaces as MailDeliveryError carrying diagnostics.
"""

import html
import logging
import uuid
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate
from typing import Any, Dict, Optional

import aiosmtplib

from config.settings import AppConfig
from core.contact import ContactSubmission
from core.smtp_response import describe_failure

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised when the SMTP relay did not accept the message"""

    def __init__(self, message: str, diagnostics: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.diagnostics = diagnostics or {}


@dataclass
class DispatchResult:
    """Outcome of an accepted delivery"""
    message_id: str
    response: str


def header_safe(value: str) -> str:
    """Collapse line breaks so user input cannot start a new header line"""
    return ' '.join(value.splitlines())


def render_text(submission: ContactSubmission) -> str:
    return (
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n\n"
        f"Message:\n{submission.message}"
    )


def render_html(submission: ContactSubmission) -> str:
    """HTML body; field values are escaped and message newlines become <br/>"""
    message = html.escape(submission.message).replace('\n', '<br/>')
    return (
        "<h2>New Contact Message</h2>\n"
        f"<p><b>Name:</b> {html.escape(submission.name)}</p>\n"
        f"<p><b>Email:</b> {html.escape(submission.email)}</p>\n"
        f"<p><b>Message:</b><br/>{message}</p>"
    )


class MailDispatcher:
    """SMTP client wrapper bound to one AppConfig"""

    def __init__(self, config: AppConfig):
        self.config = config

    @property
    def sender_domain(self) -> str:
        return self.config.mail_user.rpartition('@')[2] or 'localhost'

    def build_message(self, submission: ContactSubmission) -> MIMEMultipart:
        """
        Compose the notification email for a submission

        Args:
            submission: Validated and truncated contact fields

        Returns:
            multipart/alternative message with text and HTML parts
        """
        msg = MIMEMultipart('alternative')

        msg['Subject'] = f"New contact from {header_safe(submission.name)}"
        msg['From'] = formataddr((self.config.mail_from_name, self.config.mail_user))
        msg['To'] = self.config.mail_to
        msg['Reply-To'] = header_safe(submission.email)
        msg['Date'] = formatdate(localtime=True)
        msg['Message-ID'] = f"<{uuid.uuid4()}@{self.sender_domain}>"

        msg.attach(MIMEText(render_text(submission), 'plain', 'utf-8'))
        msg.attach(MIMEText(render_html(submission), 'html', 'utf-8'))

        return msg

    async def deliver(self, msg: MIMEMultipart) -> str:
        """Send a prepared message through the relay, returning the server reply"""
        secure = self.config.mail_secure

        _, response = await aiosmtplib.send(
            msg,
            hostname=self.config.mail_host,
            port=self.config.mail_port,
            username=self.config.mail_user or None,
            password=self.config.mail_pass or None,
            use_tls=secure,
            # Opportunistic STARTTLS unless the connection is already TLS
            start_tls=False if secure else None,
            timeout=self.config.mail_timeout,
        )
        return response

    async def send(self, submission: ContactSubmission) -> DispatchResult:
        """
        Build and deliver the email for a submission

        Raises:
            MailDeliveryError: connection, timeout, authentication or
                recipient failure reported by the transport
        """
        msg = self.build_message(submission)
        message_id = msg['Message-ID']

        try:
            response = await self.deliver(msg)
        except Exception as exc:
            diagnostics = describe_failure(exc)
            raise MailDeliveryError(f"SMTP delivery failed: {exc}", diagnostics) from exc

        logger.info(f"Contact email {message_id} accepted by {self.config.mail_host}: {response}")
        return DispatchResult(message_id=message_id, response=response)
