# services/mailer.py
"""
Async SMTP mail relay client

Each call to ``send`` opens its own connection, so concurrent sends never
share SMTP state. There is no retry: a failed send raises
``EmailDeliveryError`` and the caller decides what to do with it.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid, parseaddr
from typing import Any, Mapping, Optional

import aiosmtplib

from core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class SMTPMailer:
    """Sends single HTML messages through an SMTP relay"""

    def __init__(self,
                 host: Optional[str],
                 port: int = 587,
                 username: Optional[str] = None,
                 password: Optional[str] = None,
                 use_tls: bool = False,
                 timeout: float = 60):
        """
        Args:
            host: SMTP relay hostname; ``None`` leaves the mailer unconfigured
            port: 587 (STARTTLS when offered) or 465 (implicit TLS)
            username: optional login user
            password: optional login password
            use_tls: implicit TLS from the first byte (SMTP_SECURE)
            timeout: per-operation timeout in seconds
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'SMTPMailer':
        return cls(
            host=config.get('SMTP_HOST'),
            port=config.get('SMTP_PORT', 587),
            username=config.get('SMTP_USER'),
            password=config.get('SMTP_PASS'),
            use_tls=config.get('SMTP_SECURE', False),
            timeout=config.get('SMTP_TIMEOUT', 60)
        )

    @property
    def configured(self) -> bool:
        return bool(self.host)

    def build_message(self, sender: str, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = sender
        msg['To'] = to
        msg['Subject'] = subject
        msg['Date'] = formatdate(localtime=False)
        domain = parseaddr(sender)[1].rpartition('@')[2] or None
        msg['Message-ID'] = make_msgid(domain=domain)
        msg.attach(MIMEText(html, 'html', 'utf-8'))
        return msg

    async def send(self, sender: Optional[str], to: Optional[str], subject: str, html: str) -> str:
        """Send one message; returns its Message-ID"""
        if not self.configured:
            raise EmailDeliveryError('Mail relay is not configured (SMTP_HOST is not set)')
        if not sender:
            raise EmailDeliveryError('No sender address configured (SMTP_FROM is not set)')
        if not to:
            raise EmailDeliveryError('No recipient address')

        msg = self.build_message(sender, to, subject, html)

        smtp = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            timeout=self.timeout,
            use_tls=self.use_tls
        )
        try:
            async with smtp:
                if self.username and self.password:
                    await smtp.login(self.username, self.password)
                await smtp.send_message(msg)
        except aiosmtplib.SMTPResponseException as e:
            raise EmailDeliveryError(f"SMTP {e.code} {e.message} while sending to {to}") from e
        except (aiosmtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send to {to}: {e}") from e

        logger.info(f"Email sent to {to} ({msg['Message-ID']})")
        return msg['Message-ID']
