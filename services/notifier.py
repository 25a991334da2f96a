# services/notifier.py
"""
Contact form email notifications

Builds the admin notification and the submitter auto-reply for a stored
contact message and hands both to the mail relay at the same time. The two
sends are independent: one failing never cancels or delays the other.
"""

import asyncio
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from core.exceptions import EmailDeliveryError
from core.template_engine import EmailTemplateEngine

logger = logging.getLogger(__name__)


@dataclass
class EmailPayload:
    """One outgoing message"""
    sender: Optional[str]
    to: Optional[str]
    subject: str
    html: str


@dataclass
class SenderProfile:
    """Fixed content of the auto-reply: links and signature block"""
    brand_name: str = 'HafTech'
    portfolio_url: str = 'https://your-portfolio.vercel.app/#portfolio'
    whatsapp_url: str = 'https://wa.me/+2348128653553'
    linkedin_url: str = 'https://linkedin.com/in/haftech'
    signature_name: str = 'Ariyo Faruq'
    signature_title: str = 'CEO & Founder, HafTech'
    signature_email: str = 'contact@haftech.com'
    signature_phone: str = '+234 8128 653 553'

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'SenderProfile':
        defaults = cls()
        return cls(**{
            f.name: config.get(f.name.upper(), getattr(defaults, f.name))
            for f in fields(cls)
        })


class ContactNotifier:
    """Sends the admin notification and the auto-reply for one message"""

    def __init__(self, mailer, sender: Optional[str], admin_email: Optional[str],
                 profile: Optional[SenderProfile] = None,
                 template_engine: Optional[EmailTemplateEngine] = None):
        self.mailer = mailer
        self.sender = sender
        self.admin_email = admin_email
        self.profile = profile or SenderProfile()
        self.templates = template_engine or EmailTemplateEngine()

    def build_admin_email(self, contact: Dict[str, Any]) -> EmailPayload:
        return EmailPayload(
            sender=self.sender,
            to=self.admin_email,
            subject=f"New Contact Form Submission: {contact['subject']}",
            html=self.templates.render('admin_notification.html', {
                'name': contact['name'],
                'email': contact['email'],
                'subject': contact['subject'],
                'message': contact['message'],
                'created_at': contact['created_at'],
                'ip_address': contact.get('ip_address'),
            })
        )

    def build_auto_reply(self, contact: Dict[str, Any]) -> EmailPayload:
        return EmailPayload(
            sender=self.sender,
            to=contact['email'],
            subject=f"Thank you for contacting {self.profile.brand_name} - {contact['subject']}",
            html=self.templates.render('auto_reply.html', {
                'name': contact['name'],
                'subject': contact['subject'],
                'created_at': contact['created_at'],
                'profile': self.profile,
            })
        )

    async def notify(self, contact: Dict[str, Any]) -> None:
        """
        Send both emails concurrently and wait for both to settle.

        Raises:
            EmailDeliveryError: if either send failed, listing every failure
        """
        payloads = [
            ('admin notification', self.build_admin_email(contact)),
            ('auto-reply', self.build_auto_reply(contact)),
        ]

        results = await asyncio.gather(
            *(self.mailer.send(p.sender, p.to, p.subject, p.html) for _, p in payloads),
            return_exceptions=True
        )

        failures: List[str] = []
        for (label, payload), result in zip(payloads, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to send {label} to {payload.to}: {result}")
                failures.append(f"{label}: {result}")
            else:
                logger.info(f"Sent {label} to {payload.to}")

        if failures:
            raise EmailDeliveryError(
                f"{len(failures)} of {len(payloads)} notification emails failed",
                failures=failures
            )
