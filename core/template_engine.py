# core/template_engine.py
"""
Email Template Engine for contact form notifications

Renders the admin notification and the submitter auto-reply with Jinja2.
Autoescaping is always on: every value that came from the contact form is
HTML-escaped before it reaches a mail client.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from jinja2 import DictLoader, Environment, StrictUndefined
from jinja2.exceptions import TemplateError

from core.exceptions import EmailError

logger = logging.getLogger(__name__)


ADMIN_NOTIFICATION_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #4361ee;">New Contact Form Submission</h2>
  <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Name:</strong> {{ name }}</p>
    <p><strong>Email:</strong> {{ email }}</p>
    <p><strong>Subject:</strong> {{ subject }}</p>
    <p><strong>Time:</strong> {{ created_at | localized }}</p>
    <p><strong>IP:</strong> {{ ip_address or 'unknown' }}</p>
  </div>
  <div style="background: #fff; padding: 20px; border-left: 4px solid #4361ee;">
    <h3>Message:</h3>
    <p style="white-space: pre-wrap;">{{ message }}</p>
  </div>
  <p style="color: #666; font-size: 12px; margin-top: 20px;">
    This message was sent from your portfolio contact form.
  </p>
</div>
"""

AUTO_REPLY_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #4361ee;">Thank You for Your Message!</h2>
  <p>Hi {{ name }},</p>
  <p>Thank you for reaching out to us. I've received your message about "<strong>{{ subject }}</strong>" and will get back to you within 24 hours.</p>

  <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3>Your Message Summary:</h3>
    <p><strong>Subject:</strong> {{ subject }}</p>
    <p><strong>Sent:</strong> {{ created_at | localized }}</p>
  </div>

  <p>In the meantime, feel free to:</p>
  <ul>
    <li>Check out my <a href="{{ profile.portfolio_url }}" style="color: #4361ee;">latest projects</a></li>
    <li>Connect with me on <a href="{{ profile.whatsapp_url }}" style="color: #25d366;">WhatsApp</a> for immediate assistance</li>
    <li>Follow me on <a href="{{ profile.linkedin_url }}" style="color: #0077b5;">LinkedIn</a></li>
  </ul>

  <p>Looking forward to discussing your project!</p>

  <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee;">
    <p><strong>{{ profile.signature_name }}</strong><br>
    {{ profile.signature_title }}<br>
    <a href="mailto:{{ profile.signature_email }}" style="color: #4361ee;">{{ profile.signature_email }}</a><br>
    <a href="tel:{{ profile.signature_phone | replace(' ', '') }}" style="color: #4361ee;">{{ profile.signature_phone }}</a></p>
  </div>
</div>
"""

TEMPLATES = {
    'admin_notification.html': ADMIN_NOTIFICATION_TEMPLATE,
    'auto_reply.html': AUTO_REPLY_TEMPLATE,
}


def localized_timestamp(value: Union[datetime, str, None]) -> str:
    """Format a timestamp for humans, e.g. ``March 04, 2025 at 02:15 PM UTC``"""
    if value is None:
        return ''
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime('%B %d, %Y at %I:%M %p %Z')


class EmailTemplateEngine:
    """Renders the contact notification templates"""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        self.env = Environment(
            loader=DictLoader(templates or TEMPLATES),
            autoescape=True,
            undefined=StrictUndefined,  # Fail on undefined variables
            trim_blocks=True,
            lstrip_blocks=True
        )
        self.env.filters['localized'] = localized_timestamp

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_name).render(**context)
        except (TemplateError, TypeError, ValueError) as e:
            logger.error(f"Failed to render {template_name}: {e}")
            raise EmailError(f"Template rendering failed for {template_name}: {e}") from e
