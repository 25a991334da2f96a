# services/contact_handler.py
"""
Contact form submission pipeline

validate -> persist -> notify -> respond

Each stage short-circuits on its own failure. Once a message is stored the
submission is reported as a success whatever happens to the notification
emails.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from core.database_models import MessageStatus
from core.exceptions import DatabaseError, EmailError, ServerError, ValidationError
from core.validation import validate_contact_form

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = 'Message sent successfully!'


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2025-03-04T14:15:09.123Z"""
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def normalize_submission(payload: Mapping[str, Any]) -> Dict[str, str]:
    return {
        'name': payload['name'].strip(),
        'email': payload['email'].strip().lower(),
        'subject': payload['subject'].strip(),
        'message': payload['message'].strip(),
    }


class ContactSubmissionHandler:
    """Orchestrates one contact form submission"""

    def __init__(self, store, notifier,
                 clock: Optional[Callable[[], datetime]] = None,
                 expose_error_details: bool = False):
        """
        Args:
            store: persistence client with ``insert(record) -> row``
            notifier: object with ``async notify(row)``
            clock: receipt-time source, defaults to the current UTC time
            expose_error_details: echo raw datastore errors as ``debug``
        """
        self.store = store
        self.notifier = notifier
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.expose_error_details = expose_error_details

    async def handle(self, payload: Mapping[str, Any],
                     client_ip: Optional[str]) -> Tuple[int, Dict[str, Any]]:
        """Process a submission and return ``(status_code, body)``"""
        try:
            return await self._process(payload, client_ip)
        except Exception as e:
            logger.error(f"Contact form error: {e}", exc_info=True)
            error = ServerError()
            return error.status_code, error.to_dict()

    async def _process(self, payload: Mapping[str, Any],
                       client_ip: Optional[str]) -> Tuple[int, Dict[str, Any]]:
        try:
            validate_contact_form(
                payload.get('name'),
                payload.get('email'),
                payload.get('subject'),
                payload.get('message')
            )
        except ValidationError as e:
            logger.warning(f"Rejected contact form from {client_ip}: {e.error}")
            return e.status_code, e.to_dict()

        received_at = self.clock()
        record = normalize_submission(payload)
        record.update({
            'ip_address': client_ip,
            'created_at': received_at,
            'status': MessageStatus.NEW.value,
        })

        try:
            stored = self.store.insert(record)
        except DatabaseError as e:
            logger.error(f"Failed to store contact message: {e}", exc_info=True)
            body = e.to_dict()
            if self.expose_error_details:
                body['debug'] = str(e)
            return e.status_code, body

        try:
            await self.notifier.notify(stored)
        except EmailError as e:
            # The message is already stored; notification failures stay in the logs
            logger.error(f"Email notification failed for message {stored['id']}: {e}")
        except Exception as e:
            logger.error(f"Unexpected notification error for message {stored['id']}: {e}",
                         exc_info=True)

        return 200, {
            'success': True,
            'message': SUCCESS_MESSAGE,
            'data': {
                'id': stored['id'],
                'timestamp': format_timestamp(received_at),
            }
        }
