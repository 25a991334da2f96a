# core/exceptions.py
"""
Error taxonomy for the Contact API

Every error knows the HTTP status it maps to and renders the
``{error, details}`` body returned to clients.
"""

from typing import Any, Dict, List, Optional, Tuple


class ContactServiceError(Exception):
    """Base exception for contact form operations"""

    status_code = 500
    error = 'Server error'
    details = 'Something went wrong. Please try again later or contact us directly.'

    def __init__(self, message: Optional[str] = None,
                 error: Optional[str] = None,
                 details: Optional[str] = None):
        if error is not None:
            self.error = error
        if details is not None:
            self.details = details
        super().__init__(message or self.details)

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.error, 'details': self.details}


class ValidationError(ContactServiceError):
    """Submitted form fields were rejected"""
    status_code = 400
    error = 'Validation failed'
    details = 'The submitted form is invalid.'


class MissingFieldError(ValidationError):
    error = 'All fields are required'
    details = 'Please fill in all required fields: name, email, subject, and message.'


class InvalidEmailFormatError(ValidationError):
    error = 'Invalid email format'
    details = 'Please provide a valid email address.'


class InvalidLengthError(ValidationError):
    """A field is shorter or longer than its allowed bounds"""

    def __init__(self, field: str, bounds: Tuple[int, int]):
        self.field = field
        self.bounds = bounds
        low, high = bounds
        super().__init__(
            error=f'Invalid {field} length',
            details=f'{field.capitalize()} must be between {low} and {high} characters.'
        )


class DatabaseError(ContactServiceError):
    """Persistence failure; the message is the raw datastore error"""
    status_code = 500
    error = 'Database error'
    details = 'Failed to store your message. Please try again or contact us directly.'


class EmailError(ContactServiceError):
    """Notification failure; logged, never returned to clients"""
    error = 'Email error'
    details = 'Failed to send notification email.'


class EmailDeliveryError(EmailError):
    """One or more messages could not be handed to the mail relay"""

    def __init__(self, message: str, failures: Optional[List[str]] = None):
        self.failures = failures or [message]
        super().__init__(message)


class ServerError(ContactServiceError):
    """Catch-all for unexpected exceptions"""


class NotFoundError(ContactServiceError):
    status_code = 404
    error = 'Endpoint not found'

    def __init__(self, path: str):
        self.path = path
        super().__init__(details=f'The requested endpoint {path} does not exist.')
