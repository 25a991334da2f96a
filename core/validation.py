# core/validation.py
"""
Contact form field validation
"""

import re
from typing import Any, Dict, Tuple

from core.exceptions import InvalidEmailFormatError, InvalidLengthError, MissingFieldError

REQUIRED_FIELDS = ('name', 'email', 'subject', 'message')

# local-part "@" domain "." tld, no whitespace, a single "@"
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

# Checked in this order
FIELD_LENGTHS: Dict[str, Tuple[int, int]] = {
    'name': (2, 100),
    'subject': (5, 200),
    'message': (10, 2000),
}


def validate_contact_form(name: Any, email: Any, subject: Any, message: Any) -> None:
    """
    Validate the four contact form fields.

    Checks run presence -> email format -> name, subject and message length,
    and the first violation is raised. Lengths are measured on the values
    as submitted, before trimming.

    Raises:
        MissingFieldError: a field is absent, empty or not a string
        InvalidEmailFormatError: email is not shaped like local@domain.tld
        InvalidLengthError: a field is outside its bounds
    """
    values = {'name': name, 'email': email, 'subject': subject, 'message': message}

    for field in REQUIRED_FIELDS:
        value = values[field]
        if not isinstance(value, str) or not value:
            raise MissingFieldError()

    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidEmailFormatError()

    for field, (low, high) in FIELD_LENGTHS.items():
        if not low <= len(values[field]) <= high:
            raise InvalidLengthError(field, (low, high))
