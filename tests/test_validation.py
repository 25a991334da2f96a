"""Tests for contact form validation."""

from typing import Dict

import pytest

from core.exceptions import (
    InvalidEmailFormatError, InvalidLengthError, MissingFieldError, ValidationError
)
from core.validation import validate_contact_form


def fields(**overrides: object) -> Dict[str, object]:
    values = {
        'name': 'Ada Lovelace',
        'email': 'ada@example.com',
        'subject': 'Project inquiry',
        'message': 'I would like to talk about a new website.',
    }
    values.update(overrides)
    return values


class TestPresence:
    """Missing, empty or non-string fields."""

    @pytest.mark.parametrize('field', ['name', 'email', 'subject', 'message'])
    def test_missing_field_rejected(self, field: str) -> None:
        with pytest.raises(MissingFieldError):
            validate_contact_form(**fields(**{field: None}))

    @pytest.mark.parametrize('field', ['name', 'email', 'subject', 'message'])
    def test_empty_field_rejected(self, field: str) -> None:
        with pytest.raises(MissingFieldError):
            validate_contact_form(**fields(**{field: ''}))

    def test_non_string_rejected(self) -> None:
        with pytest.raises(MissingFieldError):
            validate_contact_form(**fields(name=12345))

    def test_presence_checked_before_email_format(self) -> None:
        with pytest.raises(MissingFieldError):
            validate_contact_form(**fields(email='not-an-email', message=''))

    def test_error_body(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            validate_contact_form(**fields(subject=None))
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict() == {
            'error': 'All fields are required',
            'details': 'Please fill in all required fields: name, email, subject, and message.',
        }


class TestEmailFormat:
    """Email must look like local@domain.tld."""

    @pytest.mark.parametrize('email', [
        'plainaddress',
        'missing-at.example.com',
        'user@nodot',
        'user@@example.com',
        'us er@example.com',
        'user@exa mple.com',
        '@example.com',
        'user@.com',
        'user@example.',
        'a@b@c.com',
        'user@example.com\n',
    ])
    def test_invalid_email_rejected(self, email: str) -> None:
        with pytest.raises(InvalidEmailFormatError):
            validate_contact_form(**fields(email=email))

    @pytest.mark.parametrize('email', [
        'ada@example.com',
        'first.last+tag@sub.example.co.uk',
        'A@B.C',
    ])
    def test_valid_email_accepted(self, email: str) -> None:
        assert validate_contact_form(**fields(email=email)) is None

    def test_padded_email_rejected(self) -> None:
        with pytest.raises(InvalidEmailFormatError):
            validate_contact_form(**fields(email=' ada@example.com '))

    def test_email_checked_before_lengths(self) -> None:
        with pytest.raises(InvalidEmailFormatError):
            validate_contact_form(**fields(email='nope', name='A'))


class TestLengthBounds:
    """name [2,100], subject [5,200], message [10,2000]."""

    @pytest.mark.parametrize('field,length,valid', [
        ('name', 1, False),
        ('name', 2, True),
        ('name', 100, True),
        ('name', 101, False),
        ('subject', 4, False),
        ('subject', 5, True),
        ('subject', 200, True),
        ('subject', 201, False),
        ('message', 9, False),
        ('message', 10, True),
        ('message', 2000, True),
        ('message', 2001, False),
    ])
    def test_boundaries(self, field: str, length: int, valid: bool) -> None:
        values = fields(**{field: 'x' * length})
        if valid:
            assert validate_contact_form(**values) is None
        else:
            with pytest.raises(InvalidLengthError) as exc_info:
                validate_contact_form(**values)
            assert exc_info.value.field == field

    def test_first_violation_reported(self) -> None:
        with pytest.raises(InvalidLengthError) as exc_info:
            validate_contact_form(**fields(name='A', subject='Hi', message='short'))
        assert exc_info.value.field == 'name'

        with pytest.raises(InvalidLengthError) as exc_info:
            validate_contact_form(**fields(subject='Hi', message='short'))
        assert exc_info.value.field == 'subject'

    def test_length_error_body(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form(**fields(message='too short'))
        assert exc_info.value.to_dict() == {
            'error': 'Invalid message length',
            'details': 'Message must be between 10 and 2000 characters.',
        }
        assert exc_info.value.bounds == (10, 2000)
