"""Pytest fixtures for the Contact API tests."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.pool import StaticPool

from app import create_app
from core.database_models import isoformat
from core.exceptions import DatabaseError, EmailDeliveryError
from services.contact_store import ContactStore
from services.notifier import ContactNotifier, EmailPayload


class FakeContactStore:
    """In-memory persistence client; ``fail_with`` makes every call raise."""

    configured = True
    database_url = 'memory://fake'

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        self.rows: List[Dict[str, Any]] = []
        self.records: List[Dict[str, Any]] = []
        self.fail_with = fail_with

    @property
    def insert_calls(self) -> int:
        return len(self.records)

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        self.records.append(record)
        if self.fail_with is not None:
            raise self.fail_with
        row = dict(
            record,
            id=str(uuid.uuid4()),
            created_at=isoformat(record['created_at']),
            updated_at=isoformat(record['created_at']),
        )
        self.rows.append(row)
        return row

    def list_all(self) -> List[Dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        return sorted(self.rows, key=lambda row: row['created_at'], reverse=True)

    def probe(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class FakeMailer:
    """Records sends; recipients in ``fail_for`` (or everyone) are rejected."""

    configured = True

    def __init__(self, fail_all: bool = False, fail_for: tuple = ()) -> None:
        self.fail_all = fail_all
        self.fail_for = set(fail_for)
        self.attempts: List[EmailPayload] = []
        self.sent: List[EmailPayload] = []

    async def send(self, sender: Optional[str], to: Optional[str], subject: str, html: str) -> str:
        payload = EmailPayload(sender=sender, to=to, subject=subject, html=html)
        self.attempts.append(payload)
        if not to:
            raise EmailDeliveryError('No recipient address')
        if self.fail_all or to in self.fail_for:
            raise EmailDeliveryError(f'Relay rejected message to {to}')
        self.sent.append(payload)
        return f'<{len(self.sent)}@test>'


@pytest.fixture
def valid_payload() -> Dict[str, str]:
    return {
        'name': '  Ada Lovelace ',
        'email': 'Ada@Example.COM',
        'subject': 'Project inquiry',
        'message': 'Hello,\n\nI would like to talk about a new website.',
    }


@pytest.fixture
def fake_store() -> FakeContactStore:
    return FakeContactStore()


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def notifier(fake_mailer: FakeMailer) -> ContactNotifier:
    return ContactNotifier(
        mailer=fake_mailer,
        sender='Portfolio <noreply@example.com>',
        admin_email='admin@example.com',
    )


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2025, 3, 4, 14, 15, 9, 123456, tzinfo=timezone.utc)


@pytest.fixture
def sqlite_store() -> ContactStore:
    store = ContactStore('sqlite://', {
        'poolclass': StaticPool,
        'connect_args': {'check_same_thread': False},
    })
    store.create_schema()
    yield store
    store.close()


@pytest.fixture
def app(fake_store: FakeContactStore, fake_mailer: FakeMailer) -> Flask:
    return create_app('testing', store=fake_store, mailer=fake_mailer)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def failing_store() -> FakeContactStore:
    return FakeContactStore(fail_with=DatabaseError('connection refused'))
