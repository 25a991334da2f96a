"""Tests for the SQLAlchemy-backed contact store."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from core.exceptions import DatabaseError
from services.contact_store import ContactStore


def record(created_at: datetime, **overrides: Any) -> Dict[str, Any]:
    values = {
        'name': 'Ada Lovelace',
        'email': 'ada@example.com',
        'subject': 'Project inquiry',
        'message': 'I would like to talk about a new website.',
        'ip_address': '203.0.113.7',
        'created_at': created_at,
        'status': 'new',
    }
    values.update(overrides)
    return values


class TestInsert:

    def test_returns_row_with_generated_id(self, sqlite_store: ContactStore) -> None:
        created_at = datetime(2025, 3, 4, 14, 15, 9, tzinfo=timezone.utc)

        row = sqlite_store.insert(record(created_at))

        assert uuid.UUID(row['id'])
        assert row['name'] == 'Ada Lovelace'
        assert row['status'] == 'new'
        assert row['ip_address'] == '203.0.113.7'
        assert row['created_at'] == '2025-03-04T14:15:09+00:00'
        assert row['updated_at'] is not None

    def test_identical_records_get_distinct_ids(self, sqlite_store: ContactStore) -> None:
        created_at = datetime.now(timezone.utc)

        first = sqlite_store.insert(record(created_at))
        second = sqlite_store.insert(record(created_at))

        assert first['id'] != second['id']
        assert len(sqlite_store.list_all()) == 2

    def test_ip_address_optional(self, sqlite_store: ContactStore) -> None:
        row = sqlite_store.insert(record(datetime.now(timezone.utc), ip_address=None))

        assert row['ip_address'] is None

    def test_constraint_violation_is_database_error(self, sqlite_store: ContactStore) -> None:
        with pytest.raises(DatabaseError):
            sqlite_store.insert(record(datetime.now(timezone.utc), name=None))

        assert sqlite_store.list_all() == []


class TestListAll:

    def test_newest_first(self, sqlite_store: ContactStore) -> None:
        base = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        for offset, subject in [(1, 'Second message'), (0, 'First message'), (2, 'Third message')]:
            sqlite_store.insert(record(base + timedelta(minutes=offset), subject=subject))

        rows = sqlite_store.list_all()

        assert [row['subject'] for row in rows] == ['Third message', 'Second message', 'First message']
        timestamps = [row['created_at'] for row in rows]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len(set(timestamps)) == 3

    def test_empty(self, sqlite_store: ContactStore) -> None:
        assert sqlite_store.list_all() == []


class TestUnconfigured:

    def test_operations_raise_database_error(self) -> None:
        store = ContactStore(None)

        assert store.configured is False
        with pytest.raises(DatabaseError):
            store.probe()
        with pytest.raises(DatabaseError):
            store.insert(record(datetime.now(timezone.utc)))
        with pytest.raises(DatabaseError):
            store.list_all()


def test_probe(sqlite_store: ContactStore) -> None:
    assert sqlite_store.probe() is None


def test_probe_without_schema_fails() -> None:
    store = ContactStore('sqlite://')

    with pytest.raises(DatabaseError):
        store.probe()
