# services/contact_store.py
"""
Persistence client for contact form submissions

Thin SQLAlchemy layer over the ``contact_messages`` table. Every datastore
failure surfaces as ``DatabaseError`` carrying the raw driver message; the
caller decides how much of it to reveal.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.database_models import Base, ContactMessage
from core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class ContactStore:
    """Insert and list ContactMessage rows"""

    def __init__(self, database_url: Optional[str], engine_options: Optional[Dict[str, Any]] = None):
        self.database_url = database_url
        self.engine = None
        self._session_factory = None

        if database_url:
            self.engine = create_engine(database_url, **(engine_options or {}))
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @property
    def configured(self) -> bool:
        return self.engine is not None

    @contextmanager
    def session(self) -> Iterator[Session]:
        if not self.configured:
            raise DatabaseError('Datastore is not configured (DATABASE_URL is not set)')

        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            raise DatabaseError(str(e)) from e
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create the contact_messages table and its indexes if missing"""
        if not self.configured:
            raise DatabaseError('Datastore is not configured (DATABASE_URL is not set)')
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise DatabaseError(str(e)) from e

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one message and return the stored row, including its generated id"""
        with self.session() as session:
            row = ContactMessage(**record)
            session.add(row)
            session.commit()
            logger.debug(f"Stored contact message {row.id}")
            return row.to_dict()

    def list_all(self) -> List[Dict[str, Any]]:
        """All messages, newest first"""
        with self.session() as session:
            rows = session.scalars(
                select(ContactMessage).order_by(ContactMessage.created_at.desc())
            ).all()
            return [row.to_dict() for row in rows]

    def probe(self) -> None:
        """Bounded connectivity check; raises DatabaseError when unreachable"""
        with self.session() as session:
            session.execute(select(func.count(ContactMessage.id)).limit(1))

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
