from datetime import datetime, timezone
from enum import Enum
import uuid
from sqlalchemy import Column, String, DateTime, Text, Uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value):
    if value is None:
        return None
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class MessageStatus(Enum):
    """Contact message workflow status"""
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactMessage(Base):
    __tablename__ = 'contact_messages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    ip_address = Column(String(45))  # IPv6 max length
    status = Column(String(20), nullable=False, default=MessageStatus.NEW.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    # Set by the persistence layer on every UPDATE; the API never updates rows
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
            'ip_address': self.ip_address,
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<ContactMessage {self.id} {self.email} ({self.status})>"
