"""Document model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from ezdocs.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """Bibliographic document (paper, book, ...)."""

    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)  # 'paper', 'book', 'other'
    abstract = Column(Text)
    ai_summary = Column(Text)  # Filled in by the system, never by clients
    year = Column(Integer)
    month = Column(Integer)
    day = Column(Integer)
    pages = Column(String(64))
    volume = Column(String(64))
    issue = Column(String(64))
    source = Column(Text)
    publisher = Column(Text)
    language = Column(String(2))
    # JSON-encoded strings
    identifiers = Column(Text)
    urls = Column(Text)
    keywords = Column(Text)
    ai_keywords = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    authors = relationship(
        "DocumentAuthor",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DocumentAuthor.order",
    )

    __table_args__ = (
        Index("idx_documents_updated_at", "updated_at"),
    )
