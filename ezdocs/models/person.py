"""Person and DocumentAuthor models."""

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    PrimaryKeyConstraint,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from ezdocs.database import Base
from ezdocs.models.document import utcnow


class Person(Base):
    """Person who authored one or more documents."""

    __tablename__ = "persons"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    last_name = Column(Text, nullable=False)
    first_name = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    authorships = relationship(
        "DocumentAuthor",
        back_populates="person",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_persons_last_name", "last_name"),
    )


class DocumentAuthor(Base):
    """Join row: one person's position in one document's author list."""

    __tablename__ = "document_authors"

    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    person_id = Column(Uuid, ForeignKey("persons.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False)  # 1-based
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    document = relationship("Document", back_populates="authors")
    person = relationship("Person", back_populates="authorships")

    __table_args__ = (
        PrimaryKeyConstraint("document_id", "person_id", name="document_id_person_id"),
        CheckConstraint('"order" >= 1', name="ck_document_authors_order_positive"),
        Index("idx_document_authors_person_id", "person_id"),
    )
