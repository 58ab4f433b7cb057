"""SQLAlchemy ORM models."""

from ezdocs.models.document import Document
from ezdocs.models.person import DocumentAuthor, Person

__all__ = [
    "Document",
    "Person",
    "DocumentAuthor",
]
