"""Document service: persistence operations for documents."""

import json
import logging
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ezdocs.errors import AppError, ErrorKind
from ezdocs.models.document import Document, utcnow
from ezdocs.schemas.common import PaginationQuery
from ezdocs.schemas.document import JSON_FIELDS, DocumentCreate, DocumentUpdate, decode_json_string
from ezdocs.services.sanitizer import sanitize_value
from ezdocs.services.storage_errors import require_rows, storage_errors

logger = logging.getLogger(__name__)


def serialize_json_fields(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Encode JSON-bearing fields as JSON strings.

    Pre-serialized strings are decoded first so their string leaves are
    sanitized like those of the structured form. None clears the column, so
    the stored form is always valid JSON text or null.

    Args:
        values: Field values from a create/update payload

    Returns:
        Copy of values with identifiers/urls/keywords/ai_keywords as strings
    """
    result = dict(values)
    for name in JSON_FIELDS:
        value = result.get(name)
        if isinstance(value, str):
            value = sanitize_value(decode_json_string(value))
        if value is not None:
            result[name] = json.dumps(value, ensure_ascii=False)
    return result


def document_not_found(document_id: UUID) -> AppError:
    return AppError(ErrorKind.DOCUMENT_NOT_FOUND, f"Document with ID {document_id} not found")


class DocumentService:
    """CRUD operations on documents using one session."""

    def __init__(self, db: Session):
        self.db = db

    def list(self, pagination: PaginationQuery) -> Tuple[List[Document], int]:
        """
        List documents, most recently updated first.

        Args:
            pagination: Page and limit

        Returns:
            Tuple of (documents on the page, total number of documents)
        """
        total = self.db.query(func.count(Document.id)).scalar()
        documents = (
            self.db.query(Document)
            .order_by(Document.updated_at.desc(), Document.created_at.desc())
            .offset(pagination.skip)
            .limit(pagination.limit)
            .all()
        )
        return documents, total

    def get(self, document_id: UUID) -> Document:
        document = self.db.get(Document, document_id)
        if document is None:
            raise document_not_found(document_id)
        return document

    def create(self, data: DocumentCreate) -> Document:
        """Insert a document; id and timestamps are assigned here."""
        values = serialize_json_fields(data.model_dump(exclude_unset=True))
        now = utcnow()
        document = Document(**values, created_at=now, updated_at=now)

        with storage_errors(self.db):
            self.db.add(document)
            self.db.commit()
        self.db.refresh(document)

        logger.info(f"Created document {document.id}")
        return document

    def update(self, document_id: UUID, data: DocumentUpdate) -> Document:
        """
        Apply a partial update; fields absent from the payload are untouched.

        Raises:
            AppError: DOCUMENT_NOT_FOUND if the document does not exist
        """
        document = self.get(document_id)
        values = serialize_json_fields(data.model_dump(exclude_unset=True))

        for name, value in values.items():
            setattr(document, name, value)
        document.updated_at = utcnow()

        with storage_errors(self.db, not_found=ErrorKind.DOCUMENT_NOT_FOUND):
            self.db.commit()
        self.db.refresh(document)

        logger.info(f"Updated document {document_id}: {sorted(values)}")
        return document

    def delete(self, document_id: UUID) -> None:
        """
        Delete a document; its author associations go with it.

        Raises:
            AppError: DOCUMENT_NOT_FOUND if no row was deleted
        """
        with storage_errors(self.db, not_found=ErrorKind.DOCUMENT_NOT_FOUND):
            deleted = (
                self.db.query(Document)
                .filter(Document.id == document_id)
                .delete(synchronize_session=False)
            )
            require_rows(deleted, document_not_found(document_id))
            self.db.commit()

        logger.info(f"Deleted document {document_id}")
