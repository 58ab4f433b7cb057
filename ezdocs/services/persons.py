"""Person service: persons and their document associations."""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ezdocs.errors import AppError, ErrorKind
from ezdocs.models.document import utcnow
from ezdocs.models.person import DocumentAuthor, Person
from ezdocs.schemas.common import PaginationQuery
from ezdocs.schemas.person import DocumentAuthorCreate, PersonCreate, PersonUpdate
from ezdocs.services.storage_errors import require_rows, storage_errors

logger = logging.getLogger(__name__)


def person_not_found(person_id: UUID) -> AppError:
    return AppError(ErrorKind.PERSON_NOT_FOUND, f"Person with ID {person_id} not found")


class PersonService:
    """CRUD operations on persons and on document-author associations."""

    def __init__(self, db: Session):
        self.db = db

    def list(self, pagination: PaginationQuery, search: Optional[str] = None) -> Tuple[List[Person], int]:
        """
        List persons ordered by name.

        Args:
            pagination: Page and limit
            search: Optional case-insensitive substring matched against
                last_name or first_name

        Returns:
            Tuple of (persons on the page, total matching persons)
        """
        query = self.db.query(Person)
        if search:
            query = query.filter(
                or_(
                    Person.last_name.icontains(search, autoescape=True),
                    Person.first_name.icontains(search, autoescape=True),
                )
            )

        total = query.count()
        persons = (
            query.order_by(Person.last_name.asc(), Person.first_name.asc(), Person.created_at.asc())
            .offset(pagination.skip)
            .limit(pagination.limit)
            .all()
        )
        return persons, total

    def get(self, person_id: UUID) -> Person:
        person = self.db.get(Person, person_id)
        if person is None:
            raise person_not_found(person_id)
        return person

    def create(self, data: PersonCreate) -> Person:
        now = utcnow()
        person = Person(**data.model_dump(exclude_unset=True), created_at=now, updated_at=now)

        with storage_errors(self.db):
            self.db.add(person)
            self.db.commit()
        self.db.refresh(person)

        logger.info(f"Created person {person.id}")
        return person

    def update(self, person_id: UUID, data: PersonUpdate) -> Person:
        """Apply a partial update; omitted fields keep their values."""
        person = self.get(person_id)
        values = data.model_dump(exclude_unset=True)

        for name, value in values.items():
            setattr(person, name, value)
        person.updated_at = utcnow()

        with storage_errors(self.db, not_found=ErrorKind.PERSON_NOT_FOUND):
            self.db.commit()
        self.db.refresh(person)

        logger.info(f"Updated person {person_id}: {sorted(values)}")
        return person

    def delete(self, person_id: UUID) -> None:
        with storage_errors(self.db, not_found=ErrorKind.PERSON_NOT_FOUND):
            deleted = (
                self.db.query(Person)
                .filter(Person.id == person_id)
                .delete(synchronize_session=False)
            )
            require_rows(deleted, person_not_found(person_id))
            self.db.commit()

        logger.info(f"Deleted person {person_id}")

    def list_documents(self, person_id: UUID, pagination: PaginationQuery) -> Tuple[List[DocumentAuthor], int]:
        """
        List a person's document associations by author position.

        Args:
            person_id: Person whose documents are listed
            pagination: Page and limit

        Returns:
            Tuple of (associations with their document loaded, total associations)

        Raises:
            AppError: PERSON_NOT_FOUND if the person does not exist
        """
        self.get(person_id)

        query = self.db.query(DocumentAuthor).filter(DocumentAuthor.person_id == person_id)
        total = query.count()
        associations = (
            query.options(joinedload(DocumentAuthor.document))
            .order_by(DocumentAuthor.order.asc(), DocumentAuthor.created_at.asc())
            .offset(pagination.skip)
            .limit(pagination.limit)
            .all()
        )
        return associations, total

    def associate(self, data: DocumentAuthorCreate) -> DocumentAuthor:
        """
        Link a person to a document at the given author position.

        Raises:
            AppError: FOREIGN_KEY_CONSTRAINT if the person or document does not
                exist, UNIQUE_CONSTRAINT if the pair is already linked
        """
        existing = (
            self.db.query(DocumentAuthor)
            .filter(
                DocumentAuthor.document_id == data.document_id,
                DocumentAuthor.person_id == data.person_id,
            )
            .first()
        )
        if existing is not None:
            raise AppError(
                ErrorKind.UNIQUE_CONSTRAINT,
                f"Person {data.person_id} is already an author of document {data.document_id}",
            )

        association = DocumentAuthor(
            document_id=data.document_id,
            person_id=data.person_id,
            order=data.order,
            created_at=utcnow(),
        )

        with storage_errors(self.db):
            self.db.add(association)
            self.db.commit()
        self.db.refresh(association)

        logger.info(f"Associated person {data.person_id} with document {data.document_id} (order {data.order})")
        return association

    def dissociate(self, person_id: UUID, document_id: UUID) -> None:
        """
        Remove the association identified by (document_id, person_id).

        Raises:
            AppError: RESOURCE_NOT_FOUND if there is no such association
        """
        with storage_errors(self.db, not_found=ErrorKind.RESOURCE_NOT_FOUND):
            deleted = (
                self.db.query(DocumentAuthor)
                .filter(
                    DocumentAuthor.document_id == document_id,
                    DocumentAuthor.person_id == person_id,
                )
                .delete(synchronize_session=False)
            )
            require_rows(
                deleted,
                AppError(
                    ErrorKind.RESOURCE_NOT_FOUND,
                    f"Person {person_id} is not an author of document {document_id}",
                ),
            )
            self.db.commit()

        logger.info(f"Dissociated person {person_id} from document {document_id}")
