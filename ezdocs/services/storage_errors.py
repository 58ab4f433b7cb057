"""Translation of storage driver errors into application errors.

This is the only module that looks at database-specific error shapes.
Services wrap their writes in ``storage_errors`` so that controllers and
the error mapper only ever see ``AppError``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.orm import Session

from ezdocs.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_UNIQUE_VIOLATION = "23505"


def classify_integrity_error(exc: IntegrityError) -> AppError:
    """
    Classify an ``IntegrityError`` by driver code, falling back to its message.

    Args:
        exc: Error raised by SQLAlchemy on flush/commit

    Returns:
        AppError of kind FOREIGN_KEY_CONSTRAINT, UNIQUE_CONSTRAINT or VALIDATION_ERROR
    """
    pgcode = getattr(exc.orig, "pgcode", None)
    text = str(exc.orig).lower()

    if pgcode == PG_FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return AppError(ErrorKind.FOREIGN_KEY_CONSTRAINT)
    if pgcode == PG_UNIQUE_VIOLATION or "unique" in text or "duplicate key" in text:
        return AppError(ErrorKind.UNIQUE_CONSTRAINT)

    # NOT NULL / CHECK violations that slipped past request validation
    return AppError(ErrorKind.VALIDATION_ERROR, message="Constraint violation")


@contextmanager
def storage_errors(db: Session, not_found: ErrorKind = ErrorKind.RECORD_NOT_FOUND) -> Iterator[None]:
    """Roll back and re-raise storage failures as ``AppError``.

    Args:
        db: Session to roll back on failure
        not_found: Kind raised when the store reports a missing row
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        error = classify_integrity_error(e)
        logger.warning(f"Integrity error mapped to {error.code}: {e.orig}")
        raise error from e
    except NoResultFound as e:
        db.rollback()
        raise AppError(not_found) from e


def require_rows(rowcount: int, error: Optional[AppError] = None) -> int:
    """Raise ``error`` (RECORD_NOT_FOUND by default) when a statement affected no rows."""
    if rowcount == 0:
        raise error or AppError(ErrorKind.RECORD_NOT_FOUND)
    return rowcount
