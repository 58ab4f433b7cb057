"""Shared Pydantic schemas: pagination, identifiers, envelopes."""

import math
import re
from typing import Annotated, Any, Dict, Generic, List, Literal, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_core import PydanticCustomError

from ezdocs.config import settings

T = TypeVar("T")

# Canonical 8-4-4-4-12 form only; no braces, urn prefix or bare hex
UUID_PATTERN = re.compile(r"[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}")


def check_uuid_format(value: Any) -> Any:
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise PydanticCustomError("uuid_type", "UUID input should be a string")
    if not UUID_PATTERN.fullmatch(value):
        raise PydanticCustomError("uuid_parsing", "Input should be a valid UUID")
    return value


UuidStr = Annotated[UUID, BeforeValidator(check_uuid_format)]


class PaginationQuery(BaseModel):
    """Pagination query parameters (coerced from strings)."""

    page: int = Field(default=1, gt=0)
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, gt=0, le=settings.MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class PersonListQuery(PaginationQuery):
    """Person list query with optional free-text search."""

    search: Optional[str] = None


class IdParams(BaseModel):
    """Path parameters of a single-resource route."""

    id: UuidStr


class AssociationParams(BaseModel):
    """Path parameters of a person-document association route."""

    id: UuidStr
    document_id: UuidStr


class PaginationInfo(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationInfo":
        return cls(total=total, page=page, limit=limit, pages=page_count(total, limit))


def page_count(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` rows; zero when there are none."""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


class ItemResponse(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    data: T


class MutationResponse(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    data: T
    message: str


class ListResponse(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    data: List[T]
    pagination: PaginationInfo


class ErrorResponse(BaseModel):
    """Error envelope produced by the error mapper."""

    status: Literal["error"] = "error"
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
