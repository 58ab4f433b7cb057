"""Person and association Pydantic schemas."""

from datetime import datetime
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from ezdocs.schemas.common import UuidStr
from ezdocs.schemas.document import DocumentRead, check_not_null


class PersonCreate(BaseModel):
    """Schema for creating a person."""

    last_name: str
    first_name: Optional[str] = None

    @field_validator("last_name")
    @classmethod
    def last_name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("last_name_required", "last_name is required")
        return value


class PersonUpdate(BaseModel):
    """Schema for a partial person update."""

    last_name: Optional[str] = None
    first_name: Optional[str] = None

    @field_validator("last_name", mode="before")
    @classmethod
    def last_name_not_null(cls, value: Any) -> Any:
        return check_not_null(value, "last_name")

    @field_validator("last_name")
    @classmethod
    def last_name_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise PydanticCustomError("last_name_required", "last_name cannot be empty")
        return value


class PersonRead(BaseModel):
    """Person representation."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    last_name: str
    first_name: Optional[str]
    created_at: datetime
    updated_at: datetime


class AssociationCreate(BaseModel):
    """Body of POST /persons/{id}/documents; the person comes from the path."""

    document_id: UuidStr
    order: Annotated[int, Field(strict=True, ge=1)]


class DocumentAuthorCreate(AssociationCreate):
    """Complete association payload handed to the person service."""

    person_id: UuidStr


class DocumentAuthorRead(BaseModel):
    """Association row, optionally with the joined document."""

    model_config = ConfigDict(from_attributes=True)

    document_id: UUID
    person_id: UUID
    order: int
    created_at: datetime
    document: Optional[DocumentRead] = None
