"""Document-related Pydantic schemas."""

import html
import json
from datetime import datetime
from typing import Annotated, Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

DOCUMENT_TYPES = ("paper", "book", "other")

DocumentType = Literal["paper", "book", "other"]

# JSON-bearing fields whose stored form is always a JSON-encoded string
JSON_FIELDS = ("identifiers", "urls", "keywords", "ai_keywords")


def decode_json_string(value: str) -> Any:
    """Decode a pre-serialized JSON field, undoing entity escaping from sanitization."""
    return json.loads(html.unescape(value))


def _check_json_value(value: Any) -> Any:
    if isinstance(value, str):
        try:
            decode_json_string(value)
        except ValueError:
            raise PydanticCustomError("json_value", "Must be a valid JSON string") from None
        return value
    if value is None or isinstance(value, (dict, list)):
        return value
    raise PydanticCustomError(
        "json_value",
        "Must be a JSON string, an object or an array",
    )


JsonValue = Annotated[Optional[Any], BeforeValidator(_check_json_value)]
Year = Optional[Annotated[int, Field(strict=True, ge=1000, le=9999)]]
Month = Optional[Annotated[int, Field(strict=True, ge=1, le=12)]]
Day = Optional[Annotated[int, Field(strict=True, ge=1, le=31)]]
LanguageCode = Optional[Annotated[str, Field(min_length=2, max_length=2)]]


def check_document_type(value: Any) -> Any:
    if value not in DOCUMENT_TYPES:
        raise PydanticCustomError(
            "document_type",
            "type must be one of 'paper', 'book', 'other'",
        )
    return value


def check_not_null(value: Any, field_name: str) -> Any:
    if value is None:
        raise PydanticCustomError("not_nullable", "{field} cannot be null", {"field": field_name})
    return value


class DocumentFields(BaseModel):
    """Optional fields shared by create and update payloads."""

    abstract: Optional[str] = None
    year: Year = None
    month: Month = None
    day: Day = None
    pages: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    source: Optional[str] = None
    publisher: Optional[str] = None
    language: LanguageCode = None
    identifiers: JsonValue = None
    urls: JsonValue = None
    keywords: JsonValue = None
    ai_keywords: JsonValue = None


class DocumentCreate(DocumentFields):
    """Schema for creating a document."""

    title: str
    type: DocumentType

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("title_required", "title is required")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def type_allowed(cls, value: Any) -> Any:
        return check_document_type(value)


class DocumentUpdate(DocumentFields):
    """Schema for a partial document update; every field is optional."""

    title: Optional[str] = None
    type: Optional[DocumentType] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_not_null(cls, value: Any) -> Any:
        return check_not_null(value, "title")

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise PydanticCustomError("title_required", "title cannot be empty")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def type_allowed(cls, value: Any) -> Any:
        return check_document_type(check_not_null(value, "type"))


class DocumentSummary(BaseModel):
    """Reduced document representation used in list responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    type: str
    year: Optional[int]
    language: Optional[str]
    created_at: datetime
    updated_at: datetime


class DocumentRead(DocumentSummary):
    """Full document representation."""

    abstract: Optional[str]
    ai_summary: Optional[str]
    month: Optional[int]
    day: Optional[int]
    pages: Optional[str]
    volume: Optional[str]
    issue: Optional[str]
    source: Optional[str]
    publisher: Optional[str]
    identifiers: Optional[str]
    urls: Optional[str]
    keywords: Optional[str]
    ai_keywords: Optional[str]
