"""Request pipeline: sanitization and schema validation stages.

A pipeline is an ordered list of stages. Each stage takes the
``RequestParts`` of one request and returns them (possibly replaced), or
raises ``AppError`` to stop the request. Nothing here depends on the web
framework; ``ezdocs.routes.pipeline`` binds it to FastAPI.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from ezdocs.errors import AppError, ErrorKind
from ezdocs.services.sanitizer import sanitize_value

logger = logging.getLogger(__name__)

PARTS = ("params", "query", "body")

# Pydantic error types raised for malformed UUIDs
ID_FORMAT_ERRORS = {"uuid_parsing", "uuid_type", "uuid_version"}


@dataclass
class RequestParts:
    """Raw and validated values of the three request parts."""

    params: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)
    body: Any = None
    validated: Dict[str, BaseModel] = field(default_factory=dict)

    def get(self, part: str) -> Any:
        return getattr(self, part)

    def set(self, part: str, value: Any) -> None:
        setattr(self, part, value)


Stage = Callable[[RequestParts], RequestParts]


def error_details(exc: ValidationError, root: str = "request") -> Dict[str, str]:
    """Flatten pydantic errors into a field-path -> message map."""
    details: Dict[str, str] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or root
        # Keep the first message per field
        details.setdefault(path, error["msg"])
    return details


def to_app_error(exc: ValidationError, root: str = "request") -> AppError:
    """Map a pydantic ``ValidationError`` to VALIDATION_ERROR or INVALID_ID_FORMAT."""
    errors = exc.errors()
    if errors and all(error["type"] in ID_FORMAT_ERRORS for error in errors):
        return AppError(
            ErrorKind.INVALID_ID_FORMAT,
            message="Identifier must be a valid UUID",
            details=error_details(exc, root),
        )
    return AppError(ErrorKind.VALIDATION_ERROR, details=error_details(exc, root))


def validate_value(schema: Type[BaseModel], value: Any, part: str = "request") -> BaseModel:
    """
    Validate a value against a schema.

    Args:
        schema: Pydantic model describing the expected shape
        value: Raw value (dict for params/query/body)
        part: Name reported for errors that concern the whole value

    Returns:
        Normalized model instance

    Raises:
        AppError: VALIDATION_ERROR or INVALID_ID_FORMAT with field details
    """
    try:
        return schema.model_validate(value)
    except ValidationError as e:
        logger.debug(f"Validation of {part} failed with {e.error_count()} error(s)")
        raise to_app_error(e, part) from e


def sanitize_stage(parts: Iterable[str] = PARTS) -> Stage:
    """Build a stage that strips markup from the given request parts."""
    selected = tuple(parts)
    unknown = set(selected) - set(PARTS)
    if unknown:
        raise ValueError(f"Unknown request parts: {sorted(unknown)}")

    def stage(request: RequestParts) -> RequestParts:
        for part in selected:
            value = request.get(part)
            if value is not None:
                request.set(part, sanitize_value(value))
        return request

    return stage


def validate_stage(part: str, schema: Type[BaseModel]) -> Stage:
    """Build a stage that validates one request part against a schema."""
    if part not in PARTS:
        raise ValueError(f"Unknown request part: {part}")

    def stage(request: RequestParts) -> RequestParts:
        value = request.get(part)
        request.validated[part] = validate_value(schema, {} if value is None else value, part)
        return request

    return stage


def build_pipeline(
    params: Optional[Type[BaseModel]] = None,
    query: Optional[Type[BaseModel]] = None,
    body: Optional[Type[BaseModel]] = None,
    sanitize: Optional[Sequence[str]] = None,
) -> List[Stage]:
    """
    Assemble the stages for one route.

    Sanitization runs first, then validation part by part in the order
    params, query, body. A failing part stops the pipeline.

    Args:
        params: Schema for path parameters
        query: Schema for query parameters
        body: Schema for the JSON body
        sanitize: Parts to sanitize (defaults to every validated part)

    Returns:
        Ordered list of stages
    """
    schemas = {"params": params, "query": query, "body": body}
    if sanitize is None:
        sanitize = [part for part in PARTS if schemas[part] is not None]

    stages: List[Stage] = []
    if sanitize:
        stages.append(sanitize_stage(sanitize))
    for part in PARTS:
        if schemas[part] is not None:
            stages.append(validate_stage(part, schemas[part]))
    return stages


def run_pipeline(stages: Sequence[Stage], request: RequestParts) -> RequestParts:
    """Run stages in order; the first ``AppError`` propagates unchanged."""
    for stage in stages:
        request = stage(request)
    return request
