"""Error taxonomy and the exception handlers that render it.

Every failure that reaches the client is described by an ``ErrorKind``. The
kind alone decides the HTTP status, the stable error code and the default
message, so mapping an error to a response is a single table lookup.
Framework HTTP errors outside the table keep their own status.

Error body (always):
    {"status": "error", "code": ..., "message": ..., "details": {...}}

``details`` is omitted when there is nothing to report.
"""

import enum
import logging
from typing import Any, Dict, NamedTuple, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    """Closed set of failures the API can report."""

    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CLIENT_ERROR = "CLIENT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
    INVALID_JSON = "INVALID_JSON"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"
    UNIQUE_CONSTRAINT = "UNIQUE_CONSTRAINT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorEntry(NamedTuple):
    status: int
    code: str
    message: str


ERROR_TABLE: Dict[ErrorKind, ErrorEntry] = {
    ErrorKind.DOCUMENT_NOT_FOUND: ErrorEntry(404, "DOCUMENT_NOT_FOUND", "Document not found"),
    ErrorKind.PERSON_NOT_FOUND: ErrorEntry(404, "PERSON_NOT_FOUND", "Person not found"),
    ErrorKind.RESOURCE_NOT_FOUND: ErrorEntry(404, "RESOURCE_NOT_FOUND", "Resource not found"),
    ErrorKind.RECORD_NOT_FOUND: ErrorEntry(404, "RECORD_NOT_FOUND", "Record not found"),
    ErrorKind.ROUTE_NOT_FOUND: ErrorEntry(404, "NOT_FOUND", "Route not found"),
    ErrorKind.METHOD_NOT_ALLOWED: ErrorEntry(405, "METHOD_NOT_ALLOWED", "Method not allowed"),
    ErrorKind.CLIENT_ERROR: ErrorEntry(400, "CLIENT_ERROR", "Request could not be processed"),
    ErrorKind.VALIDATION_ERROR: ErrorEntry(400, "VALIDATION_ERROR", "Request validation failed"),
    ErrorKind.INVALID_ID_FORMAT: ErrorEntry(400, "INVALID_ID_FORMAT", "Invalid identifier format"),
    ErrorKind.INVALID_JSON: ErrorEntry(400, "INVALID_JSON", "Malformed JSON request body"),
    ErrorKind.FOREIGN_KEY_CONSTRAINT: ErrorEntry(
        400, "FOREIGN_KEY_CONSTRAINT", "Referenced record does not exist"
    ),
    ErrorKind.UNIQUE_CONSTRAINT: ErrorEntry(400, "UNIQUE_CONSTRAINT", "Record already exists"),
    ErrorKind.INTERNAL_SERVER_ERROR: ErrorEntry(
        500, "INTERNAL_SERVER_ERROR", "An unexpected error occurred"
    ),
}

_STATUS_TO_KIND: Dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION_ERROR,
    404: ErrorKind.ROUTE_NOT_FOUND,
    405: ErrorKind.METHOD_NOT_ALLOWED,
}


class AppError(Exception):
    """Application error carrying an ``ErrorKind``.

    Attributes:
        kind: Member of ``ErrorKind``; decides status and code.
        message: Human-readable message (defaults to the table's message).
        details: Optional field-path -> message map.
        status: Overrides the table status (framework HTTP errors only).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ):
        self.kind = kind
        self.status = status or ERROR_TABLE[kind].status
        self.message = message or ERROR_TABLE[kind].message
        self.details = details or None
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.status

    @property
    def code(self) -> str:
        return ERROR_TABLE[self.kind].code

    def __repr__(self) -> str:
        return f"AppError({self.kind.name}, {self.message!r})"


def error_body(kind: ErrorKind, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "status": "error",
        "code": ERROR_TABLE[kind].code,
        "message": message,
    }
    if details:
        body["details"] = details
    return body


def error_response(exc: AppError, redact: bool = False) -> JSONResponse:
    """Render an ``AppError`` as the standard error envelope."""
    message = exc.message
    if redact and exc.status_code >= 500:
        message = ERROR_TABLE[exc.kind].message
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.kind, message, exc.details),
    )


def classify_exception(exc: Exception) -> AppError:
    """Normalize any exception into an ``AppError``.

    Storage-specific errors are translated at the service boundary, so by
    the time they get here they are already ``AppError`` instances.
    """
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, RequestValidationError):
        details = {}
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            details[".".join(loc) or "request"] = error.get("msg", "Invalid value")
        return AppError(ErrorKind.VALIDATION_ERROR, details=details)
    if isinstance(exc, StarletteHTTPException):
        message = str(exc.detail) if exc.detail else None
        if exc.status_code in _STATUS_TO_KIND:
            return AppError(_STATUS_TO_KIND[exc.status_code], message=message)
        if exc.status_code < 500:
            return AppError(ErrorKind.CLIENT_ERROR, message=message, status=exc.status_code)
        return AppError(ErrorKind.INTERNAL_SERVER_ERROR, message=message, status=exc.status_code)
    return AppError(ErrorKind.INTERNAL_SERVER_ERROR, message=str(exc) or None)


def install_error_handlers(app: FastAPI, redact_internal: bool = False) -> None:
    """Register the terminal error mapper for every error type.

    Args:
        app: Application to install the handlers on.
        redact_internal: When True (production), messages of 5xx errors are
            replaced by the generic message from the table.
    """

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        error = classify_exception(exc)

        if error.status_code >= 500:
            logger.exception(
                f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}",
                exc_info=exc,
            )
        else:
            logger.info(f"{request.method} {request.url.path} -> {error.status_code} {error.code}")

        return error_response(error, redact=redact_internal)

    app.add_exception_handler(AppError, handle)
    app.add_exception_handler(RequestValidationError, handle)
    app.add_exception_handler(StarletteHTTPException, handle)
    app.add_exception_handler(Exception, handle)
