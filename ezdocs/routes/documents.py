"""Document routes."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ezdocs.database import get_db
from ezdocs.routes.pipeline import validated
from ezdocs.schemas.common import (
    ErrorResponse,
    IdParams,
    ItemResponse,
    ListResponse,
    MutationResponse,
    PaginationInfo,
    PaginationQuery,
)
from ezdocs.schemas.document import DocumentCreate, DocumentRead, DocumentSummary, DocumentUpdate
from ezdocs.services.documents import DocumentService
from ezdocs.services.validators import RequestParts

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    return DocumentService(db)


@router.get("", response_model=ListResponse[DocumentSummary])
def list_documents(
    parts: RequestParts = Depends(validated(query=PaginationQuery)),
    service: DocumentService = Depends(get_document_service),
):
    """List documents, most recently updated first."""
    pagination: PaginationQuery = parts.validated["query"]
    documents, total = service.list(pagination)
    return ListResponse[DocumentSummary](
        data=[DocumentSummary.model_validate(d) for d in documents],
        pagination=PaginationInfo.build(total, pagination.page, pagination.limit),
    )


@router.get("/{id}", response_model=ItemResponse[DocumentRead])
def get_document(
    parts: RequestParts = Depends(validated(params=IdParams)),
    service: DocumentService = Depends(get_document_service),
):
    """Get a single document."""
    document = service.get(parts.validated["params"].id)
    return ItemResponse[DocumentRead](data=DocumentRead.model_validate(document))


@router.post("", status_code=201, response_model=MutationResponse[DocumentRead])
def create_document(
    parts: RequestParts = Depends(validated(body=DocumentCreate)),
    service: DocumentService = Depends(get_document_service),
):
    """Create a document."""
    document = service.create(parts.validated["body"])
    return MutationResponse[DocumentRead](
        data=DocumentRead.model_validate(document),
        message="Document created successfully",
    )


@router.put("/{id}", response_model=MutationResponse[DocumentRead])
def update_document(
    parts: RequestParts = Depends(validated(params=IdParams, body=DocumentUpdate)),
    service: DocumentService = Depends(get_document_service),
):
    """Partially update a document; omitted fields are left unchanged."""
    document = service.update(parts.validated["params"].id, parts.validated["body"])
    return MutationResponse[DocumentRead](
        data=DocumentRead.model_validate(document),
        message="Document updated successfully",
    )


@router.delete("/{id}", status_code=204, response_class=Response)
def delete_document(
    parts: RequestParts = Depends(validated(params=IdParams)),
    service: DocumentService = Depends(get_document_service),
):
    """Delete a document and its author associations."""
    service.delete(parts.validated["params"].id)
    return Response(status_code=204)
