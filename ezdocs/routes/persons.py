"""Person routes, including a person's document associations."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ezdocs.database import get_db
from ezdocs.routes.pipeline import validated
from ezdocs.schemas.common import (
    AssociationParams,
    ErrorResponse,
    IdParams,
    ItemResponse,
    ListResponse,
    MutationResponse,
    PaginationInfo,
    PaginationQuery,
    PersonListQuery,
)
from ezdocs.schemas.person import (
    AssociationCreate,
    DocumentAuthorCreate,
    DocumentAuthorRead,
    PersonCreate,
    PersonRead,
    PersonUpdate,
)
from ezdocs.services.persons import PersonService
from ezdocs.services.validators import RequestParts

router = APIRouter(
    prefix="/api/persons",
    tags=["persons"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def get_person_service(db: Session = Depends(get_db)) -> PersonService:
    return PersonService(db)


@router.get("", response_model=ListResponse[PersonRead])
def list_persons(
    parts: RequestParts = Depends(validated(query=PersonListQuery)),
    service: PersonService = Depends(get_person_service),
):
    """List persons, optionally filtered by a name search."""
    query: PersonListQuery = parts.validated["query"]
    persons, total = service.list(query, search=query.search)
    return ListResponse[PersonRead](
        data=[PersonRead.model_validate(p) for p in persons],
        pagination=PaginationInfo.build(total, query.page, query.limit),
    )


@router.get("/{id}", response_model=ItemResponse[PersonRead])
def get_person(
    parts: RequestParts = Depends(validated(params=IdParams)),
    service: PersonService = Depends(get_person_service),
):
    person = service.get(parts.validated["params"].id)
    return ItemResponse[PersonRead](data=PersonRead.model_validate(person))


@router.post("", status_code=201, response_model=MutationResponse[PersonRead])
def create_person(
    parts: RequestParts = Depends(validated(body=PersonCreate)),
    service: PersonService = Depends(get_person_service),
):
    person = service.create(parts.validated["body"])
    return MutationResponse[PersonRead](
        data=PersonRead.model_validate(person),
        message="Person created successfully",
    )


@router.put("/{id}", response_model=MutationResponse[PersonRead])
def update_person(
    parts: RequestParts = Depends(validated(params=IdParams, body=PersonUpdate)),
    service: PersonService = Depends(get_person_service),
):
    person = service.update(parts.validated["params"].id, parts.validated["body"])
    return MutationResponse[PersonRead](
        data=PersonRead.model_validate(person),
        message="Person updated successfully",
    )


@router.delete("/{id}", status_code=204, response_class=Response)
def delete_person(
    parts: RequestParts = Depends(validated(params=IdParams)),
    service: PersonService = Depends(get_person_service),
):
    service.delete(parts.validated["params"].id)
    return Response(status_code=204)


@router.get("/{id}/documents", response_model=ListResponse[DocumentAuthorRead])
def list_person_documents(
    parts: RequestParts = Depends(validated(params=IdParams, query=PaginationQuery)),
    service: PersonService = Depends(get_person_service),
):
    """List the documents a person authored, by author position."""
    pagination: PaginationQuery = parts.validated["query"]
    associations, total = service.list_documents(parts.validated["params"].id, pagination)
    return ListResponse[DocumentAuthorRead](
        data=[DocumentAuthorRead.model_validate(a) for a in associations],
        pagination=PaginationInfo.build(total, pagination.page, pagination.limit),
    )


@router.post("/{id}/documents", status_code=201, response_model=MutationResponse[DocumentAuthorRead])
def associate_document(
    parts: RequestParts = Depends(validated(params=IdParams, body=AssociationCreate)),
    service: PersonService = Depends(get_person_service),
):
    """Add the person to a document's author list."""
    body: AssociationCreate = parts.validated["body"]
    data = DocumentAuthorCreate(person_id=parts.validated["params"].id, **body.model_dump())
    association = service.associate(data)
    return MutationResponse[DocumentAuthorRead](
        data=DocumentAuthorRead.model_validate(association),
        message="Person associated with document successfully",
    )


@router.delete("/{id}/documents/{document_id}", status_code=204, response_class=Response)
def dissociate_document(
    parts: RequestParts = Depends(validated(params=AssociationParams)),
    service: PersonService = Depends(get_person_service),
):
    params: AssociationParams = parts.validated["params"]
    service.dissociate(params.id, params.document_id)
    return Response(status_code=204)
