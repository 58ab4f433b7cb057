"""Tests for request schemas and the sanitize/validate pipeline."""

import uuid

import pytest

from ezdocs.errors import AppError, ErrorKind
from ezdocs.schemas.common import IdParams, PaginationQuery, PersonListQuery
from ezdocs.schemas.document import DocumentCreate, DocumentUpdate
from ezdocs.schemas.person import AssociationCreate, PersonCreate, PersonUpdate
from ezdocs.services.validators import (
    RequestParts,
    build_pipeline,
    run_pipeline,
    sanitize_stage,
    validate_stage,
    validate_value,
)


def expect_error(schema, value, kind=ErrorKind.VALIDATION_ERROR):
    with pytest.raises(AppError) as exc_info:
        validate_value(schema, value)
    assert exc_info.value.kind == kind
    return exc_info.value.details


def test_pagination_defaults():
    """Absent page/limit fall back to 1 and 20."""
    query = validate_value(PaginationQuery, {})

    assert query.page == 1
    assert query.limit == 20
    assert query.skip == 0


def test_pagination_coerces_strings():
    """Query strings are coerced to integers."""
    query = validate_value(PaginationQuery, {"page": "3", "limit": "10"})

    assert query.page == 3
    assert query.limit == 10
    assert query.skip == 20


def test_pagination_bounds():
    """page and limit must be positive and limit at most 100."""
    assert "page" in expect_error(PaginationQuery, {"page": "0"})
    assert "limit" in expect_error(PaginationQuery, {"limit": "101"})
    assert "limit" in expect_error(PaginationQuery, {"limit": "-5"})
    assert "page" in expect_error(PaginationQuery, {"page": "abc"})


def test_person_list_query_search():
    query = validate_value(PersonListQuery, {"search": "Tan"})
    assert query.search == "Tan"
    assert query.limit == 20


def test_invalid_uuid_uses_dedicated_code():
    """Malformed identifiers are reported as INVALID_ID_FORMAT."""
    details = expect_error(IdParams, {"id": "not-a-uuid"}, kind=ErrorKind.INVALID_ID_FORMAT)
    assert "id" in details


def test_missing_uuid_is_generic_validation_error():
    details = expect_error(AssociationCreate, {"order": 1})
    assert "document_id" in details


def test_valid_uuid_accepted():
    document_id = uuid.uuid4()
    params = validate_value(IdParams, {"id": str(document_id)})
    assert params.id == document_id


def test_document_create_valid():
    document = validate_value(
        DocumentCreate,
        {
            "title": "Test paper",
            "type": "paper",
            "year": 2025,
            "month": 3,
            "day": 3,
            "language": "ja",
            "identifiers": {"doi": "10.1234/5678"},
            "keywords": '{"keywords": ["test"]}',
        },
    )

    assert document.title == "Test paper"
    assert document.identifiers == {"doi": "10.1234/5678"}
    assert document.keywords == '{"keywords": ["test"]}'


def test_document_create_requires_title():
    details = expect_error(DocumentCreate, {"type": "paper"})
    assert "title" in details


def test_document_create_rejects_empty_title():
    details = expect_error(DocumentCreate, {"title": "", "type": "paper"})
    assert details["title"] == "title is required"


def test_document_type_message_names_allowed_values():
    details = expect_error(DocumentCreate, {"title": "T", "type": "invalid_type"})
    assert details["type"] == "type must be one of 'paper', 'book', 'other'"


@pytest.mark.parametrize(
    "field,value",
    [
        ("year", 999),
        ("year", 10000),
        ("month", 0),
        ("month", 13),
        ("day", 0),
        ("day", 32),
        ("year", "2025"),
        ("year", True),
    ],
)
def test_document_date_bounds(field, value):
    details = expect_error(DocumentCreate, {"title": "T", "type": "book", field: value})
    assert field in details


def test_document_no_calendar_cross_check():
    """Day 31 in February is accepted; only individual bounds are checked."""
    document = validate_value(DocumentCreate, {"title": "T", "type": "other", "month": 2, "day": 31})
    assert document.day == 31


def test_document_language_code_length():
    assert "language" in expect_error(DocumentCreate, {"title": "T", "type": "paper", "language": "jpn"})


def test_document_json_field_types():
    assert "urls" in expect_error(DocumentCreate, {"title": "T", "type": "paper", "urls": 42})


def test_document_ignores_system_fields():
    """ai_summary cannot be set by clients."""
    document = validate_value(DocumentCreate, {"title": "T", "type": "paper", "ai_summary": "x"})
    assert "ai_summary" not in document.model_dump()


def test_document_update_is_partial():
    update = validate_value(DocumentUpdate, {"abstract": "New abstract"})
    assert update.model_dump(exclude_unset=True) == {"abstract": "New abstract"}


def test_document_update_rejects_null_and_empty_title():
    assert "title" in expect_error(DocumentUpdate, {"title": None})
    assert "title" in expect_error(DocumentUpdate, {"title": "  "})
    assert "type" in expect_error(DocumentUpdate, {"type": "journal"})


def test_person_schemas():
    person = validate_value(PersonCreate, {"last_name": "Tanaka"})
    assert person.first_name is None

    assert "last_name" in expect_error(PersonCreate, {"first_name": "Taro"})
    assert "last_name" in expect_error(PersonCreate, {"last_name": ""})
    assert "last_name" in expect_error(PersonUpdate, {"last_name": ""})

    update = validate_value(PersonUpdate, {"first_name": ""})
    assert update.model_dump(exclude_unset=True) == {"first_name": ""}


def test_association_order_minimum():
    document_id = str(uuid.uuid4())
    assert "order" in expect_error(AssociationCreate, {"document_id": document_id, "order": 0})

    association = validate_value(AssociationCreate, {"document_id": document_id, "order": 1})
    assert association.order == 1


def test_non_object_body_reported_on_part():
    with pytest.raises(AppError) as exc_info:
        validate_value(PersonCreate, ["not", "an", "object"], "body")
    assert "body" in exc_info.value.details


def test_sanitize_stage_only_touches_selected_parts():
    parts = RequestParts(params={"id": "<b>x</b>"}, query={"q": "<b>y</b>"}, body={"title": "<i>z</i>"})

    run_pipeline([sanitize_stage(["body"])], parts)

    assert parts.body == {"title": "z"}
    assert parts.params == {"id": "<b>x</b>"}
    assert parts.query == {"q": "<b>y</b>"}


def test_pipeline_sanitizes_before_validating():
    """A title made only of markup is empty after sanitization."""
    stages = build_pipeline(body=DocumentCreate)
    parts = RequestParts(body={"title": "<script>alert(1)</script>", "type": "paper"})

    with pytest.raises(AppError) as exc_info:
        run_pipeline(stages, parts)

    assert exc_info.value.kind == ErrorKind.VALIDATION_ERROR
    assert "title" in exc_info.value.details


def test_pipeline_short_circuits_on_first_failing_part():
    """An invalid path id stops the pipeline before the body is validated."""
    seen = []

    def record(parts):
        seen.append(True)
        return parts

    stages = build_pipeline(params=IdParams, body=DocumentUpdate) + [record]
    parts = RequestParts(params={"id": "nope"}, body={"title": ""})

    with pytest.raises(AppError) as exc_info:
        run_pipeline(stages, parts)

    assert exc_info.value.kind == ErrorKind.INVALID_ID_FORMAT
    assert "body" not in parts.validated
    assert seen == []


def test_pipeline_returns_validated_parts():
    document_id = uuid.uuid4()
    stages = build_pipeline(params=IdParams, query=PaginationQuery)
    parts = run_pipeline(stages, RequestParts(params={"id": str(document_id)}, query={"page": "2"}))

    assert parts.validated["params"].id == document_id
    assert parts.validated["query"].page == 2


def test_unknown_part_rejected():
    with pytest.raises(ValueError):
        validate_stage("headers", IdParams)
    with pytest.raises(ValueError):
        sanitize_stage(["cookies"])


def test_only_hyphenated_uuid_form_accepted():
    """Bare hex, braces and urn prefixes are rejected as malformed identifiers."""
    value = "12345678-1234-5678-1234-567812345678"

    for malformed in (
        value.replace("-", ""),
        "{" + value + "}",
        "urn:uuid:" + value,
        value + "\n",
    ):
        details = expect_error(IdParams, {"id": malformed}, kind=ErrorKind.INVALID_ID_FORMAT)
        assert "id" in details

    assert str(validate_value(IdParams, {"id": value.upper()}).id) == value


def test_association_body_id_format():
    details = expect_error(
        AssociationCreate,
        {"document_id": "{12345678-1234-5678-1234-567812345678}", "order": 1},
        kind=ErrorKind.INVALID_ID_FORMAT,
    )
    assert "document_id" in details


def test_document_json_string_must_parse():
    """Pre-serialized JSON fields must hold valid JSON, also after entity escaping."""
    details = expect_error(DocumentCreate, {"title": "T", "type": "paper", "identifiers": "{not json"})
    assert "identifiers" in details

    document = validate_value(
        DocumentCreate,
        {"title": "T", "type": "paper", "identifiers": "{&quot;doi&quot;: &quot;10.1/x&quot;}"},
    )
    assert document.identifiers == "{&quot;doi&quot;: &quot;10.1/x&quot;}"
