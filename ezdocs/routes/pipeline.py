"""FastAPI binding of the sanitize/validate request pipeline."""

import json
from typing import Any, Callable, Optional, Sequence, Type

from fastapi import Request
from pydantic import BaseModel

from ezdocs.errors import AppError, ErrorKind
from ezdocs.services.validators import RequestParts, build_pipeline, run_pipeline


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON; an empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise AppError(ErrorKind.INVALID_JSON, details={"body": str(e)}) from e


def validated(
    params: Optional[Type[BaseModel]] = None,
    query: Optional[Type[BaseModel]] = None,
    body: Optional[Type[BaseModel]] = None,
    sanitize: Optional[Sequence[str]] = None,
) -> Callable:
    """
    Build a dependency that runs the request pipeline for a route.

    The dependency returns ``RequestParts`` whose ``validated`` mapping holds
    one model instance per validated part.

    Args:
        params: Schema for path parameters
        query: Schema for query parameters
        body: Schema for the JSON body
        sanitize: Parts to sanitize (defaults to every validated part)

    Returns:
        Async callable suitable for ``Depends``
    """
    stages = build_pipeline(params=params, query=query, body=body, sanitize=sanitize)

    async def dependency(request: Request) -> RequestParts:
        parts = RequestParts(
            params=dict(request.path_params),
            query=dict(request.query_params),
            body=await read_json_body(request) if body is not None else None,
        )
        return run_pipeline(stages, parts)

    return dependency
