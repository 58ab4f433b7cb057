"""Health check route."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str
    timestamp: str
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    """Liveness check; does not touch the database."""
    settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )
