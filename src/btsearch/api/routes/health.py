from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from btsearch.core.config.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """
    Minimal health check response (no side effects).
    """

    status: str
    environment: str
    max_problem_size: int


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        environment=settings.env,
        max_problem_size=settings.max_problem_size,
    )
