"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bentosearch import __version__
from bentosearch.api.deps import get_registry
from bentosearch.engines.base.registry import EngineRegistry

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="bentosearch server version")
    service: str = Field(description="Service name ('bentosearch')")
    engines: list[str] = Field(description="Ids of the registered engines")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description="Returns overall system health, server version, and the registered engine ids.",
)
async def health_check(
    registry: EngineRegistry = Depends(get_registry),
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="bentosearch",
        engines=registry.engine_ids,
    )
