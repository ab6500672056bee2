"""Engine listing endpoints — What each configured engine can do."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from bentosearch.api.deps import get_registry
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.exceptions import EngineNotFoundError
from bentosearch.engines.base.registry import EngineRegistry

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class EngineInfo(BaseModel):
    """Capabilities of one configured engine."""

    id: str = Field(description="Engine id")
    engine_class: str = Field(description="Implementing class name")
    max_per_page: int | None = Field(default=None, description="Largest page size, None if unlimited")
    search_keys: list[str] = Field(description="Engine-specific search fields")
    semantic_search_keys: list[str] = Field(description="Supported semantic search fields")
    sort_keys: list[str] = Field(description="Supported sort keys")
    public_search_args: list[str] = Field(description="Arguments accepted from HTTP requests")

    @classmethod
    def from_engine(cls, engine: SearchEngine) -> EngineInfo:
        capabilities = engine.capabilities
        return cls(
            id=engine.engine_id,
            engine_class=type(engine).__name__,
            max_per_page=capabilities.max_per_page,
            search_keys=capabilities.search_keys,
            semantic_search_keys=capabilities.semantic_search_keys,
            sort_keys=capabilities.sort_keys,
            public_search_args=sorted(engine.public_settable_search_args),
        )


class EngineListResponse(BaseModel):
    """All configured engines."""

    engines: list[EngineInfo]


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/engines",
    response_model=EngineListResponse,
    summary="List Engines",
    description="List every registered engine with its search fields, semantic fields, and sort keys.",
)
async def list_engines(
    registry: EngineRegistry = Depends(get_registry),
) -> EngineListResponse:
    engines = registry.get_engines(registry.engine_ids)
    return EngineListResponse(engines=[EngineInfo.from_engine(engine) for engine in engines])


@router.get(
    "/engines/{engine_id}",
    response_model=EngineInfo,
    summary="Describe Engine",
    responses={404: {"description": "Unknown engine id"}},
)
async def describe_engine(
    engine_id: str,
    registry: EngineRegistry = Depends(get_registry),
) -> EngineInfo:
    try:
        engine = registry.get_engine(engine_id)
    except EngineNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return EngineInfo.from_engine(engine)
