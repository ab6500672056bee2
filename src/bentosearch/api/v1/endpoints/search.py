"""Search endpoints — Single-engine and multi-engine search over HTTP.

Request parameters are untrusted: only whitelisted search arguments are
forwarded to engines, so elevation flags such as ``auth`` can never be set
from a request.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from bentosearch.api.deps import get_registry, get_settings
from bentosearch.config.settings import Settings
from bentosearch.core.multi_searcher import MultiSearcher
from bentosearch.engines.base.exceptions import EngineNotFoundError
from bentosearch.engines.base.registry import EngineRegistry
from bentosearch.models.item import Item
from bentosearch.models.request import PUBLIC_SETTABLE_SEARCH_ARGS, filter_public_search_args
from bentosearch.models.results import ErrorInfo, ResultSet

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / response models ────────────────────────────────────────────


class PaginationInfo(BaseModel):
    """Pager information for one result set."""

    current_page: int
    total_pages: int
    start_record: int
    end_record: int
    next_page: int | None = None
    prev_page: int | None = None


class SearchResultsResponse(BaseModel):
    """Results of one search on one engine."""

    engine_id: str | None = Field(description="Engine that produced the results")
    failed: bool = Field(description="True if the search failed; see error")
    error: ErrorInfo | None = Field(default=None, description="Failure description")
    total_items: int | None = Field(default=None, description="Total hits reported by the engine")
    start: int = Field(description="0-based offset of the first item")
    per_page: int | None = Field(default=None, description="Requested page size")
    timing_ms: int | None = Field(default=None, description="Search duration in ms")
    pagination: PaginationInfo | None = Field(default=None, description="Pager info, absent for failed searches")
    items: list[Item] = Field(default_factory=list, description="Hits in rank order")

    @classmethod
    def from_result_set(cls, results: ResultSet) -> SearchResultsResponse:
        pagination = None
        if not results.failed():
            pager = results.pagination
            pagination = PaginationInfo(
                current_page=pager.current_page,
                total_pages=pager.total_pages,
                start_record=pager.start_record,
                end_record=pager.end_record,
                next_page=pager.next_page,
                prev_page=pager.prev_page,
            )
        return cls(
            engine_id=results.engine_id,
            failed=results.failed(),
            error=results.error,
            total_items=results.total_items,
            start=results.start,
            per_page=results.per_page,
            timing_ms=results.timing_ms,
            pagination=pagination,
            items=results.items,
        )


class MultiSearchRequest(BaseModel):
    """Multi-engine search request. Unknown keys are ignored."""

    engines: list[str] | None = Field(default=None, description="Engine ids to search (None = configured default)")
    query: str = Field(default="", description="Query string")
    search_field: str | None = Field(default=None)
    semantic_search_field: str | None = Field(default=None)
    sort: str | None = Field(default=None)
    page: int | None = Field(default=None)
    start: int | None = Field(default=None)
    per_page: int | None = Field(default=None)


class MultiSearchResponse(BaseModel):
    """Results of a multi-engine search, keyed by engine id."""

    results: dict[str, SearchResultsResponse] = Field(description="Per-engine results")
    processing_time_ms: int = Field(description="Total wall-clock time in ms")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/engines/{engine_id}/search",
    response_model=SearchResultsResponse,
    summary="Search One Engine",
    description=(
        "Search a single configured engine. Accepted query parameters are the "
        "engine's public search arguments (query, search_field, "
        "semantic_search_field, sort, page, start, per_page, plus any the engine "
        "adds); everything else is ignored.\n\n"
        "A failed search still returns 200 with `failed: true` and an `error`."
    ),
    responses={404: {"description": "Unknown engine id"}},
)
async def engine_search(
    engine_id: str,
    request: Request,
    registry: EngineRegistry = Depends(get_registry),
) -> SearchResultsResponse:
    try:
        engine = registry.get_engine(engine_id)
    except EngineNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    args = filter_public_search_args(request.query_params, engine.public_settable_search_args)
    try:
        results = await engine.search(args)
    except Exception as e:
        logger.error("Search on engine '%s' raised: %s", engine_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Search processing failed: {e!s}") from e

    return SearchResultsResponse.from_result_set(results)


@router.post(
    "/search",
    response_model=MultiSearchResponse,
    summary="Search Several Engines",
    description=(
        "Search several engines concurrently with the same arguments. "
        "Each engine's failure is reported in its own entry and never "
        "affects the others."
    ),
    responses={404: {"description": "Unknown engine id"}},
)
async def multi_search(
    body: MultiSearchRequest,
    registry: EngineRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> MultiSearchResponse:
    start_time = time.monotonic()

    engine_ids = list(dict.fromkeys(body.engines or settings.search.default_engines or registry.engine_ids))
    try:
        searcher = MultiSearcher.from_registry(registry, *engine_ids)
    except EngineNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    args = filter_public_search_args(
        body.model_dump(exclude={"engines"}, exclude_none=True),
        PUBLIC_SETTABLE_SEARCH_ARGS,
    )
    searcher.start(args)
    results = await searcher.results()

    processing_time_ms = int((time.monotonic() - start_time) * 1000)
    logger.info("Multi-search over %d engines complete in %d ms", len(results), processing_time_ms)

    return MultiSearchResponse(
        results={key: SearchResultsResponse.from_result_set(value) for key, value in results.items()},
        processing_time_ms=processing_time_ms,
    )
