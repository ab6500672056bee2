"""API v1 Router — Search, engine listing, and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from bentosearch.api.v1.endpoints.engines import router as engines_router
from bentosearch.api.v1.endpoints.health import router as health_router
from bentosearch.api.v1.endpoints.search import router as search_router

router = APIRouter(tags=["v1"])
router.include_router(search_router)
router.include_router(engines_router)
router.include_router(health_router)
