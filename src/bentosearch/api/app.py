"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bentosearch import __version__
from bentosearch.api.deps import set_registry
from bentosearch.api.v1.router import router as v1_router
from bentosearch.config.settings import Settings
from bentosearch.engines.base.registry import EngineRegistry
from bentosearch.observability.logging import setup_logging

# Environment variable naming a YAML config file, set by the CLI
CONFIG_ENV_VAR = "BENTOSEARCH_CONFIG"
DEFAULT_CONFIG_FILE = "bentosearch-config.yaml"

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Load settings from the YAML file named by the environment, if any."""
    yaml_path = Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)
    if yaml_path.exists():
        logger.info("Loading configuration from %s", yaml_path)
        return Settings.from_yaml(yaml_path)
    return Settings()


def create_app(settings: Settings | None = None, registry: EngineRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from YAML/environment.
        registry: Pre-built engine registry. If None, one is built from
            ``settings.engines`` at startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.observability)
        logger.info("Starting bentosearch v%s", __version__)

        engines = registry if registry is not None else EngineRegistry.from_settings(settings)
        set_registry(engines, settings)

        app.state.settings = settings
        app.state.registry = engines

        logger.info("bentosearch is ready with %d engines", len(engines))
        yield

        logger.info("Shutting down bentosearch...")
        await engines.shutdown_all()
        set_registry(None)
        logger.info("bentosearch shutdown complete")

    app = FastAPI(
        title="bentosearch",
        description=(
            "Uniform search over heterogeneous search engines, "
            "with concurrent multi-engine (bento-box) search."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
