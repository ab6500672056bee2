"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from bentosearch.config.settings import Settings
from bentosearch.engines.base.registry import EngineRegistry

# Set during application lifespan
_registry: EngineRegistry | None = None
_settings: Settings | None = None


def set_registry(registry: EngineRegistry | None, settings: Settings | None = None) -> None:
    """Set the engine registry (and settings) used by the endpoints."""
    global _registry, _settings
    _registry = registry
    _settings = settings


def get_registry() -> EngineRegistry:
    """Get the engine registry.

    Raises:
        RuntimeError: If the registry is not initialized.
    """
    if _registry is None:
        raise RuntimeError("Engine registry not initialized. Is the server running?")
    return _registry


def get_settings() -> Settings:
    """Get the application settings, defaults if none were set."""
    return _settings if _settings is not None else Settings(_env_file=None)  # type: ignore[call-arg]
