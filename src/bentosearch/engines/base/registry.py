"""Engine Registry — Named engine configurations resolved to engine instances.

The registry is an explicit object, built at startup and passed to whatever
needs to look engines up by id (the API layer, ``MultiSearcher``).

Example:
    >>> registry = EngineRegistry()
    >>> registry.register_engine("mock", MockEngine, {"for_display": {"decorator": "Plain"}})
    >>> engine = registry.get_engine("mock")
    >>> engine.configuration.id
    'mock'
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bentosearch.engines.base.configuration import EngineConfiguration
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.exceptions import ConfigurationError, EngineNotFoundError

if TYPE_CHECKING:
    from bentosearch.config.settings import Settings

logger = logging.getLogger(__name__)


def import_engine_class(path: str) -> type[SearchEngine]:
    """Import an engine class from ``package.module:Class`` or ``package.module.Class``.

    Raises:
        ConfigurationError: If the path cannot be imported or is not a SearchEngine.
    """
    module_path, sep, class_name = path.partition(":")
    if not sep:
        module_path, _, class_name = path.rpartition(".")
    if not module_path or not class_name:
        raise ConfigurationError(f"Invalid engine class path '{path}'")

    try:
        module = importlib.import_module(module_path)
        engine_class = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot import engine class '{path}': {e}") from e

    if not (isinstance(engine_class, type) and issubclass(engine_class, SearchEngine)):
        raise ConfigurationError(f"'{path}' is not a SearchEngine subclass")
    return engine_class


class EngineRegistry:
    """Registry of configured search engines, keyed by engine id.

    Each registration stores an engine class together with its
    configuration. ``get_engine()`` builds a fresh instance from them.
    Configuration is validated at registration time, so a missing required
    key fails at startup rather than on the first search.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, tuple[type[SearchEngine], EngineConfiguration]] = {}

    def register_engine(
        self,
        engine_id: str,
        engine_class: type[SearchEngine],
        configuration: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Register an engine class with configuration under *engine_id*.

        Args:
            engine_id: Unique id; becomes the engine's ``configuration.id``.
            engine_class: The SearchEngine subclass.
            configuration: Engine configuration.
            **kwargs: Extra configuration keys.

        Raises:
            ConfigurationError: If the configuration is invalid for the engine.
        """
        config = engine_class(configuration, **{**kwargs, "id": engine_id}).configuration

        if engine_id in self._registrations:
            logger.warning("Overwriting existing engine registration: %s", engine_id)
        self._registrations[engine_id] = (engine_class, config)
        logger.info("Registered engine: %s (%s)", engine_id, engine_class.__name__)

    def get_engine(self, engine_id: str) -> SearchEngine:
        """Build an engine instance for a registered id.

        Raises:
            EngineNotFoundError: If no engine is registered under this id.
        """
        try:
            engine_class, config = self._registrations[engine_id]
        except KeyError:
            raise EngineNotFoundError(
                f"No engine registered with id '{engine_id}'. Available engines: {self.engine_ids}"
            ) from None
        return engine_class(config)

    def get_engines(self, engine_ids: list[str]) -> list[SearchEngine]:
        return [self.get_engine(engine_id) for engine_id in engine_ids]

    @property
    def engine_ids(self) -> list[str]:
        return list(self._registrations)

    def __contains__(self, engine_id: object) -> bool:
        return engine_id in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    async def shutdown_all(self) -> None:
        """Release shared resources of every registered engine class."""
        seen: set[type[SearchEngine]] = set()
        for engine_id, (engine_class, _) in self._registrations.items():
            if engine_class in seen:
                continue
            seen.add(engine_class)
            try:
                await engine_class.shutdown()
            except Exception:
                logger.warning("Error shutting down engine class for '%s'", engine_id, exc_info=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> EngineRegistry:
        """Build a registry from the ``engines`` section of the settings.

        Raises:
            ConfigurationError: If an engine class cannot be imported or configured.
        """
        registry = cls()
        for engine_id, engine_settings in settings.engines.items():
            if not engine_settings.enabled:
                logger.info("Engine '%s' is disabled, skipping", engine_id)
                continue
            engine_class = import_engine_class(engine_settings.engine)
            registry.register_engine(engine_id, engine_class, engine_settings.engine_configuration())
        return registry
