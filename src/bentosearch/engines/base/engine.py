"""Base search engine — Abstract contract for all search source connectors.

An engine is responsible only for what is specific to its source:
  1. Receiving a normalized ``SearchRequest``
  2. Calling the external search service
  3. Translating the response into a ``ResultSet`` of ``Item`` objects

Argument normalization, timing, metadata stamping and containment of
transient failures are done by ``SearchExecutor``, which ``search()``
delegates to.

Implementing an engine::

    class MyEngine(SearchEngine):
        max_per_page = 50
        required_configuration = ("api_key",)
        search_field_definitions = {
            "TI": {"semantic": "title"},
            "AU": {"semantic": "author"},
        }
        sort_definitions = {"relevance": {}, "date_desc": {}}

        async def search_implementation(self, request: SearchRequest) -> ResultSet:
            ...

Engines may be shared by concurrent searches: keep configuration-specific
state on the instance if needed, but never search-specific state.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar
from xml.etree.ElementTree import ParseError

import httpx
from pydantic import ValidationError

from bentosearch.engines.base.capabilities import EngineCapabilities
from bentosearch.engines.base.configuration import EngineConfiguration
from bentosearch.engines.base.exceptions import ConfigurationError, UpstreamError
from bentosearch.models.request import PUBLIC_SETTABLE_SEARCH_ARGS

if TYPE_CHECKING:
    from bentosearch.models.request import SearchRequest
    from bentosearch.models.results import ResultSet

_NOT_FOUND = object()

# Exceptions from search_implementation that become failed results instead of
# propagating. Anything else is treated as a bug and raised.
DEFAULT_AUTO_RESCUE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    TimeoutError,
    httpx.TimeoutException,
    httpx.HTTPStatusError,
    httpx.DecodingError,
    json.JSONDecodeError,
    ParseError,
    UpstreamError,
)


class SearchEngine(ABC):
    """Abstract base class for search engines.

    Subclasses must implement ``search_implementation()`` and may declare:
      - ``max_per_page``: largest accepted page size (None = unbounded)
      - ``search_field_definitions``: supported search fields; a ``"semantic"``
        entry maps a semantic field name onto the field
      - ``sort_definitions``: supported sort keys
      - ``default_configuration``: defaults deep-merged under the instance config
      - ``required_configuration``: dotted keys that must be configured
      - ``auto_rescue_exceptions``: exceptions turned into failed results

    Args:
        configuration: Engine configuration. Standard keys are ``id``,
            ``for_display.decorator`` and ``unrecognized_search_field``.
        **kwargs: Extra configuration keys, merged over *configuration*.

    Raises:
        ConfigurationError: If a required configuration key is missing.
    """

    max_per_page: ClassVar[int | None] = None
    search_field_definitions: ClassVar[dict[str, dict[str, Any]]] = {}
    sort_definitions: ClassVar[dict[str, dict[str, Any]]] = {}
    semantic_search_map: ClassVar[dict[str, str] | None] = None

    default_configuration: ClassVar[dict[str, Any]] = {}
    required_configuration: ClassVar[tuple[str, ...]] = ()
    auto_rescue_exceptions: ClassVar[tuple[type[BaseException], ...]] = DEFAULT_AUTO_RESCUE_EXCEPTIONS

    def __init__(self, configuration: Mapping[str, Any] | EngineConfiguration | None = None, **kwargs: Any) -> None:
        try:
            config = EngineConfiguration.build(self.default_configuration, configuration, kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration for {type(self).__name__}: {e}") from e
        self._configuration = config

        for key in self.required_configuration:
            if config.lookup(key, _NOT_FOUND) in (_NOT_FOUND, None):
                raise ConfigurationError(f"{type(self).__name__} requires configuration key {key}")

    @property
    def configuration(self) -> EngineConfiguration:
        return self._configuration

    @property
    def engine_id(self) -> str:
        """Identity used to key results: configured id, else the class name."""
        return self.configuration.id or type(self).__name__

    @property
    def capabilities(self) -> EngineCapabilities:
        return EngineCapabilities.from_definitions(
            max_per_page=self.max_per_page,
            search_field_definitions=self.search_field_definitions,
            sort_definitions=self.sort_definitions,
            semantic_search_map=self.semantic_search_map,
        )

    @property
    def search_keys(self) -> list[str]:
        return self.capabilities.search_keys

    @property
    def semantic_search_keys(self) -> list[str]:
        return self.capabilities.semantic_search_keys

    @property
    def sort_keys(self) -> list[str]:
        return self.capabilities.sort_keys

    @property
    def public_settable_search_args(self) -> tuple[str, ...]:
        """Arguments that may come from untrusted input such as web requests.

        Engines with extra safe arguments may extend this; elevation flags
        like ``auth`` must never be added.
        """
        return PUBLIC_SETTABLE_SEARCH_ARGS

    @abstractmethod
    async def search_implementation(self, request: SearchRequest) -> ResultSet:
        """Run *request* against the external source.

        Args:
            request: Normalized search arguments.

        Returns:
            A ``ResultSet`` with ``items`` and ``total_items`` filled in, or
            with ``error`` set if the source reported a failure.
        """

    async def search(self, query_or_args: str | Mapping[str, Any] | None = None, /, **options: Any) -> ResultSet:
        """Search this engine.

        Accepts a query plus keyword options, or a single mapping::

            await engine.search("cancer", per_page=20, page=5)
            await engine.search({"query": "cancer", "start": 20})
            await engine.search("cancer", semantic_search_field="title")

        Never raises for invalid arguments or transient source failures;
        check ``failed()`` on the returned result set.
        """
        from bentosearch.core.executor import SearchExecutor

        return await SearchExecutor(self).execute(query_or_args, **options)

    @classmethod
    async def shutdown(cls) -> None:
        """Release class-level resources such as shared HTTP clients."""
