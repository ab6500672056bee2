"""Multi Searcher — Run one search concurrently on several engines.

Usage::

    searcher = MultiSearcher(gbs_engine, scopus_engine)
    searcher.start("cancer", per_page=5)      # fan out, returns immediately
    by_engine = await searcher.results()       # fan in, {engine_id: ResultSet}

``results()`` can only be collected once per ``start()``; a second call
returns an empty dict. One engine failing never prevents collecting the
others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from bentosearch.engines.base.exceptions import ConfigurationError
from bentosearch.models.results import ErrorInfo, ErrorKind, ResultSet

if TYPE_CHECKING:
    from bentosearch.engines.base.engine import SearchEngine
    from bentosearch.engines.base.registry import EngineRegistry

logger = logging.getLogger(__name__)


class MultiSearcher:
    """Concurrently searches a fixed list of engines.

    Each ``start()`` spawns one asyncio task per engine. ``results()`` waits
    for all of them and returns a dict keyed by engine id (configured id,
    else engine class name). Every spawned task is finished or cancelled
    before ``results()`` returns or raises.

    Args:
        *engines: Engine instances to search.
    """

    def __init__(self, *engines: SearchEngine) -> None:
        self._engines: list[SearchEngine] = []
        self._tasks: list[tuple[SearchEngine, asyncio.Task[ResultSet]]] = []
        for engine in engines:
            self.add_engine(engine)

    @classmethod
    def from_registry(cls, registry: EngineRegistry, *engine_ids: str) -> MultiSearcher:
        """Build a searcher from engine ids registered in *registry*."""
        return cls(*(registry.get_engine(engine_id) for engine_id in engine_ids))

    def add_engine(self, engine: SearchEngine) -> None:
        """Add an engine instance to search.

        Raises:
            ConfigurationError: If another engine already uses the same engine id,
                since results are keyed by it.
        """
        if any(existing.engine_id == engine.engine_id for existing in self._engines):
            raise ConfigurationError(f"Engine id '{engine.engine_id}' is already part of this multi-search")
        self._engines.append(engine)

    @property
    def engines(self) -> list[SearchEngine]:
        return list(self._engines)

    def start(self, query_or_args: str | Mapping[str, Any] | None = None, /, **options: Any) -> None:
        """Start the search on every engine without waiting for any of them.

        Must be called from a running event loop. Arguments are the same as
        ``SearchEngine.search()``.
        """
        for engine in self._engines:
            task = asyncio.create_task(
                self._search_engine(engine, query_or_args, options),
                name=f"bentosearch:{engine.engine_id}",
            )
            self._tasks.append((engine, task))

    async def results(self) -> dict[str, ResultSet]:
        """Wait for every started search and return results keyed by engine id.

        Returns an empty dict if called again after results were collected.
        """
        tasks, self._tasks = self._tasks, []
        results: dict[str, ResultSet] = {}
        try:
            outcomes = await asyncio.gather(*(task for _, task in tasks), return_exceptions=True)
            for (engine, _), outcome in zip(tasks, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    outcome = self._contained_failure(engine, outcome)
                results[engine.engine_id] = outcome
        finally:
            await self._teardown(task for _, task in tasks)
        return results

    async def _search_engine(
        self,
        engine: SearchEngine,
        query_or_args: str | Mapping[str, Any] | None,
        options: Mapping[str, Any],
    ) -> ResultSet:
        try:
            return await engine.search(query_or_args, **options)
        except Exception as e:
            return self._contained_failure(engine, e)

    @staticmethod
    def _contained_failure(engine: SearchEngine, exc: BaseException) -> ResultSet:
        logger.error(
            "Uncontained error from engine '%s' in multi-search: %r",
            engine.engine_id,
            exc,
            exc_info=exc,
        )
        failed = ResultSet.failure(ErrorInfo.from_exception(ErrorKind.INTERNAL_ERROR, exc))
        failed.engine_id = engine.engine_id
        failed.display_configuration = engine.configuration.for_display.to_dict()
        return failed

    @staticmethod
    async def _teardown(tasks: Iterable[asyncio.Task[ResultSet]]) -> None:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def run_all(
    engines: Iterable[SearchEngine],
    query_or_args: str | Mapping[str, Any] | None = None,
    /,
    **options: Any,
) -> dict[str, ResultSet]:
    """Search every engine concurrently and return results keyed by engine id."""
    searcher = MultiSearcher(*engines)
    searcher.start(query_or_args, **options)
    return await searcher.results()
