"""Search Executor — Wraps an engine's search with normalization and containment.

For every search the executor:
  1. Normalizes arguments (invalid arguments become a failed result)
  2. Awaits the engine's ``search_implementation``
  3. Turns the engine's declared transient exceptions into a failed result
  4. Stamps timing and engine metadata on the result set and its items

Exceptions outside the engine's ``auto_rescue_exceptions`` propagate
unchanged, so programming errors are not reported as failed searches.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from bentosearch.core.normalizer import normalize_search_arguments
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.exceptions import InvalidArgumentsError
from bentosearch.models.request import SearchRequest
from bentosearch.models.results import ErrorInfo, ErrorKind, ResultSet

logger = logging.getLogger(__name__)


class SearchExecutor:
    """Runs searches on one engine and returns normalized ``ResultSet`` objects.

    Attributes:
        engine: The wrapped search engine.
    """

    def __init__(self, engine: SearchEngine) -> None:
        self.engine = engine

    async def execute(self, query_or_args: str | Mapping[str, Any] | None = None, /, **options: Any) -> ResultSet:
        """Execute one search.

        Args:
            query_or_args: Query string, or a mapping of search arguments.
            **options: Further search arguments (page, per_page, sort, ...).

        Returns:
            A successful or failed ResultSet; contained failures never raise.
        """
        start_time = time.monotonic()
        engine = self.engine

        try:
            request = normalize_search_arguments(
                query_or_args,
                options,
                capabilities=engine.capabilities,
                configuration=engine.configuration,
            )
        except InvalidArgumentsError as e:
            logger.warning("Invalid search arguments for engine '%s': %s", engine.engine_id, e)
            failed = ResultSet.failure(ErrorInfo.from_exception(ErrorKind.INVALID_ARGUMENTS, e))
            self._fill_in_search_metadata(failed, None, start_time)
            return failed

        try:
            results = await engine.search_implementation(request)
        except engine.auto_rescue_exceptions as e:
            logger.error(
                "Search failed on engine '%s': %r",
                engine.engine_id,
                e,
                exc_info=True,
            )
            failed = ResultSet.failure(ErrorInfo.from_exception(ErrorKind.UPSTREAM_FAILURE, e))
            self._fill_in_search_metadata(failed, request, start_time)
            return failed

        if results.failed() and results.items:
            logger.warning("Engine '%s' returned items with a failed result; dropping them", engine.engine_id)
            results.items = []

        self._fill_in_search_metadata(results, request, start_time)
        self._stamp_items(results)

        logger.debug(
            "Search on engine '%s': query=%s, items=%d, total=%s, took=%dms",
            engine.engine_id,
            request.query,
            len(results.items),
            results.total_items,
            results.timing_ms,
        )
        return results

    def _fill_in_search_metadata(
        self,
        results: ResultSet,
        request: SearchRequest | None,
        start_time: float,
    ) -> None:
        """Stamp search metadata owned by the executor onto *results*."""
        configuration = self.engine.configuration
        results.search_args = request
        results.start = request.start if request else 0
        results.per_page = request.per_page if request else None
        results.engine_id = self.engine.engine_id
        results.display_configuration = configuration.for_display.to_dict()
        results.timing = time.monotonic() - start_time

    def _stamp_items(self, results: ResultSet) -> None:
        """Copy engine identity and display configuration onto every item."""
        display = self.engine.configuration.for_display
        for item in results.items:
            item.engine_id = results.engine_id
            item.decorator = display.decorator
            item.display_configuration = display.to_dict()
