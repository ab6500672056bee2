"""Mock engine — A fake search engine with configurable behavior.

Returns generated items without contacting any service. Useful in tests and
while developing a front end before real engines are configured.

Configuration keys:
  - ``total_items``: reported total hit count (default 1000)
  - ``num_results``: items to return per search (default: the request's per_page,
    capped by what remains of ``total_items``)
  - ``error``: mapping of ErrorInfo fields; when set, every search fails with it
  - ``raise_exception``: exception instance or class raised from every search
  - ``delay``: seconds to sleep before answering
  - ``format``: format of generated items (default ``"Article"``)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar

from bentosearch.engines.base.engine import SearchEngine
from bentosearch.models.item import Author, Item, ItemFormat
from bentosearch.models.request import SearchRequest, SemanticSearchField
from bentosearch.models.results import ErrorInfo, ResultSet

logger = logging.getLogger(__name__)


class MockEngine(SearchEngine):
    """Search engine returning generated items ``Item #1``, ``Item #2``, ...

    Item numbers follow the requested offset, so page 2 at five per page
    yields ``Item #6`` to ``Item #10``.
    """

    max_per_page: ClassVar[int | None] = 100
    search_field_definitions: ClassVar[dict[str, dict[str, Any]]] = {
        "title": {"semantic": SemanticSearchField.TITLE},
        "author": {"semantic": SemanticSearchField.AUTHOR},
        "subject": {"semantic": SemanticSearchField.SUBJECT},
        "keyword": {},
    }
    sort_definitions: ClassVar[dict[str, dict[str, Any]]] = {
        "relevance": {},
        "date_desc": {},
        "title_asc": {},
    }
    default_configuration: ClassVar[dict[str, Any]] = {
        "total_items": 1000,
        "format": ItemFormat.ARTICLE.value,
    }

    async def search_implementation(self, request: SearchRequest) -> ResultSet:
        config = self.configuration

        delay = config.get("delay")
        if delay:
            await asyncio.sleep(float(delay))

        to_raise = config.get("raise_exception")
        if to_raise is not None:
            raise to_raise

        error = config.get("error")
        if error is not None:
            return ResultSet.failure(ErrorInfo(**dict(error)))

        total = int(config.get("total_items", 0))
        remaining = max(total - request.start, 0)
        count = min(int(config.get("num_results") or request.per_page), remaining)

        items = [self._build_item(request, request.start + i + 1) for i in range(count)]
        logger.debug("Mock search '%s' generated %d items", request.query, len(items))
        return ResultSet(items=items, total_items=total)

    def _build_item(self, request: SearchRequest, number: int) -> Item:
        return Item(
            title=f"Item #{number}",
            subtitle=f"Result for {request.query}" if request.query else None,
            link=f"https://example.org/items/{number}",
            format=self.configuration.get("format"),
            authors=[Author(first="Jane", last="Doe")],
            year=2000 + number % 25,
            journal_title="Journal of Mock Results",
            unique_id=str(number),
            custom_data={"search_field": request.search_field, "sort": request.sort},
        )
