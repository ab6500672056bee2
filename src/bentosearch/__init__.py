"""bentosearch — Aggregate results from many external search engines into one model.

Quick start::

    from bentosearch import MockEngine, run_all

    engine = MockEngine({"id": "mock"})
    results = await engine.search("cancer", per_page=5)

    by_engine = await run_all([engine, other_engine], "cancer", page=2)
"""

__version__ = "0.1.0"

from bentosearch.core.executor import SearchExecutor
from bentosearch.core.multi_searcher import MultiSearcher, run_all
from bentosearch.core.normalizer import normalize_search_arguments
from bentosearch.engines.base import EngineCapabilities, EngineConfiguration, EngineRegistry, SearchEngine
from bentosearch.engines.mock.engine import MockEngine
from bentosearch.models.item import Author, Item, ItemFormat
from bentosearch.models.request import SearchRequest
from bentosearch.models.results import ErrorInfo, ErrorKind, ResultSet

__all__ = [
    "Author",
    "EngineCapabilities",
    "EngineConfiguration",
    "EngineRegistry",
    "ErrorInfo",
    "ErrorKind",
    "Item",
    "ItemFormat",
    "MockEngine",
    "MultiSearcher",
    "ResultSet",
    "SearchEngine",
    "SearchExecutor",
    "SearchRequest",
    "__version__",
    "normalize_search_arguments",
    "run_all",
]
