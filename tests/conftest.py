"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any, ClassVar

import pytest

from bentosearch.config.settings import Settings
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.registry import EngineRegistry
from bentosearch.engines.mock.engine import MockEngine
from bentosearch.models.item import Item
from bentosearch.models.request import SearchRequest
from bentosearch.models.results import ResultSet


class RecordingEngine(SearchEngine):
    """Engine that records the requests it receives and echoes them as items."""

    max_per_page: ClassVar[int | None] = 50
    search_field_definitions: ClassVar[dict[str, dict[str, Any]]] = {
        "TI": {"semantic": "title"},
        "AU": {"semantic": "author"},
        "SU": {},
    }
    sort_definitions: ClassVar[dict[str, dict[str, Any]]] = {"relevance": {}, "date_desc": {}}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.requests: list[SearchRequest] = []

    async def search_implementation(self, request: SearchRequest) -> ResultSet:
        self.requests.append(request)
        return ResultSet(
            items=[Item(title=f"{request.query} ({request.search_field})")],
            total_items=1,
        )


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with a mock engine configured."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        engines={
            "mock": {
                "engine": "bentosearch.engines.mock.engine:MockEngine",
                "total_items": 25,
                "for_display": {"decorator": "MockDecorator"},
            },
        },
    )


@pytest.fixture
def mock_engine() -> MockEngine:
    """A mock engine reporting 25 total hits."""
    return MockEngine({"id": "mock", "total_items": 25, "for_display": {"decorator": "MockDecorator"}})


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine(id="recording")


@pytest.fixture
def registry() -> EngineRegistry:
    """Registry with two working mock engines and one failing engine."""
    reg = EngineRegistry()
    reg.register_engine("mock", MockEngine, {"total_items": 25, "for_display": {"decorator": "MockDecorator"}})
    reg.register_engine("small", MockEngine, total_items=3)
    reg.register_engine(
        "broken",
        MockEngine,
        error={"kind": "upstream_failure", "message": "Service unavailable", "status": 503},
    )
    return reg
