"""Tests for the search and engine listing endpoints."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from bentosearch.api.app import create_app
from bentosearch.api.deps import set_registry
from bentosearch.config.settings import Settings
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.registry import EngineRegistry
from bentosearch.engines.mock.engine import MockEngine
from bentosearch.models.item import Item
from bentosearch.models.request import SearchRequest
from bentosearch.models.results import ResultSet


class EchoEngine(SearchEngine):
    """Echoes the arguments it receives."""

    async def search_implementation(self, request: SearchRequest) -> ResultSet:
        item = Item(title=request.query, custom_data={"extra": request.extra, "per_page": request.per_page})
        return ResultSet(items=[item], total_items=1)


@pytest.fixture
def client(settings: Settings, registry: EngineRegistry) -> Iterator[TestClient]:
    app = create_app(settings)
    set_registry(registry, settings)
    yield TestClient(app)
    set_registry(None)


# ══════════════════════════════════════════════════════════════════════════════
# GET /v1/engines
# ══════════════════════════════════════════════════════════════════════════════


class TestEngineEndpoints:
    def test_list_engines(self, client: TestClient) -> None:
        response = client.get("/v1/engines")
        assert response.status_code == 200
        engines = response.json()["engines"]
        assert [engine["id"] for engine in engines] == ["mock", "small", "broken"]
        mock = engines[0]
        assert mock["engine_class"] == "MockEngine"
        assert mock["max_per_page"] == 100
        assert mock["semantic_search_keys"] == ["title", "author", "subject"]
        assert mock["sort_keys"] == ["relevance", "date_desc", "title_asc"]
        assert "auth" not in mock["public_search_args"]

    def test_describe_engine(self, client: TestClient) -> None:
        response = client.get("/v1/engines/small")
        assert response.status_code == 200
        assert response.json()["id"] == "small"

    def test_describe_unknown_engine(self, client: TestClient) -> None:
        assert client.get("/v1/engines/nope").status_code == 404


# ══════════════════════════════════════════════════════════════════════════════
# GET /v1/engines/{engine_id}/search
# ══════════════════════════════════════════════════════════════════════════════


class TestEngineSearch:
    def test_search(self, client: TestClient) -> None:
        response = client.get("/v1/engines/mock/search", params={"query": "cancer", "page": "2", "per_page": "5"})
        assert response.status_code == 200
        data = response.json()
        assert data["failed"] is False
        assert data["engine_id"] == "mock"
        assert data["total_items"] == 25
        assert data["start"] == 5
        assert data["pagination"]["current_page"] == 2
        assert data["pagination"]["total_pages"] == 5
        assert [item["title"] for item in data["items"]] == [f"Item #{n}" for n in range(6, 11)]
        assert data["items"][0]["decorator"] == "MockDecorator"

    def test_unknown_engine(self, client: TestClient) -> None:
        response = client.get("/v1/engines/nope/search", params={"query": "q"})
        assert response.status_code == 404
        assert "nope" in response.json()["detail"]

    def test_invalid_arguments_reported_as_failed(self, client: TestClient) -> None:
        response = client.get("/v1/engines/mock/search", params={"query": "q", "page": "1", "start": "0"})
        assert response.status_code == 200
        data = response.json()
        assert data["failed"] is True
        assert data["error"]["kind"] == "invalid_arguments"
        assert data["pagination"] is None
        assert data["items"] == []

    def test_upstream_failure_reported_as_failed(self, client: TestClient) -> None:
        data = client.get("/v1/engines/broken/search", params={"query": "q"}).json()
        assert data["failed"] is True
        assert data["error"]["kind"] == "upstream_failure"
        assert data["error"]["status"] == 503
        assert "exception" not in data["error"]

    def test_engine_bug_returns_500(self, settings: Settings) -> None:
        registry = EngineRegistry()
        registry.register_engine("buggy", MockEngine, raise_exception=RuntimeError("bug"))
        set_registry(registry, settings)
        try:
            response = TestClient(create_app(settings)).get("/v1/engines/buggy/search", params={"query": "q"})
        finally:
            set_registry(None)
        assert response.status_code == 500
        assert "bug" in response.json()["detail"]

    def test_untrusted_parameters_dropped(self, settings: Settings) -> None:
        registry = EngineRegistry()
        registry.register_engine("echo", EchoEngine)
        set_registry(registry, settings)
        try:
            response = TestClient(create_app(settings)).get(
                "/v1/engines/echo/search",
                params={"query": "q", "auth": "true", "collection": "x", "per_page": "3"},
            )
        finally:
            set_registry(None)
        assert response.status_code == 200
        item = response.json()["items"][0]
        assert item["title"] == "q"
        assert item["custom_data"] == {"extra": {}, "per_page": 3}


# ══════════════════════════════════════════════════════════════════════════════
# POST /v1/search
# ══════════════════════════════════════════════════════════════════════════════


class TestMultiSearch:
    def test_multi_search(self, client: TestClient) -> None:
        response = client.post("/v1/search", json={"engines": ["mock", "small", "broken"], "query": "cancer"})
        assert response.status_code == 200
        results = response.json()["results"]
        assert set(results) == {"mock", "small", "broken"}
        assert len(results["mock"]["items"]) == 10
        assert len(results["small"]["items"]) == 3
        assert results["broken"]["failed"] is True
        assert [key for key, value in results.items() if value["failed"]] == ["broken"]

    def test_defaults_to_all_engines(self, client: TestClient) -> None:
        results = client.post("/v1/search", json={"query": "cancer", "per_page": 2}).json()["results"]
        assert set(results) == {"mock", "small", "broken"}
        assert len(results["mock"]["items"]) == 2

    def test_defaults_to_configured_engines(self, settings: Settings, registry: EngineRegistry) -> None:
        settings.search.default_engines = ["small"]
        set_registry(registry, settings)
        try:
            results = TestClient(create_app(settings)).post("/v1/search", json={"query": "q"}).json()["results"]
        finally:
            set_registry(None)
        assert list(results) == ["small"]

    def test_repeated_engine_ids_searched_once(self, client: TestClient) -> None:
        results = client.post("/v1/search", json={"engines": ["small", "small"], "query": "q"}).json()["results"]
        assert list(results) == ["small"]

    def test_unknown_engine(self, client: TestClient) -> None:
        response = client.post("/v1/search", json={"engines": ["mock", "nope"], "query": "q"})
        assert response.status_code == 404

    def test_untrusted_fields_ignored(self, client: TestClient) -> None:
        response = client.post(
            "/v1/search",
            json={"engines": ["mock"], "query": "q", "auth": True, "error": {"message": "injected"}},
        )
        assert response.status_code == 200
        assert response.json()["results"]["mock"]["failed"] is False
