"""Tests for the engine registry and engine capabilities."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from bentosearch.config.settings import Settings
from bentosearch.engines.base.capabilities import EngineCapabilities
from bentosearch.engines.base.exceptions import ConfigurationError, EngineNotFoundError
from bentosearch.engines.base.registry import EngineRegistry, import_engine_class
from bentosearch.engines.mock.engine import MockEngine
from bentosearch.models.request import SemanticSearchField


class TestEngineRegistry:
    def test_register_and_get(self) -> None:
        registry = EngineRegistry()
        registry.register_engine("mock", MockEngine, {"for_display": {"decorator": "Plain"}})

        engine = registry.get_engine("mock")
        assert isinstance(engine, MockEngine)
        assert engine.engine_id == "mock"
        assert engine.configuration.for_display.decorator == "Plain"
        assert "mock" in registry
        assert len(registry) == 1

    def test_get_returns_fresh_instances(self) -> None:
        registry = EngineRegistry()
        registry.register_engine("mock", MockEngine)
        assert registry.get_engine("mock") is not registry.get_engine("mock")

    def test_unknown_engine(self, registry: EngineRegistry) -> None:
        with pytest.raises(EngineNotFoundError, match="nope") as exc_info:
            registry.get_engine("nope")
        assert "mock" in str(exc_info.value)

    def test_unknown_engine_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            EngineRegistry().get_engine("nope")

    def test_overwrite_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = EngineRegistry()
        registry.register_engine("mock", MockEngine, total_items=1)
        registry.register_engine("mock", MockEngine, total_items=2)
        assert "Overwriting" in caplog.text
        assert registry.get_engine("mock").configuration.total_items == 2

    def test_registration_validates_configuration(self) -> None:
        class NeedsKey(MockEngine):
            required_configuration = ("api_key",)

        registry = EngineRegistry()
        with pytest.raises(ConfigurationError, match="api_key"):
            registry.register_engine("needs_key", NeedsKey)
        assert "needs_key" not in registry

    def test_get_engines(self, registry: EngineRegistry) -> None:
        engines = registry.get_engines(["small", "mock"])
        assert [engine.engine_id for engine in engines] == ["small", "mock"]

    @pytest.mark.asyncio
    async def test_shutdown_all_once_per_class(self, registry: EngineRegistry) -> None:
        with patch.object(MockEngine, "shutdown", new_callable=AsyncMock) as shutdown:
            await registry.shutdown_all()
        shutdown.assert_awaited_once()

    def test_from_settings(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            engines={
                "one": {"engine": "bentosearch.engines.mock.engine:MockEngine", "total_items": 7},
                "two": {"engine": "bentosearch.engines.mock.engine.MockEngine", "enabled": False},
            },
        )
        registry = EngineRegistry.from_settings(settings)
        assert registry.engine_ids == ["one"]
        assert registry.get_engine("one").configuration.total_items == 7


class TestImportEngineClass:
    def test_colon_and_dot_paths(self) -> None:
        assert import_engine_class("bentosearch.engines.mock.engine:MockEngine") is MockEngine
        assert import_engine_class("bentosearch.engines.mock.engine.MockEngine") is MockEngine

    @pytest.mark.parametrize(
        "path",
        [
            "bentosearch.engines.nowhere:Engine",
            "bentosearch.engines.mock.engine:Missing",
            "bentosearch.models.item:Item",
            "MockEngine",
        ],
    )
    def test_bad_paths(self, path: str) -> None:
        with pytest.raises(ConfigurationError):
            import_engine_class(path)


class TestEngineCapabilities:
    def test_semantic_map_derived_from_definitions(self) -> None:
        capabilities = MockEngine().capabilities
        assert capabilities.semantic_search_map == {"title": "title", "author": "author", "subject": "subject"}
        assert capabilities.search_keys == ["title", "author", "subject", "keyword"]
        assert capabilities.sort_keys == ["relevance", "date_desc", "title_asc"]
        assert capabilities.max_per_page == 100

    def test_enum_semantic_values_become_strings(self) -> None:
        capabilities = EngineCapabilities.from_definitions(
            search_field_definitions={"TI": {"semantic": SemanticSearchField.TITLE}},
        )
        assert capabilities.semantic_search_keys == ["title"]

    def test_explicit_semantic_map(self) -> None:
        capabilities = EngineCapabilities.from_definitions(
            search_field_definitions={"TI": {"semantic": "title"}},
            semantic_search_map={"publication_title": "TI"},
        )
        assert capabilities.semantic_search_map == {"publication_title": "TI"}

    def test_max_per_page_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            EngineCapabilities(max_per_page=0)
