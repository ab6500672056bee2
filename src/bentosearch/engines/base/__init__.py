"""Base engine interface — Contract, capabilities, configuration and registry for search engines."""

from bentosearch.engines.base.capabilities import EngineCapabilities
from bentosearch.engines.base.configuration import DisplayConfiguration, EngineConfiguration
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.registry import EngineRegistry

__all__ = ["DisplayConfiguration", "EngineCapabilities", "EngineConfiguration", "EngineRegistry", "SearchEngine"]
