"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (when loaded with ``Settings.from_yaml``)
  2. Environment variables (BENTOSEARCH_ prefix)
  3. Default values

Example YAML::

    search:
      default_engines: [gbs, mock]
    engines:
      gbs:
        engine: mypackage.engines:GoogleBooksEngine
        api_key: "..."
        for_display:
          decorator: GbsDecorator
      mock:
        engine: bentosearch.engines.mock.engine:MockEngine
        total_items: 20
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class EngineSettings(BaseModel):
    """Configuration for a single search engine.

    Keys other than those declared here are engine-specific and passed to
    the engine as configuration.
    """

    model_config = ConfigDict(extra="allow")

    engine: str = Field(description="Engine class path, 'package.module:Class' or 'package.module.Class'")
    enabled: bool = Field(default=True, description="Whether this engine is registered")
    for_display: dict[str, Any] = Field(default_factory=dict, description="Display configuration, e.g. decorator")
    unrecognized_search_field: str | None = Field(
        default=None,
        description="'raise' to reject unknown search fields, default ignores them",
    )

    @field_validator("unrecognized_search_field")
    @classmethod
    def _check_policy(cls, v: str | None) -> str | None:
        if v is not None and v not in {"raise", "ignore"}:
            raise ValueError("unrecognized_search_field must be 'raise' or 'ignore'")
        return v

    def engine_configuration(self) -> dict[str, Any]:
        """Configuration mapping handed to the engine constructor."""
        return self.model_dump(exclude={"engine", "enabled"}, exclude_none=True)


class SearchSettings(BaseModel):
    """Search behavior configuration."""

    default_engines: list[str] = Field(
        default_factory=list,
        description="Engines searched by multi-search requests that name none (empty = all)",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the BENTOSEARCH_
    prefix. Nested settings use double underscores: BENTOSEARCH_SERVER__PORT=9090
    """

    model_config = {
        "env_prefix": "BENTOSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="bentosearch", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    engines: dict[str, EngineSettings] = Field(default_factory=dict, description="Engine configurations by id")
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file take precedence over environment variables.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
