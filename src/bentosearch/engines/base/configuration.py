"""Engine configuration — Frozen pydantic model for one engine instance.

Engine configuration is plain data (ids, api keys, display hints) shared by
every concurrent search on the engine, so it is frozen after construction.
Engine-specific keys are kept as extra fields.

Example:
    >>> config = EngineConfiguration.build({"id": "gbs", "for_display": {"decorator": "GbsDecorator"}})
    >>> config.for_display.decorator
    'GbsDecorator'
    >>> config.lookup("for_display.decorator")
    'GbsDecorator'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_MISSING = object()


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*.

    Nested mappings are merged key by key; any other value in *override*
    replaces the one in *base*.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _as_mapping(value: Mapping[str, Any] | BaseModel | None) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)
    return value


class DisplayConfiguration(BaseModel):
    """Display hints, opaque to the search core apart from ``decorator``."""

    model_config = ConfigDict(frozen=True, extra="allow")

    decorator: str | None = Field(default=None, description="Presentation adapter name")

    def to_dict(self) -> dict[str, Any]:
        """Fresh ``dict`` of the keys that were configured."""
        return self.model_dump(exclude_unset=True)


class EngineConfiguration(BaseModel):
    """Read-only configuration of one engine.

    Standard keys are typed fields; everything else an engine needs (api
    keys, endpoints, mock behaviour) is an extra field, reachable as an
    attribute, with ``get()`` or with a dotted ``lookup()``.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str | None = Field(default=None, description="Engine id, keys multi-search results")
    for_display: DisplayConfiguration = Field(default_factory=DisplayConfiguration)
    unrecognized_search_field: str | None = Field(
        default=None,
        description="'raise' to reject unknown search fields, default ignores them",
    )

    @classmethod
    def build(cls, *layers: Mapping[str, Any] | BaseModel | None) -> EngineConfiguration:
        """Deep-merge *layers* left to right and validate the result.

        Raises:
            pydantic.ValidationError: If a standard key has the wrong type.
        """
        data: dict[str, Any] = {}
        for layer in layers:
            data = deep_merge(data, _as_mapping(layer))
        return cls.model_validate(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Value of a standard or engine-specific key, *default* if absent."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key, default)

    def lookup(self, path: str, default: Any = None) -> Any:
        """Look up a dotted key path such as ``"for_display.decorator"``.

        Returns *default* when any segment of the path is missing.
        """
        node: Any = self
        for segment in path.split("."):
            if isinstance(node, BaseModel):
                if segment in type(node).model_fields:
                    node = getattr(node, segment)
                else:
                    node = (node.model_extra or {}).get(segment, _MISSING)
            elif isinstance(node, Mapping):
                node = node.get(segment, _MISSING)
            else:
                return default
            if node is _MISSING:
                return default
        return node

    def merged(self, *others: Mapping[str, Any] | BaseModel | None) -> EngineConfiguration:
        """Return a new configuration with *others* deep-merged over this one."""
        return type(self).build(self, *others)

    def to_dict(self) -> dict[str, Any]:
        """Plain ``dict`` of the configured keys."""
        return self.model_dump(exclude_unset=True)
