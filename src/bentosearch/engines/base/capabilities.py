"""Engine capabilities — Static description of what an engine type supports."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def as_str(value: Any) -> str:
    """String form of a key; enum members give their value."""
    return value.value if isinstance(value, Enum) else str(value)


class EngineCapabilities(BaseModel):
    """Search fields, semantic field mappings, sort keys and page size limit.

    Declared once per engine type and read by the normalizer; never changed
    while searches run.
    """

    model_config = ConfigDict(frozen=True)

    max_per_page: int | None = Field(default=None, gt=0, description="Largest allowed per_page, None = unbounded")
    search_field_definitions: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Engine search field keys to descriptive metadata",
    )
    semantic_search_map: dict[str, str] = Field(
        default_factory=dict,
        description="Semantic field name to engine search field key",
    )
    sort_definitions: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Supported sort keys, in display order",
    )

    @classmethod
    def from_definitions(
        cls,
        max_per_page: int | None = None,
        search_field_definitions: dict[str, dict[str, Any]] | None = None,
        sort_definitions: dict[str, dict[str, Any]] | None = None,
        semantic_search_map: dict[str, str] | None = None,
    ) -> EngineCapabilities:
        """Build capabilities, deriving the semantic map from field definitions.

        A search field definition with a ``"semantic"`` entry maps that
        semantic name to the field's key, unless *semantic_search_map* is
        given explicitly.
        """
        fields = dict(search_field_definitions or {})
        if semantic_search_map is None:
            semantic_search_map = {
                as_str(definition["semantic"]): key
                for key, definition in fields.items()
                if definition.get("semantic")
            }
        return cls(
            max_per_page=max_per_page,
            search_field_definitions=fields,
            semantic_search_map=dict(semantic_search_map),
            sort_definitions=dict(sort_definitions or {}),
        )

    @property
    def search_keys(self) -> list[str]:
        return list(self.search_field_definitions)

    @property
    def semantic_search_keys(self) -> list[str]:
        return list(self.semantic_search_map)

    @property
    def sort_keys(self) -> list[str]:
        return list(self.sort_definitions)
