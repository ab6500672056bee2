"""Search request models — The canonical shape every engine receives."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PER_PAGE = 10

# Arguments that may be taken from untrusted input (e.g. web request params).
# Elevation flags such as ``auth`` are deliberately absent.
PUBLIC_SETTABLE_SEARCH_ARGS: tuple[str, ...] = (
    "query",
    "search_field",
    "semantic_search_field",
    "sort",
    "page",
    "start",
    "per_page",
)


class SemanticSearchField(str, Enum):
    """Cross-engine field names an engine may map to one of its own fields."""

    TITLE = "title"
    AUTHOR = "author"
    SUBJECT = "subject"
    ISBN = "isbn"
    ISSN = "issn"
    DOI = "doi"
    PUBLICATION_TITLE = "publication_title"


class SearchRequest(BaseModel):
    """Normalized search arguments handed to ``search_implementation``.

    Built by :func:`bentosearch.core.normalizer.normalize_search_arguments`.
    ``page`` and ``start`` are always both present and consistent with
    ``per_page``. Keys the core does not interpret are kept in ``extra``.
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(default="", description="The query string")
    search_field: str | None = Field(default=None, description="Engine-specific search field key")
    semantic_search_field: str | None = Field(
        default=None,
        description="Semantic field name the caller asked for, if any",
    )
    sort: str | None = Field(default=None, description="Sort key")
    page: int = Field(default=1, ge=1, description="1-based page number")
    start: int = Field(default=0, ge=0, description="0-based record offset")
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1, description="Records per page")
    extra: dict[str, Any] = Field(default_factory=dict, description="Engine-specific passthrough arguments")

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a standard field or an engine-specific extra argument."""
        if key in type(self).model_fields:
            value = getattr(self, key)
            return default if value is None else value
        return self.extra.get(key, default)


def filter_public_search_args(
    params: Mapping[str, Any],
    allowed: Iterable[str] = PUBLIC_SETTABLE_SEARCH_ARGS,
) -> dict[str, Any]:
    """Keep only whitelisted keys from untrusted search parameters."""
    allowed_keys = set(allowed)
    return {key: value for key, value in params.items() if key in allowed_keys}
