"""Result set models — The outcome of one search call on one engine.

A ``ResultSet`` is either successful (items plus metadata) or failed (an
``ErrorInfo`` and no items). ``failed()`` is the only reliable way to tell an
empty result from a failed search.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

from bentosearch.models.item import Item
from bentosearch.models.request import SearchRequest


class ErrorKind(str, Enum):
    """Why a search failed."""

    INVALID_ARGUMENTS = "invalid_arguments"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL_ERROR = "internal_error"


class ErrorInfo(BaseModel):
    """Description of a failed search."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: ErrorKind = Field(default=ErrorKind.UPSTREAM_FAILURE, description="Error category")
    message: str = Field(default="", description="Short error message")
    cause: str | None = Field(default=None, description="repr of the original exception")
    info: str | None = Field(default=None, description="Human readable detail from the source, when available")
    status: int | None = Field(default=None, description="Upstream status code, when known")
    exception: SkipJsonSchema[BaseException | None] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_exception(cls, kind: ErrorKind, exc: BaseException) -> ErrorInfo:
        """Build an ``ErrorInfo`` that keeps the original exception.

        Never raises: attributes of unexpected types are converted or dropped,
        since this runs while containing a failed search.
        """
        return cls(
            kind=kind,
            message=_safe_str(exc) or type(exc).__name__,
            cause=_safe_repr(exc),
            info=_info_text(getattr(exc, "info", None)),
            status=_status_code(exc),
            exception=exc,
        )


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return ""


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


def _info_text(info: Any) -> str | None:
    # urllib's HTTPError.info is a method, not detail text
    if info is None or callable(info):
        return None
    if isinstance(info, str):
        return info
    return _safe_str(info) or None


def _status_code(exc: BaseException) -> int | None:
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None) if response is not None else getattr(exc, "code", None)
    return status if isinstance(status, int) and not isinstance(status, bool) else None


class Pagination(BaseModel):
    """Page arithmetic for a result set, for building pagers."""

    current_page: int = Field(description="1-based current page")
    per_page: int = Field(description="Records per page")
    total_items: int = Field(description="Total hits reported by the engine")
    start_record: int = Field(description="1-based number of the first record on this page (0 when empty)")
    end_record: int = Field(description="1-based number of the last record on this page (0 when empty)")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.per_page) if self.per_page else 0

    @property
    def first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def last_page(self) -> bool:
        return self.current_page >= self.total_pages

    @property
    def next_page(self) -> int | None:
        return None if self.last_page else self.current_page + 1

    @property
    def prev_page(self) -> int | None:
        return None if self.first_page else self.current_page - 1


class ResultSet(BaseModel):
    """Ordered items from one engine plus search metadata.

    Item order is the rank order returned by the source. Iteration, ``len()``
    and indexing operate on ``items``.

    Engine implementations fill ``items``, ``total_items`` and, for failures
    they detect themselves, ``error``. The remaining metadata is stamped by
    the executor.
    """

    items: list[Item] = Field(default_factory=list, description="Hits, in source rank order")
    total_items: int | None = Field(default=None, ge=0, description="Total hits for the query, if known")
    error: ErrorInfo | None = Field(default=None, description="Set if and only if the search failed")
    timing: float | None = Field(default=None, description="Wall-clock duration of the search in seconds")
    start: int = Field(default=0, ge=0, description="0-based offset of the first item")
    per_page: int | None = Field(default=None, description="Requested page size")
    engine_id: str | None = Field(default=None, description="Identity of the engine that ran the search")
    display_configuration: dict[str, Any] = Field(default_factory=dict)
    search_args: SearchRequest | None = Field(default=None, description="Normalized arguments of the search")

    @classmethod
    def failure(cls, error: ErrorInfo) -> ResultSet:
        """A failed result set carrying *error*."""
        return cls(error=error)

    def failed(self) -> bool:
        return self.error is not None

    @property
    def timing_ms(self) -> int | None:
        return None if self.timing is None else int(self.timing * 1000)

    @property
    def pagination(self) -> Pagination:
        per_page = self.per_page or len(self.items) or 1
        total = self.total_items or 0
        count = len(self.items)
        return Pagination(
            current_page=self.start // per_page + 1,
            per_page=per_page,
            total_items=total,
            start_record=self.start + 1 if count else 0,
            end_record=self.start + count if count else 0,
        )

    def __iter__(self) -> Iterator[Item]:  # type: ignore[override]
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Item:
        return self.items[index]
