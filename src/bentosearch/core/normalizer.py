"""Argument normalizer — Turn flexible caller input into a ``SearchRequest``.

Callers may pass a query plus keyword options, or a single mapping (for
instance request parameters from a web form, where every value is a
string). The normalizer resolves both into the canonical request an engine
receives, or raises ``InvalidArgumentsError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bentosearch.engines.base.capabilities import EngineCapabilities, as_str
from bentosearch.engines.base.configuration import EngineConfiguration
from bentosearch.engines.base.exceptions import InvalidArgumentsError
from bentosearch.models.request import DEFAULT_PER_PAGE, SearchRequest

logger = logging.getLogger(__name__)

RAISE = "raise"
IGNORE = "ignore"

_STANDARD_KEYS = frozenset(
    {
        "query",
        "search_field",
        "semantic_search_field",
        "sort",
        "page",
        "start",
        "per_page",
        "unrecognized_search_field",
    }
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_int(key: str, value: Any) -> int | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise InvalidArgumentsError(f"'{key}' must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentsError(f"'{key}' must be an integer, got {value!r}")
        return int(value)
    try:
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentsError(f"'{key}' must be an integer, got {value!r}") from e


def _unrecognized_policy(
    arguments: Mapping[str, Any],
    configuration: Mapping[str, Any] | EngineConfiguration | None,
) -> str:
    """Resolve the unrecognized-search-field policy.

    A value supplied with the search wins over engine configuration.
    """
    value = arguments.get("unrecognized_search_field")
    if _is_blank(value) and configuration is not None:
        value = configuration.get("unrecognized_search_field")
    return IGNORE if _is_blank(value) else as_str(value)


def normalize_search_arguments(
    query_or_args: str | Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
    *,
    capabilities: EngineCapabilities | None = None,
    configuration: Mapping[str, Any] | EngineConfiguration | None = None,
) -> SearchRequest:
    """Normalize search arguments for one engine.

    Args:
        query_or_args: The query, or a mapping of arguments including ``query``.
        options: Further arguments; override keys in a *query_or_args* mapping.
        capabilities: The engine's capabilities (max page size, search fields).
        configuration: The engine's configuration, read for
            ``unrecognized_search_field``.

    Returns:
        A ``SearchRequest`` with ``page``, ``start`` and ``per_page`` all set.

    Raises:
        InvalidArgumentsError: On conflicting or out-of-range pagination, or an
            unknown search field under the ``"raise"`` policy.
    """
    capabilities = capabilities or EngineCapabilities()

    arguments: dict[str, Any] = {}
    if isinstance(query_or_args, Mapping):
        arguments.update(query_or_args)
    elif query_or_args is not None:
        arguments["query"] = query_or_args
    if options:
        arguments.update(options)

    page = _as_int("page", arguments.get("page"))
    start = _as_int("start", arguments.get("start"))
    per_page = _as_int("per_page", arguments.get("per_page"))
    if per_page is None:
        per_page = DEFAULT_PER_PAGE

    if page is not None and start is not None:
        raise InvalidArgumentsError("Can't supply both 'page' and 'start'")
    if per_page < 1:
        raise InvalidArgumentsError(f"'per_page' must be positive, got {per_page}")
    if capabilities.max_per_page is not None and per_page > capabilities.max_per_page:
        raise InvalidArgumentsError(
            f"{per_page} is more than maximum 'per_page' of {capabilities.max_per_page}"
        )
    if page is not None and page < 1:
        raise InvalidArgumentsError(f"'page' must be 1 or more, got {page}")
    if start is not None and start < 0:
        raise InvalidArgumentsError(f"'start' must not be negative, got {start}")

    if page is not None:
        start = (page - 1) * per_page
    elif start is not None:
        page = start // per_page + 1
    else:
        page, start = 1, 0

    sort = arguments.get("sort")
    sort = None if _is_blank(sort) else as_str(sort)

    policy = _unrecognized_policy(arguments, configuration)

    search_field = arguments.get("search_field")
    search_field = None if _is_blank(search_field) else as_str(search_field)

    semantic = arguments.get("semantic_search_field")
    semantic = None if _is_blank(semantic) else as_str(semantic)
    if semantic is not None:
        mapped = capabilities.semantic_search_map.get(semantic)
        if mapped is None:
            if policy == RAISE:
                raise InvalidArgumentsError(f"Engine does not know about semantic_search_field '{semantic}'")
            logger.debug("Ignoring unmapped semantic_search_field '%s'", semantic)
        search_field = mapped

    if search_field is not None and search_field not in capabilities.search_field_definitions and policy == RAISE:
        raise InvalidArgumentsError(f"Engine does not know about search_field '{search_field}'")

    query = arguments.get("query")
    return SearchRequest(
        query="" if query is None else str(query),
        search_field=search_field,
        semantic_search_field=semantic,
        sort=sort,
        page=page,
        start=start,
        per_page=per_page,
        extra={key: value for key, value in arguments.items() if key not in _STANDARD_KEYS},
    )
