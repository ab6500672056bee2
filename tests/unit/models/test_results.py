"""Tests for ResultSet, ErrorInfo and pagination."""

from __future__ import annotations

import urllib.error
from email.message import Message

import pytest

from bentosearch.engines.base.exceptions import UpstreamError
from bentosearch.models.item import Item
from bentosearch.models.results import ErrorInfo, ErrorKind, ResultSet


def _items(count: int) -> list[Item]:
    return [Item(title=f"Item #{n}") for n in range(1, count + 1)]


class TestResultSet:
    def test_empty_is_not_failed(self) -> None:
        results = ResultSet(total_items=0)
        assert not results.failed()
        assert len(results) == 0

    def test_failure(self) -> None:
        results = ResultSet.failure(ErrorInfo(message="down"))
        assert results.failed()
        assert results.error.kind == ErrorKind.UPSTREAM_FAILURE
        assert results.items == []

    def test_sequence_behavior(self) -> None:
        results = ResultSet(items=_items(3), total_items=3)
        assert len(results) == 3
        assert results[1].title == "Item #2"
        assert [item.title for item in results] == ["Item #1", "Item #2", "Item #3"]

    def test_timing_ms(self) -> None:
        assert ResultSet(timing=0.25).timing_ms == 250
        assert ResultSet().timing_ms is None

    def test_negative_total_rejected(self) -> None:
        with pytest.raises(ValueError):
            ResultSet(total_items=-1)


class TestPagination:
    def test_middle_page(self) -> None:
        pager = ResultSet(items=_items(10), total_items=95, start=20, per_page=10).pagination
        assert pager.current_page == 3
        assert pager.total_pages == 10
        assert pager.start_record == 21
        assert pager.end_record == 30
        assert pager.prev_page == 2
        assert pager.next_page == 4

    def test_last_partial_page(self) -> None:
        pager = ResultSet(items=_items(5), total_items=95, start=90, per_page=10).pagination
        assert pager.current_page == 10
        assert pager.last_page
        assert pager.next_page is None
        assert pager.end_record == 95

    def test_first_page(self) -> None:
        pager = ResultSet(items=_items(10), total_items=95, per_page=10).pagination
        assert pager.first_page
        assert pager.prev_page is None

    def test_empty_results(self) -> None:
        pager = ResultSet(total_items=0, per_page=10).pagination
        assert pager.start_record == 0
        assert pager.end_record == 0
        assert pager.total_pages == 0


class TestErrorInfo:
    def test_from_exception(self) -> None:
        exc = UpstreamError("Bad gateway", info="Try again later")
        error = ErrorInfo.from_exception(ErrorKind.UPSTREAM_FAILURE, exc)
        assert error.message == "Bad gateway"
        assert error.info == "Try again later"
        assert error.cause == repr(exc)
        assert error.exception is exc

    def test_message_falls_back_to_type_name(self) -> None:
        error = ErrorInfo.from_exception(ErrorKind.UPSTREAM_FAILURE, TimeoutError())
        assert error.message == "TimeoutError"

    def test_exception_not_serialized(self) -> None:
        error = ErrorInfo.from_exception(ErrorKind.INTERNAL_ERROR, RuntimeError("boom"))
        data = error.model_dump(mode="json")
        assert "exception" not in data
        assert data["kind"] == "internal_error"

    def test_non_string_info_is_stringified(self) -> None:
        error = ErrorInfo.from_exception(ErrorKind.UPSTREAM_FAILURE, UpstreamError("bad", info={"code": 42}))
        assert error.info == "{'code': 42}"

    def test_http_error_from_urllib(self) -> None:
        exc = urllib.error.HTTPError("https://api.example.org", 503, "Service Unavailable", Message(), None)
        error = ErrorInfo.from_exception(ErrorKind.UPSTREAM_FAILURE, exc)
        assert error.info is None
        assert error.status == 503
        assert error.message == "HTTP Error 503: Service Unavailable"

    def test_non_integer_status_dropped(self) -> None:
        exc = RuntimeError("odd")
        exc.code = "E42"  # type: ignore[attr-defined]
        assert ErrorInfo.from_exception(ErrorKind.INTERNAL_ERROR, exc).status is None

    def test_unprintable_exception(self) -> None:
        class Unprintable(Exception):
            def __str__(self) -> str:
                raise ValueError("no")

            def __repr__(self) -> str:
                raise ValueError("no")

        error = ErrorInfo.from_exception(ErrorKind.INTERNAL_ERROR, Unprintable())
        assert error.message == "Unprintable"
        assert error.cause == "<Unprintable>"
