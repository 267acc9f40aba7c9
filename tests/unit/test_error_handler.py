"""Unit tests for error classification and aggregation."""

from __future__ import annotations

import pytest

from fanza_metadata.core.error_handler import ErrorAggregator, ErrorCategory, ErrorHandler
from fanza_metadata.web.exceptions import (
    InvalidUrlError,
    NetworkError,
    SiteBlocked,
    UnknownDomainError,
)


@pytest.mark.parametrize(
    ("exception", "expected"),
    [
        (InvalidUrlError("x"), ErrorCategory.INVALID_INPUT),
        (UnknownDomainError("x"), ErrorCategory.INVALID_INPUT),
        (SiteBlocked("封锁", "Blocked"), ErrorCategory.PROXY_REQUIRED),
        (NetworkError("超时"), ErrorCategory.NETWORK_ERROR),
        (NetworkError("禁止", "Forbidden", http_status=403), ErrorCategory.REGIONAL_RESTRICTION),
        (NetworkError("无", "Missing", http_status=404), ErrorCategory.NOT_FOUND),
        (NetworkError("错", "Bad gateway", http_status=502), ErrorCategory.SITE_ERROR),
        (RuntimeError("boom"), ErrorCategory.UNKNOWN),
    ],
)
def test_exceptions_are_categorized(exception: Exception, expected: ErrorCategory) -> None:
    error = ErrorHandler({}).handle_exception(exception, "fanza", "code")

    assert error.category == expected
    assert error.suggestions_zh
    assert error.suggestions_en


def test_structured_error_is_bilingual() -> None:
    error = ErrorHandler({}).handle_exception(UnknownDomainError("https://example.com/"), "fanza", "u")

    data = error.to_dict()

    assert data["category"] == "invalid_input"
    assert data["message"]["zh"].startswith("未知的域名")
    assert data["message"]["en"].startswith("Unknown domain")
    assert data["source"] == "fanza"


def test_proxy_suggestion_mentions_configured_proxy() -> None:
    handler = ErrorHandler({"network": {"proxy_server": "http://127.0.0.1:7890"}})

    error = handler.handle_exception(SiteBlocked("封锁", "Blocked"), "fanza", "u")

    assert any("http://127.0.0.1:7890" in s for s in error.suggestions_en)


def test_aggregator_summary() -> None:
    handler = ErrorHandler({})
    aggregator = ErrorAggregator()
    assert aggregator.get_summary() == {}

    aggregator.add_error(handler.handle_exception(NetworkError("a", "a"), "fanza_search", "q"))
    aggregator.add_error(handler.handle_exception(NetworkError("b", "b"), "fanza_search", "q"))

    summary = aggregator.get_summary()

    assert aggregator.has_errors()
    assert summary["total_errors"] == 2
    assert summary["failed_sources"] == ["fanza_search"]
    assert summary["by_category"] == {"network_error": ["fanza_search", "fanza_search"]}
    assert len(summary["suggestions"]["en"]) == len(set(summary["suggestions"]["en"]))

    assert aggregator.get_error_count() == 2
