"""Unit tests for layout classification and product URL validation."""

from __future__ import annotations

import pytest

from fanza_metadata.core.category import Category, CategoryDetector, parse_category


@pytest.mark.parametrize(
    "url",
    [
        "https://dlsoft.dmm.co.jp/detail/abc_0001/",
        "https://dlsoft.dmm.co.jp/detail/abc_0001/?locale=en_US",
        "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_123456/",
        "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_123456",
    ],
)
def test_product_urls_are_valid(url: str) -> None:
    assert CategoryDetector.is_valid_product_url(url) is True


@pytest.mark.parametrize(
    "url",
    [
        "",
        "http://dlsoft.dmm.co.jp/detail/abc_0001/",
        "https://dlsoft.dmm.co.jp/detail/ABC_0001/",
        "https://dlsoft.dmm.co.jp/detail/abc_0001",
        "https://dlsoft.dmm.co.jp/search/?searchstr=abc",
        "https://www.dmm.co.jp/dc/doujin/-/list/=/cid=d_123456/",
        "https://example.com/detail/abc_0001/",
        "see https://dlsoft.dmm.co.jp/detail/abc_0001/",
    ],
)
def test_non_product_urls_are_rejected(url: str) -> None:
    assert CategoryDetector.is_valid_product_url(url) is False


def test_classify_url_by_domain() -> None:
    assert CategoryDetector.classify_url("https://dlsoft.dmm.co.jp/detail/abc_0001/") == Category.GENERAL
    assert CategoryDetector.classify_url("https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/") == Category.DOUJIN
    assert CategoryDetector.classify_url("https://example.com/") == Category.UNKNOWN
    assert CategoryDetector.classify_url("") == Category.UNKNOWN


def test_classify_hint_defaults_to_general() -> None:
    assert CategoryDetector.classify_hint("Doujin Games") == Category.DOUJIN
    assert CategoryDetector.classify_hint("PC Games") == Category.GENERAL
    assert CategoryDetector.classify_hint("anything else") == Category.GENERAL


def test_parse_category_accepts_values_and_names() -> None:
    assert parse_category("PC Games") == Category.GENERAL
    assert parse_category("doujin games") == Category.DOUJIN
    assert parse_category("DOUJIN") == Category.DOUJIN
    assert parse_category(Category.GENERAL) == Category.GENERAL
    assert parse_category(None) == Category.ALL
    assert parse_category("nonsense") == Category.ALL
