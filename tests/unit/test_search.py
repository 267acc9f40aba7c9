"""Unit tests for single-category search and the combined search in the manager."""

from __future__ import annotations

import pytest

from fanza_metadata.core.category import Category
from fanza_metadata.core.error_handler import ErrorCategory
from fanza_metadata.managers.fanza_scraper_manager import FanzaScraperManager, interleave_results
from fanza_metadata.scrapers.search_scraper import FanzaSearchScraper, absolute_link, build_excerpt
from tests.conftest import DOUJIN_URL, GENERAL_URL, parse_fixture

SEARCH_ROUTES = {
    "dlsoft.dmm.co.jp/search/": "general_search.html",
    "www.dmm.co.jp/dc/doujin/-/search/": "doujin_search.html",
    "dlsoft.dmm.co.jp/detail/abc_0001": "general_product.html",
    "iframe/detail/abc_0001": "frame.html",
    "cid=d_123456": "doujin_product.html",
}


def test_general_search_url(config: dict) -> None:
    url = FanzaSearchScraper(config).build_search_url(Category.GENERAL, "魔法")

    assert url == (
        "https://dlsoft.dmm.co.jp/search/?service=pcgame&floor=digital_pcgame"
        "&searchstr=%E9%AD%94%E6%B3%95&locale=ja_JP"
    )


def test_doujin_search_url_encodes_reserved_characters(config: dict) -> None:
    url = FanzaSearchScraper(config).build_search_url(Category.DOUJIN, "a b/c")

    assert url == (
        "https://www.dmm.co.jp/dc/doujin/-/search/=/searchstr=a%20b%2Fc"
        "/n1=AgReSwMKX1VZCFQCloTHi8SF/?locale=ja_JP"
    )


def test_custom_search_parameters_override_defaults(config: dict) -> None:
    config["search"]["parameters"] = {"Doujin Games": "/sort=date/"}

    url = FanzaSearchScraper(config).build_search_url(Category.DOUJIN, "x")

    assert url.endswith("searchstr=x/sort=date/?locale=ja_JP")


def test_absolute_link_and_excerpt() -> None:
    assert absolute_link("https://dlsoft.dmm.co.jp/", "/detail/a/") == "https://dlsoft.dmm.co.jp/detail/a/"
    assert absolute_link("https://dlsoft.dmm.co.jp/", "https://x.example/") == "https://x.example/"
    assert (
        absolute_link("https://www.dmm.co.jp/", "//www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/")
        == "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/"
    )
    assert build_excerpt("A", "B") == "A\nB"
    assert build_excerpt(None, "B") == "Unknown\nB"
    assert build_excerpt("A", "") == "A\nUnknown"
    assert build_excerpt(None, None) is None


def test_general_rows_are_parsed_and_broken_rows_skipped(config: dict) -> None:
    results = FanzaSearchScraper(config).parse_results(parse_fixture("general_search.html"), Category.GENERAL)

    assert [r.title for r in results] == ["Game One", "Game Two", "Game Four"]
    first, second, fourth = results
    assert first.link == "https://dlsoft.dmm.co.jp/detail/abc_0001/"
    assert first.excerpt == "Author One\nBrand One"
    assert first.image == "https://pics.dmm.co.jp/digital/pcgame/abc_0001/abc_0001ps.jpg"
    assert first.category == Category.GENERAL
    assert second.link == "https://dlsoft.dmm.co.jp/detail/abc_0002/"
    assert second.excerpt == "Unknown\nBrand Two"
    assert fourth.excerpt is None
    assert fourth.image is None


def test_doujin_rows_are_parsed(config: dict) -> None:
    results = FanzaSearchScraper(config).parse_results(parse_fixture("doujin_search.html"), Category.DOUJIN)

    assert [r.link for r in results] == [
        "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_000001/",
        "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_000002/",
    ]
    assert results[0].excerpt == "Doujin One\nCircle One"
    assert results[1].excerpt == "Doujin Two\nUnknown"
    assert results[0].image.endswith("d_000001ps.jpg")


def test_empty_result_page(config: dict) -> None:
    results = FanzaSearchScraper(config).parse_results(parse_fixture("empty_search.html"), Category.DOUJIN)

    assert results == []


def test_search_is_capped(config: dict, fake_fetch) -> None:
    fetcher = fake_fetch(SEARCH_ROUTES)

    results = FanzaSearchScraper(config).search(Category.GENERAL, "game", 2)

    assert [r.title for r in results] == ["Game One", "Game Two"]
    assert len(fetcher.calls) == 1


def test_negative_cap_returns_nothing(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES)

    assert FanzaSearchScraper(config).search(Category.GENERAL, "game", -1) == []
    assert FanzaScraperManager(config).search("game", category=Category.ALL, max_results=-1) == []
    assert interleave_results(["G1", "G2"], ["D1"], limit=-1) == []


def test_search_failure_yields_empty_list(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES, failures={"/search/"})

    results, error = FanzaSearchScraper(config).search_with_error(Category.GENERAL, "game", 30)

    assert results == []
    assert error.category == ErrorCategory.SITE_ERROR


def test_combined_search_is_not_a_single_category(config: dict, fake_fetch) -> None:
    fetcher = fake_fetch(SEARCH_ROUTES)

    assert FanzaSearchScraper(config).search(Category.ALL, "game", 30) == []
    assert fetcher.calls == []


def test_interleave_general_first() -> None:
    assert interleave_results(["G1", "G2", "G3"], ["D1", "D2"]) == ["G1", "D1", "G2", "D2", "G3"]
    assert interleave_results(["G1"], ["D1", "D2", "D3"]) == ["G1", "D1", "D2", "D3"]
    assert interleave_results([], ["D1"]) == ["D1"]
    assert interleave_results(["G1", "G2"], ["D1", "D2"], limit=3) == ["G1", "D1", "G2"]


def test_manager_all_categories_interleaves(config: dict, fake_fetch) -> None:
    fetcher = fake_fetch(SEARCH_ROUTES)

    results = FanzaScraperManager(config).search("game", category="ALL", max_results=30)

    assert [r.title for r in results] == ["Game One", "Doujin One", "Game Two", "Doujin Two", "Game Four"]
    assert len(fetcher.calls) == 2


def test_manager_all_categories_respects_cap(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES)

    results = FanzaScraperManager(config).search("game", category=Category.ALL, max_results=3)

    assert [r.title for r in results] == ["Game One", "Doujin One", "Game Two"]


def test_manager_failed_category_contributes_nothing(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES, failures={"dc/doujin/-/search"})

    results, errors = FanzaScraperManager(config).search_with_errors("game", category="ALL")

    assert [r.title for r in results] == ["Game One", "Game Two", "Game Four"]
    assert errors.get_error_count() == 1


def test_manager_single_category_from_settings(config: dict, fake_fetch) -> None:
    config["search"]["category"] = "Doujin Games"
    fetcher = fake_fetch(SEARCH_ROUTES)

    results = FanzaScraperManager(config).search("game")

    assert [r.category for r in results] == [Category.DOUJIN, Category.DOUJIN]
    assert "www.dmm.co.jp" in fetcher.calls[0]


def test_get_scrapes_valid_link(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES)

    record, candidates, error = FanzaScraperManager(config).get(DOUJIN_URL, "ignored")

    assert record.title == "同人RPG"
    assert candidates == []
    assert error is None


def test_get_falls_back_to_search(config: dict, fake_fetch) -> None:
    fake_fetch(SEARCH_ROUTES)

    record, candidates, error = FanzaScraperManager(config).get("https://example.com/x", "game")

    assert record is None
    assert len(candidates) == 5
    assert error is None


def test_get_invalid_link_without_name(config: dict, fake_fetch) -> None:
    fetcher = fake_fetch(SEARCH_ROUTES)

    record, candidates, error = FanzaScraperManager(config).get("not a url", None)

    assert record is None
    assert candidates == []
    assert error.category == ErrorCategory.INVALID_INPUT
    assert fetcher.calls == []


@pytest.mark.parametrize("link", [GENERAL_URL, None])
def test_get_reports_failed_search(config: dict, fake_fetch, link: str | None) -> None:
    fake_fetch(SEARCH_ROUTES, failures={"dmm.co.jp"})

    record, candidates, error = FanzaScraperManager(config).get(link, "game")

    assert record is None
    assert candidates == []
    assert error is not None
