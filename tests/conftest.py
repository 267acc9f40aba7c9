"""Shared fixtures: saved FANZA pages and an offline document fetcher."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from bs4 import BeautifulSoup

from fanza_metadata.core.config_loader import _get_default_config
from fanza_metadata.web.exceptions import NetworkError

FIXTURES_DIR = Path(__file__).parent / "fixtures"

GENERAL_URL = "https://dlsoft.dmm.co.jp/detail/abc_0001/"
DOUJIN_URL = "https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_123456/"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def parse_fixture(name: str) -> BeautifulSoup:
    return BeautifulSoup(load_fixture(name), "lxml")


@pytest.fixture
def config(tmp_path: Path) -> dict:
    data = _get_default_config()
    data["logging"]["log_file"] = str(tmp_path / "fanza_metadata.log")
    return data


@pytest.fixture
def general_soup() -> BeautifulSoup:
    return parse_fixture("general_product.html")


@pytest.fixture
def doujin_soup() -> BeautifulSoup:
    return parse_fixture("doujin_product.html")


class FakeFetcher:
    """Replaces fetch_document: serves fixtures by URL substring and records calls."""

    def __init__(self, routes: dict[str, str] | None = None, failures: set[str] | None = None,
                 errors: dict[str, Exception] | None = None) -> None:
        self.routes = dict(routes or {})
        self.failures = set(failures or ())
        self.errors = dict(errors or {})
        self.calls: list[str] = []

    def __call__(self, url: str, config: dict | None = None) -> BeautifulSoup:
        self.calls.append(url)
        for marker, error in self.errors.items():
            if marker in url:
                raise error
        for marker in self.failures:
            if marker in url:
                raise NetworkError(f"请求失败: {url}", f"Request failed: {url}", http_status=503)
        for marker, fixture in self.routes.items():
            if marker in url:
                return parse_fixture(fixture)
        raise NetworkError(f"未找到: {url}", f"Not found: {url}", http_status=404)


@pytest.fixture
def fake_fetch(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeFetcher]:
    """Install a FakeFetcher in place of the network layer."""

    def _install(routes: dict[str, str] | None = None, failures: set[str] | None = None,
                 errors: dict[str, Exception] | None = None) -> FakeFetcher:
        fetcher = FakeFetcher(routes, failures, errors)
        monkeypatch.setattr("fanza_metadata.scrapers.base_scraper.fetch_document", fetcher)
        return fetcher

    return _install
