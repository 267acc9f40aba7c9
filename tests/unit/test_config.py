"""Unit tests for configuration loading and search settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from fanza_metadata.core.category import Category
from fanza_metadata.core.config_loader import FanzaSettings, get_frame_settings, load_config
from fanza_metadata.core.language import SupportedLanguage


def test_bundled_config_loads() -> None:
    config = load_config()

    assert config["network"]["timeout"] == 30
    assert config["search"]["category"] == "ALL"
    assert config["description"]["spacer"] == "<br><br>"


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = load_config(str(tmp_path / "absent.yml"))

    assert config["search"]["max_results"] == 30
    assert config["description"]["frame_marker"] == "作品紹介"


def test_partial_file_is_merged_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("search:\n  language: English\n", encoding="utf-8")

    config = load_config(str(path))

    assert config["search"]["language"] == "English"
    assert config["search"]["category"] == "ALL"
    assert config["network"]["use_scraper"] is False


def test_malformed_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("network: [unclosed\n", encoding="utf-8")

    with pytest.raises(RuntimeError):
        load_config(str(path))


def test_settings_defaults() -> None:
    settings = FanzaSettings({})

    assert settings.get_category() == Category.ALL
    assert settings.get_supported_language() == SupportedLanguage.ja_JP
    assert settings.verify() == []


def test_settings_verify_reports_each_problem() -> None:
    settings = FanzaSettings({"search": {"category": "Books", "language": "French", "max_results": 40}})

    assert settings.verify() == [
        "Selected category is not supported.",
        "Selected language is not supported.",
        "Selected search results is not in the list of steps.",
    ]
    assert settings.get_supported_language() == SupportedLanguage.en_US


def test_search_parameters_prefer_custom_values() -> None:
    settings = FanzaSettings({"search": {"parameters": {"PC Games": "&sort=date"}}})

    assert settings.get_search_parameters(Category.GENERAL) == "&sort=date"
    assert settings.get_search_parameters(Category.DOUJIN) == "/n1=AgReSwMKX1VZCFQCloTHi8SF/"


def test_search_entry_points() -> None:
    assert FanzaSettings.get_search_category_base_url(Category.DOUJIN) == "https://www.dmm.co.jp/"
    assert FanzaSettings.get_search_category_base_url(Category.ALL) == "https://dlsoft.dmm.co.jp/"


def test_frame_settings_override() -> None:
    assert get_frame_settings({}) == {"frame_marker": "作品紹介", "spacer": "<br><br>"}
    assert get_frame_settings({"description": {"spacer": "<hr>"}})["spacer"] == "<hr>"
