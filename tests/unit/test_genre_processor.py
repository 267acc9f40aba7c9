"""Unit tests for genre noise filtering."""

from __future__ import annotations

from fanza_metadata.processors.genre_processor import GenreProcessor


def test_noise_keywords_are_substring_matches() -> None:
    processor = GenreProcessor()

    assert processor.is_noise("キャンペーン対象")
    assert processor.is_noise("30%OFF")
    assert processor.is_noise("Windows対応")
    assert processor.is_noise("成人向け")
    assert not processor.is_noise("ファンタジー")


def test_full_width_and_case_are_normalized() -> None:
    processor = GenreProcessor()

    assert processor.is_noise("３０％ＯＦＦ")
    assert processor.is_noise("summer sale")
    assert processor.is_noise("FREE DEMO available")


def test_process_genres_keeps_order() -> None:
    processor = GenreProcessor()

    genres = ["RPG", "セール中", "ファンタジー", "", "ポイント還元", "魔法"]

    assert processor.process_genres(genres) == ["RPG", "ファンタジー", "魔法"]


def test_custom_keywords_replace_defaults() -> None:
    processor = GenreProcessor(noise_keywords=["ドット"])

    assert processor.process_genres(["ドット絵", "セール"]) == ["セール"]
