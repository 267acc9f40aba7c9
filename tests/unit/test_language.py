"""Unit tests for the information-row label table."""

from __future__ import annotations

from fanza_metadata.core.language import (
    DEFAULT_LABELS,
    InfoField,
    LabelTable,
    SupportedLanguage,
    parse_language,
)


def test_headers_match_by_substring() -> None:
    assert DEFAULT_LABELS.match(SupportedLanguage.ja_JP, "配信開始日：") == InfoField.RELEASE_DATE
    assert DEFAULT_LABELS.match(SupportedLanguage.en_US, "Voice Actor(s)") == InfoField.VOICE_ACTOR
    assert DEFAULT_LABELS.match(SupportedLanguage.ja_JP, "対応OS") is None
    assert DEFAULT_LABELS.match(SupportedLanguage.ja_JP, "") is None


def test_first_field_in_fixed_order_wins() -> None:
    labels = LabelTable({
        SupportedLanguage.en_US: {
            InfoField.SERIES: "Series",
            InfoField.GENRE: "Genre",
        }
    })

    assert labels.match(SupportedLanguage.en_US, "Genre / Series") == InfoField.SERIES


def test_unknown_language_has_no_labels() -> None:
    labels = LabelTable({SupportedLanguage.ja_JP: {InfoField.GENRE: "ジャンル"}})

    assert labels.label(SupportedLanguage.en_US, InfoField.GENRE) is None
    assert labels.match(SupportedLanguage.en_US, "ジャンル") is None


def test_parse_language() -> None:
    assert parse_language("Japanese") == SupportedLanguage.ja_JP
    assert parse_language("English") == SupportedLanguage.en_US
    assert parse_language("ja_JP") == SupportedLanguage.ja_JP
    assert parse_language("Klingon") == SupportedLanguage.en_US
