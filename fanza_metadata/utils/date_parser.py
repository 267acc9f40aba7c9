#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
date_parser.py

日期解析工具模块
按页面语言解析商品信息栏中的配信开始日
"""

from datetime import date, datetime
from typing import Optional

from ..core.language import DATE_FORMATS, SupportedLanguage


def parse_release_date(text: Optional[str], language: SupportedLanguage) -> Optional[date]:
    """
    解析配信开始日

    只取第一个空白分隔的片段（信息栏里日期后面可能跟着时间），
    再按语言对应的固定格式解析。

    支持格式:
    - ja_JP: YYYY/MM/DD 例如: 2024/03/15
    - en_US: MM/DD/YYYY 例如: 03/15/2024

    Args:
        text: 信息栏中的日期文字
        language: 页面语言

    Returns:
        date 对象，无法解析时返回 None（不抛出异常）

    Examples:
        >>> parse_release_date("2024/03/15 10:00", SupportedLanguage.ja_JP)
        datetime.date(2024, 3, 15)

        >>> parse_release_date("03/15/2024", SupportedLanguage.en_US)
        datetime.date(2024, 3, 15)

        >>> parse_release_date("近日公開", SupportedLanguage.ja_JP) is None
        True
    """
    if not text:
        return None

    parts = text.strip().split()
    if not parts:
        return None

    date_format = DATE_FORMATS.get(language)
    if date_format is None:
        return None

    try:
        return datetime.strptime(parts[0], date_format).date()
    except ValueError:
        return None
