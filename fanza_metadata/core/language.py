"""
语言与信息栏标签表

FANZA 的商品信息栏使用本地化的标签文字（如「配信開始日」/「Release date」），
提取器通过这里的表格定位对应的行。新增语言只需要为每个字段补充一行。
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional


class SupportedLanguage(Enum):
    """支持的页面语言"""
    ja_JP = "ja_JP"
    en_US = "en_US"


class InfoField(Enum):
    """信息栏中可识别的字段（顺序即匹配优先级）"""
    RELEASE_DATE = "release_date"
    SERIES = "series"
    ILLUSTRATION = "illustration"
    SCENARIO = "scenario"
    VOICE_ACTOR = "voice_actor"
    GENRE = "genre"
    MUSIC = "music"
    UPDATE_DATE = "update_date"
    AUTHOR = "author"


DEFAULT_LANGUAGE = SupportedLanguage.ja_JP

# 设置页面中的语言名称 -> SupportedLanguage
LANGUAGE_NAMES = {
    'Japanese': SupportedLanguage.ja_JP,
    'English': SupportedLanguage.en_US,
}

# 发售日的日期格式
DATE_FORMATS = MappingProxyType({
    SupportedLanguage.ja_JP: '%Y/%m/%d',
    SupportedLanguage.en_US: '%m/%d/%Y',
})

_LABELS = {
    SupportedLanguage.ja_JP: {
        InfoField.RELEASE_DATE: '配信開始日',
        InfoField.UPDATE_DATE: '更新情報',
        InfoField.SERIES: 'シリーズ',
        InfoField.SCENARIO: 'シナリオ',
        InfoField.ILLUSTRATION: '原画',
        InfoField.VOICE_ACTOR: '声優',
        InfoField.MUSIC: '音楽',
        InfoField.AUTHOR: '作者',
        InfoField.GENRE: 'ジャンル',
    },
    SupportedLanguage.en_US: {
        InfoField.RELEASE_DATE: 'Release date',
        InfoField.UPDATE_DATE: 'Update information',
        InfoField.SERIES: 'Series',
        InfoField.SCENARIO: 'Scenario',
        InfoField.ILLUSTRATION: 'Illustration',
        InfoField.VOICE_ACTOR: 'Voice Actor',
        InfoField.MUSIC: 'Music',
        InfoField.AUTHOR: 'Author',
        InfoField.GENRE: 'Genre',
    },
}


class LabelTable:
    """只读的标签表（进程启动时加载一次，也可在测试中注入）"""

    def __init__(self, labels: Optional[Dict[SupportedLanguage, Dict[InfoField, str]]] = None):
        source = labels if labels is not None else _LABELS
        self._labels: Mapping[SupportedLanguage, Mapping[InfoField, str]] = MappingProxyType({
            language: MappingProxyType(dict(fields)) for language, fields in source.items()
        })

    def label(self, language: SupportedLanguage, field: InfoField) -> Optional[str]:
        """返回指定语言下字段的标签文字，没有定义时返回 None"""
        return self._labels.get(language, {}).get(field)

    def match(self, language: SupportedLanguage, header: str) -> Optional[InfoField]:
        """
        按固定顺序匹配信息栏的表头（包含关系，不是相等），第一个匹配的字段胜出

        Args:
            language: 页面语言
            header: 表头文字

        Returns:
            匹配到的 InfoField，没有匹配返回 None
        """
        if not header:
            return None
        for field in InfoField:
            label = self.label(language, field)
            if label and label in header:
                return field
        return None


DEFAULT_LABELS = LabelTable()


def parse_language(value) -> SupportedLanguage:
    """
    将配置中的语言名称转换为 SupportedLanguage

    接受 'Japanese' / 'English' 或 'ja_JP' / 'en_US'，无法识别时返回 en_US
    """
    if isinstance(value, SupportedLanguage):
        return value
    if value in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[value]
    try:
        return SupportedLanguage(value)
    except ValueError:
        return SupportedLanguage.en_US
