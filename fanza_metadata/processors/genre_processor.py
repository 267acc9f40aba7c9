"""
Genre 处理器

负责过滤 FANZA 信息栏「ジャンル」中混入的促销、平台、折扣等噪声标签
"""

import logging
from typing import Iterable, List, Optional


# 全角 ASCII（！～）到半角的映射，用于匹配「３０％ＯＦＦ」这类全角写法
FULL_TO_HALF = {code: code - 0xFEE0 for code in range(0xFF01, 0xFF5F)}
FULL_TO_HALF[0x3000] = 0x20  # 全角空格

# 日文页面的噪声关键词
NOISE_KEYWORDS_JA = [
    "キャンペーン", "ブラウザ対応", "Windows", "%OFF", "ポイント還元", "アワード",
    "デモ・体験版", "セール", "販売", "商品", "新作", "成人向け",
]

# 英文页面的噪声关键词
NOISE_KEYWORDS_EN = [
    "SALE", "Campaign", "Browser", "Points", "Award", "Free Demo", "Trial", "New Release", "Adults Only",
]


class GenreProcessor:
    """
    Genre 处理器

    - 关键词匹配使用包含关系（「30%OFF」命中「%OFF」）
    - ASCII 关键词大小写不敏感
    - 全角半角字符自动转换后再匹配
    """

    def __init__(self, noise_keywords: Optional[Iterable[str]] = None):
        """
        Args:
            noise_keywords: 自定义噪声关键词（默认使用日文 + 英文关键词表）
        """
        self.logger = logging.getLogger(__name__)
        keywords = noise_keywords if noise_keywords is not None else NOISE_KEYWORDS_JA + NOISE_KEYWORDS_EN
        self.noise_keywords = [self._normalize(k) for k in keywords if k]

    @staticmethod
    def _normalize(text: str) -> str:
        """全角转半角并转小写"""
        return text.translate(FULL_TO_HALF).lower()

    def is_noise(self, genre: str) -> bool:
        """判断标签是否为促销 / 平台等噪声"""
        normalized = self._normalize(genre)
        return any(keyword in normalized for keyword in self.noise_keywords)

    def process_genres(self, genres: Iterable[str]) -> List[str]:
        """
        过滤噪声标签，保持原有顺序

        Args:
            genres: 原始标签列表

        Returns:
            过滤后的标签列表
        """
        result = []
        for genre in genres:
            if not genre:
                continue
            if self.is_noise(genre):
                self.logger.debug(f"过滤噪声标签: {genre}")
                continue
            result.append(genre)
        return result
