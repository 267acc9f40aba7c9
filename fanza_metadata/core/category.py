"""
商品目录布局检测器
判断 URL 或分类提示属于 PC 游戏（dlsoft）还是同人游戏（doujin）布局
"""

import re
from enum import Enum


class Category(Enum):
    """商品目录分类"""
    GENERAL = "PC Games"        # dlsoft.dmm.co.jp
    DOUJIN = "Doujin Games"     # www.dmm.co.jp/dc/doujin
    ALL = "ALL"                 # 仅用于搜索时同时检索两个目录
    UNKNOWN = "Unknown"         # 无法识别的域名


# 商品详情页 URL（区分大小写，允许尾部路径和查询参数）
PRODUCT_URL_PATTERN = re.compile(
    r'https://(dlsoft\.dmm\.co\.jp/detail/[a-z0-9_]+/|www\.dmm\.co\.jp/dc/doujin/-/detail/=/cid=[a-z0-9_]+)/?.*'
)


class CategoryDetector:
    """布局检测器（每个页面只检测一次，结果传递给所有提取器）"""

    @staticmethod
    def classify_hint(hint: str) -> Category:
        """
        根据设置中的分类名称判断布局

        Args:
            hint: 分类名称（如 'Doujin Games'）

        Returns:
            Category.DOUJIN 或 Category.GENERAL
        """
        if hint == Category.DOUJIN.value:
            return Category.DOUJIN
        return Category.GENERAL

    @staticmethod
    def classify_url(url: str) -> Category:
        """
        根据 URL 的域名判断布局

        Args:
            url: 页面 URL

        Returns:
            Category.DOUJIN / Category.GENERAL，未知域名返回 Category.UNKNOWN
        """
        if not url:
            return Category.UNKNOWN
        if 'dlsoft.dmm.co.jp' in url:
            return Category.GENERAL
        if 'www.dmm.co.jp' in url:
            return Category.DOUJIN
        return Category.UNKNOWN

    @staticmethod
    def is_valid_product_url(url: str) -> bool:
        """
        检查是否为合法的商品详情页 URL

        Examples:
            >>> CategoryDetector.is_valid_product_url('https://dlsoft.dmm.co.jp/detail/abc_0001/')
            True
            >>> CategoryDetector.is_valid_product_url('https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_123456/')
            True
            >>> CategoryDetector.is_valid_product_url('https://example.com/detail/abc/')
            False
        """
        if not url:
            return False
        return PRODUCT_URL_PATTERN.match(url) is not None


def parse_category(value) -> Category:
    """
    将配置或请求中的分类字符串转换为 Category

    接受 'ALL' / 'PC Games' / 'Doujin Games'（以及枚举名 'GENERAL' / 'DOUJIN'），
    无法识别时返回 Category.ALL
    """
    if isinstance(value, Category):
        return value
    if not value:
        return Category.ALL

    text = str(value).strip()
    for category in (Category.ALL, Category.GENERAL, Category.DOUJIN):
        if text.lower() in (category.value.lower(), category.name.lower()):
            return category
    return Category.ALL
