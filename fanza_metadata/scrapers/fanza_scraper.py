"""
FANZA 商品页刮削器
从 PC 游戏（dlsoft）或同人游戏（doujin）商品页抓取元数据
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .base_scraper import BaseScraper
from .extractors import (
    InfoPanel, derive_icon, extract_author, extract_description, extract_frame_markup,
    extract_images, extract_info_panel, extract_rating, extract_title, find_description_frame_url,
)
from ..core.category import Category, CategoryDetector
from ..core.config_loader import FanzaSettings, get_frame_settings
from ..core.error_handler import StructuredError
from ..core.language import LabelTable, SupportedLanguage
from ..core.models import AgeRating, NormalizedRecord, SOURCE_LINK_NAME
from ..processors.genre_processor import GenreProcessor
from ..web.exceptions import InvalidUrlError, UnknownDomainError


logger = logging.getLogger(__name__)


@dataclass
class DescriptionParts:
    """简介的第一阶段结果：商品页上的简介和（可选的）推广说明 iframe 地址"""
    base: Optional[str] = None
    frame_url: Optional[str] = None


def append_locale(url: str, language: SupportedLanguage) -> str:
    """
    为 URL 添加 locale 参数（已存在时保持不变）

    Examples:
        >>> append_locale('https://dlsoft.dmm.co.jp/detail/abc_0001/', SupportedLanguage.ja_JP)
        'https://dlsoft.dmm.co.jp/detail/abc_0001/?locale=ja_JP'
    """
    if 'locale=' in url:
        return url
    separator = '&' if '?' in url else '?'
    return f"{url}{separator}locale={language.value}"


class FanzaScraper(BaseScraper):
    """FANZA 商品页刮削器"""

    name = 'fanza'

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 language: Optional[SupportedLanguage] = None,
                 labels: Optional[LabelTable] = None):
        """
        初始化刮削器

        Args:
            config: 配置字典
            language: 页面语言（默认取配置 search.language）
            labels: 信息栏标签表
        """
        super().__init__(config, labels)
        self.language = language or FanzaSettings(self.config).get_supported_language()

        frame_settings = get_frame_settings(self.config)
        self.frame_marker = frame_settings['frame_marker']
        self.spacer = frame_settings['spacer']

        self.genre_processor = GenreProcessor()

    def scrape(self, url: str) -> Optional[NormalizedRecord]:
        """
        刮削商品页（带统一错误处理）

        Args:
            url: 商品详情页 URL

        Returns:
            NormalizedRecord 对象，URL 无效或抓取失败返回 None
        """
        record, _ = self.scrape_with_error(url)
        return record

    def scrape_with_error(self, url: str) -> Tuple[Optional[NormalizedRecord], Optional[StructuredError]]:
        """刮削商品页，同时返回结构化错误（成功时为 None）"""
        return self._run_guarded(self._scrape_impl, url, url)

    def _scrape_impl(self, url: str) -> NormalizedRecord:
        """
        刮削实现（异常由 scrape() 捕获）

        Raises:
            InvalidUrlError: URL 不是商品详情页（不发起网络请求）
            NetworkError: 商品页抓取失败
        """
        if not CategoryDetector.is_valid_product_url(url):
            raise InvalidUrlError(url)

        url = append_locale(url, self.language)

        # 布局只判断一次，随后传入每个提取器
        category = CategoryDetector.classify_url(url)
        if category == Category.UNKNOWN:
            raise UnknownDomainError(url)

        self.logger.info(f"开始刮削: {url} ({category.value})")
        soup = self.fetch(url)

        record, parts = self._parse_page(soup, url, category)
        # 第二阶段：依赖商品页内容的 iframe 抓取
        record.description = self._extend_description(parts)

        self.logger.info(f"✓ 刮削成功: {record.title}")
        return record

    def _extract(self, field_name: str, extractor: Callable, *args, default: Any = None) -> Any:
        """
        调用单个提取器，失败时该字段视为缺失，不影响其他字段
        """
        try:
            return extractor(*args)
        except Exception as e:
            self.logger.warning(f"字段提取失败: {field_name} - {e}")
            return default

    def _parse_page(self, soup: BeautifulSoup, url: str,
                    category: Category) -> Tuple[NormalizedRecord, DescriptionParts]:
        """
        运行所有提取器，组装统一结构

        Args:
            soup: 商品页
            url: 规范化后的商品页 URL
            category: 页面布局

        Returns:
            (NormalizedRecord 对象, 简介的第一阶段结果)
        """
        language = self.language
        record = NormalizedRecord(links={SOURCE_LINK_NAME: url}, category=category)
        # FANZA 成人区的商品一律为成人向
        record.age_rating = AgeRating.ADULT

        record.title = self._extract('title', extract_title, soup, category, language)
        record.author = self._extract('author', extract_author, soup, category, language)
        record.rating = self._extract('rating', extract_rating, soup, category, language)

        images = self._extract('images', extract_images, soup, category, language, default=[])
        record.product_images = images
        record.main_image = images[0] if images else None
        record.icon = derive_icon(record.main_image)

        parts = DescriptionParts(
            base=self._extract('description', extract_description, soup, category, language),
            frame_url=self._extract('description_frame', find_description_frame_url,
                                    soup, category, url, self.frame_marker),
        )
        record.description = parts.base

        panel = self._extract('information', extract_info_panel, soup, category, language,
                              self.labels, self.genre_processor, default=InfoPanel())
        record.release_date = panel.release_date
        record.series = panel.series
        record.genres = panel.genres
        record.illustrators = panel.illustrators
        record.scenario_writers = panel.scenario_writers
        record.voice_actors = panel.voice_actors
        record.musicians = panel.musicians

        self.logger.debug(
            f"解析结果: 图片={len(record.product_images)}, 类型={len(record.genres)}, "
            f"评分={record.rating}, 发售日={record.release_date}"
        )
        return record, parts

    def _extend_description(self, parts: DescriptionParts) -> Optional[str]:
        """
        抓取推广说明 iframe 并追加到简介后面

        iframe 抓取失败时只返回商品页上的简介，不影响整个商品页的结果。
        """
        if not parts.frame_url:
            return parts.base

        try:
            frame_soup = self.fetch(parts.frame_url)
            markup = extract_frame_markup(frame_soup)
        except Exception as e:
            self.logger.warning(f"推广说明抓取失败，仅使用基本简介: {parts.frame_url} - {e}")
            return parts.base

        if not markup:
            return parts.base
        if not parts.base:
            return markup

        self.logger.debug(f"已追加推广说明: {parts.frame_url}")
        return f"{parts.base}{self.spacer}{markup}"
