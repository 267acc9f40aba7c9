"""
FANZA 搜索页刮削器
按单个分类（PC 游戏或同人）搜索，返回搜索结果摘要列表
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup, Tag

from .base_scraper import BaseScraper
from .fanza_scraper import append_locale
from ..core.category import Category, CategoryDetector
from ..core.config_loader import FanzaSettings
from ..core.error_handler import StructuredError
from ..core.language import LabelTable, SupportedLanguage
from ..core.models import SearchResultSummary
from ..web.exceptions import UnknownDomainError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchSelectors:
    """一种搜索页布局的全部选择器"""
    rows: str
    title: str
    link: str
    image: str
    author: str
    brand: str


GENERAL_SEARCH_SELECTORS = SearchSelectors(
    rows='li.component-legacy-productTile__item',
    title='span.component-legacy-productTile__title',
    link='a.component-legacy-productTile__detailLink',
    image='img',
    author="div.component-legacy-productTile__relatedInfo a[href*='/list/article=author']",
    brand="div.component-legacy-productTile__relatedInfo a[href*='/list/article=maker']",
)

DOUJIN_SEARCH_SELECTORS = SearchSelectors(
    rows='li.productList__item',
    title='.tileListTtl__txt a',
    link='.tileListTtl__txt a',
    image='.tileListImg__tmb img',
    author='div.tileListTtl__txt a',
    brand='div.tileListTtl__txt--author a',
)

SEARCH_SELECTORS = {
    Category.GENERAL: GENERAL_SEARCH_SELECTORS,
    Category.DOUJIN: DOUJIN_SEARCH_SELECTORS,
}

# 没有结果时用于调试输出的容器
DEBUG_CONTAINER_SELECTOR = 'ul#doujin_list'
UNKNOWN_PLACEHOLDER = 'Unknown'


def absolute_link(base_url: str, link: str) -> str:
    """
    相对链接转为绝对链接（包括以 // 开头的协议相对链接）

    Examples:
        >>> absolute_link('https://www.dmm.co.jp/', '/dc/doujin/-/detail/=/cid=d_1/')
        'https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/'
        >>> absolute_link('https://www.dmm.co.jp/', '//www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/')
        'https://www.dmm.co.jp/dc/doujin/-/detail/=/cid=d_1/'
    """
    return urljoin(base_url, link)


def build_excerpt(author: Optional[str], brand: Optional[str]) -> Optional[str]:
    """两行摘要（作者 / 品牌），两侧都缺失时返回 None"""
    if not author and not brand:
        return None
    return f"{author or UNKNOWN_PLACEHOLDER}\n{brand or UNKNOWN_PLACEHOLDER}"


class FanzaSearchScraper(BaseScraper):
    """FANZA 单分类搜索刮削器"""

    name = 'fanza_search'

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 settings: Optional[FanzaSettings] = None,
                 labels: Optional[LabelTable] = None):
        super().__init__(config, labels)
        self.settings = settings or FanzaSettings(self.config)

    def search(self, category: Category, query: str, max_results: int,
               language: Optional[SupportedLanguage] = None) -> List[SearchResultSummary]:
        """
        搜索单个分类（带统一错误处理）

        Args:
            category: GENERAL 或 DOUJIN
            query: 搜索关键词
            max_results: 最大结果数
            language: 页面语言（默认取设置）

        Returns:
            搜索结果摘要列表，失败时返回空列表
        """
        results, _ = self.search_with_error(category, query, max_results, language)
        return results

    def search_with_error(self, category: Category, query: str, max_results: int,
                          language: Optional[SupportedLanguage] = None
                          ) -> Tuple[List[SearchResultSummary], Optional[StructuredError]]:
        """搜索单个分类，同时返回结构化错误（成功时为 None）"""
        return self._run_guarded(self._search_impl, query, category, query, max_results, language,
                                 default=[])

    def build_search_url(self, category: Category, query: str,
                         language: Optional[SupportedLanguage] = None) -> str:
        """
        构造搜索 URL: 入口 + 搜索路径 + 编码后的关键词 + 分类参数 + locale

        Args:
            category: GENERAL 或 DOUJIN
            query: 搜索关键词
            language: 页面语言

        Returns:
            搜索 URL
        """
        language = language or self.settings.get_supported_language()
        url = (
            self.settings.get_search_category_base_url(category)
            + self.settings.get_search_path(category)
            + quote(query, safe='')
            + self.settings.get_search_parameters(category)
        )
        return append_locale(url, language)

    def _search_impl(self, category: Category, query: str, max_results: int,
                     language: Optional[SupportedLanguage] = None) -> List[SearchResultSummary]:
        """
        搜索实现（异常由 search() 捕获）

        Raises:
            ValueError: 分类不是 GENERAL / DOUJIN
            UnknownDomainError: 搜索 URL 的域名与分类不一致
            NetworkError: 搜索页抓取失败
        """
        if category not in SEARCH_SELECTORS:
            raise ValueError(f"不支持的搜索分类: {category}")

        url = self.build_search_url(category, query, language)
        if CategoryDetector.classify_url(url) != category:
            raise UnknownDomainError(url)

        self.logger.info(f"搜索 {category.value}: {query}")
        soup = self.fetch(url)

        results = self.parse_results(soup, category)
        self.logger.info(f"✓ {category.value} 找到 {len(results)} 个结果")
        return results[:max(max_results, 0)]

    def parse_results(self, soup: BeautifulSoup, category: Category) -> List[SearchResultSummary]:
        """
        解析搜索结果页的每一行

        缺少标题或链接的行被跳过（记录警告），不影响其他行。
        """
        selectors = SEARCH_SELECTORS[category]
        base_url = self.settings.get_search_category_base_url(category)

        rows = soup.select(selectors.rows)
        if not rows:
            container = soup.select_one(DEBUG_CONTAINER_SELECTOR) or soup.body or soup
            self.logger.warning(f"搜索结果为空 ({category.value})")
            self.logger.debug(f"搜索页内容: {str(container)[:2000]}")
            return []

        results = []
        for index, row in enumerate(rows):
            summary = self._parse_row(row, selectors, base_url, category)
            if summary is None:
                self.logger.warning(f"跳过第 {index + 1} 行: 缺少标题或链接")
                continue
            results.append(summary)
        return results

    @staticmethod
    def _parse_row(row: Tag, selectors: SearchSelectors, base_url: str,
                   category: Category) -> Optional[SearchResultSummary]:
        title_element = row.select_one(selectors.title)
        link_element = row.select_one(selectors.link)

        title = title_element.get_text().strip() if title_element else ''
        link = (link_element.get('href') or '').strip() if link_element else ''
        if not title or not link:
            return None

        image_element = row.select_one(selectors.image)
        image = (image_element.get('src') or '').strip() if image_element else ''

        author_element = row.select_one(selectors.author)
        brand_element = row.select_one(selectors.brand)
        author = author_element.get_text().strip() if author_element else None
        brand = brand_element.get_text().strip() if brand_element else None

        return SearchResultSummary(
            title=title,
            link=absolute_link(base_url, link),
            excerpt=build_excerpt(author, brand),
            image=image or None,
            category=category,
        )
