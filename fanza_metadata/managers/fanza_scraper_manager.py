"""
FANZA 刮削管理器
管理商品页刮削和搜索流程（包括「全部分类」的并发搜索与交错合并）
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.category import Category, CategoryDetector, parse_category
from ..core.config_loader import FanzaSettings
from ..core.error_handler import ErrorAggregator, StructuredError
from ..core.language import LabelTable, SupportedLanguage, parse_language
from ..core.models import NormalizedRecord, SearchResultSummary
from ..scrapers.fanza_scraper import FanzaScraper
from ..scrapers.search_scraper import FanzaSearchScraper


logger = logging.getLogger(__name__)

# 「全部分类」搜索时的分类顺序（交错合并时 PC 游戏在前）
ALL_CATEGORY_ORDER = (Category.GENERAL, Category.DOUJIN)


def interleave_results(first: Sequence, second: Sequence, limit: Optional[int] = None) -> List:
    """
    交错合并两个有序列表，较长列表的剩余部分追加在后面

    Examples:
        >>> interleave_results(['G1', 'G2', 'G3'], ['D1', 'D2'])
        ['G1', 'D1', 'G2', 'D2', 'G3']
        >>> interleave_results(['G1', 'G2', 'G3'], ['D1', 'D2'], limit=3)
        ['G1', 'D1', 'G2']
    """
    merged = []
    for index in range(max(len(first), len(second))):
        if index < len(first):
            merged.append(first[index])
        if index < len(second):
            merged.append(second[index])

    if limit is not None:
        return merged[:max(limit, 0)]
    return merged


class FanzaScraperManager:
    """FANZA 刮削管理器"""

    def __init__(self, config: Dict[str, Any], labels: Optional[LabelTable] = None):
        """
        初始化管理器

        Args:
            config: 配置字典（search 节提供默认分类 / 语言 / 结果数）
            labels: 信息栏标签表（可选）
        """
        self.config = config or {}
        self.labels = labels
        self.settings = FanzaSettings(self.config)
        self.logger = logging.getLogger(__name__)

        for problem in self.settings.verify():
            self.logger.warning(f"搜索设置无效: {problem}")

        self.search_scraper = FanzaSearchScraper(self.config, self.settings, labels)

        self.logger.info("FanzaScraperManager initialized")

    def _resolve_language(self, language: Union[str, SupportedLanguage, None]) -> SupportedLanguage:
        if language is None:
            return self.settings.get_supported_language()
        if isinstance(language, SupportedLanguage):
            return language
        return parse_language(language)

    def scrape(self, url: str, language: Union[str, SupportedLanguage, None] = None
               ) -> Optional[NormalizedRecord]:
        """
        刮削商品页

        Args:
            url: 商品详情页 URL
            language: 页面语言（默认取设置）

        Returns:
            NormalizedRecord 对象，失败返回 None
        """
        record, _ = self.scrape_with_error(url, language)
        return record

    def scrape_with_error(self, url: str, language: Union[str, SupportedLanguage, None] = None
                          ) -> Tuple[Optional[NormalizedRecord], Optional[StructuredError]]:
        """刮削商品页，同时返回结构化错误"""
        # 每次调用新建刮削器，调用之间不共享状态
        scraper = FanzaScraper(self.config, self._resolve_language(language), self.labels)
        return scraper.scrape_with_error(url)

    def search(self, query: str, category: Union[str, Category, None] = None,
               max_results: Optional[int] = None,
               language: Union[str, SupportedLanguage, None] = None) -> List[SearchResultSummary]:
        """
        搜索

        Args:
            query: 搜索关键词
            category: ALL / PC Games / Doujin Games（默认取设置）
            max_results: 最大结果数（默认取设置）
            language: 页面语言（默认取设置）

        Returns:
            搜索结果摘要列表（单个分类失败时该分类贡献空列表）
        """
        results, _ = self.search_with_errors(query, category, max_results, language)
        return results

    def search_with_errors(self, query: str, category: Union[str, Category, None] = None,
                           max_results: Optional[int] = None,
                           language: Union[str, SupportedLanguage, None] = None
                           ) -> Tuple[List[SearchResultSummary], ErrorAggregator]:
        """
        搜索，同时返回收集到的错误

        Returns:
            (搜索结果摘要列表, ErrorAggregator)
        """
        if category is None:
            category = self.settings.get_category()
        elif not isinstance(category, Category):
            category = parse_category(category)

        if max_results is None:
            max_results = self.settings.max_search_results
        # 负数上限按 0 处理，避免切片从尾部截断
        max_results = max(max_results, 0)
        language = self._resolve_language(language)

        error_aggregator = ErrorAggregator()

        if category == Category.ALL:
            results = self._search_all(query, max_results, language, error_aggregator)
        else:
            if category == Category.UNKNOWN:
                category = Category.GENERAL
            results, error = self.search_scraper.search_with_error(category, query, max_results, language)
            if error:
                error_aggregator.add_error(error)

        if not results and error_aggregator.has_errors():
            summary = error_aggregator.get_summary()
            self.logger.error(f"搜索失败: {summary['summary']['zh']}")
            self.logger.debug(f"错误详情: {summary}")

        self.logger.info(f"搜索完成: {query} -> {len(results)} 个结果")
        return results, error_aggregator

    def _search_all(self, query: str, max_results: int, language: SupportedLanguage,
                    error_aggregator: ErrorAggregator) -> List[SearchResultSummary]:
        """两个分类并发搜索，按 PC 游戏在前交错合并"""
        with ThreadPoolExecutor(max_workers=len(ALL_CATEGORY_ORDER)) as executor:
            futures = [
                executor.submit(self.search_scraper.search_with_error, category, query, max_results, language)
                for category in ALL_CATEGORY_ORDER
            ]
            outcomes = [future.result() for future in futures]

        per_category = []
        for category, (results, error) in zip(ALL_CATEGORY_ORDER, outcomes):
            if error:
                self.logger.warning(f"✗ {category.value} 搜索失败，该分类结果为空")
                error_aggregator.add_error(error)
            per_category.append(results)

        general, doujin = per_category
        return interleave_results(general, doujin, max_results)

    def get(self, link: Optional[str] = None, name: Optional[str] = None,
            language: Union[str, SupportedLanguage, None] = None
            ) -> Tuple[Optional[NormalizedRecord], List[SearchResultSummary], Optional[StructuredError]]:
        """
        有效链接直接刮削，否则按名称搜索候选

        Args:
            link: 商品详情页 URL（可选）
            name: 游戏名（可选）
            language: 页面语言

        Returns:
            (商品页结果, 搜索候选, 结构化错误)，三者至多一项有意义
        """
        # 没有名称可供搜索时，无效链接也交给刮削器，得到 invalid_input 错误
        if link and (CategoryDetector.is_valid_product_url(link) or not name):
            record, error = self.scrape_with_error(link, language)
            return record, [], error

        if not name:
            return None, [], None

        self.logger.info(f"链接无效，改为按名称搜索: {name}")
        results, error_aggregator = self.search_with_errors(name, language=language)
        error = error_aggregator.errors[0] if error_aggregator.has_errors() and not results else None
        return None, results, error
