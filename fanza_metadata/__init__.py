"""FANZA Metadata Plugin - FANZA PC 游戏 / 同人游戏元数据刮削插件"""

__version__ = "1.0.0"
__author__ = "Media Manager"
__description__ = "FANZA PC 游戏 / 同人游戏元数据刮削插件"

# 导出主要的类和函数
from .core import Category, CategoryDetector, FanzaSettings, NormalizedRecord, SearchResultSummary, load_config
from .managers import FanzaScraperManager
from .scrapers import BaseScraper, FanzaScraper, FanzaSearchScraper
from .web import Request

__all__ = [
    # 核心模块
    'Category',
    'CategoryDetector',
    'FanzaSettings',
    'NormalizedRecord',
    'SearchResultSummary',
    'load_config',
    # 管理器
    'FanzaScraperManager',
    # 刮削器
    'BaseScraper',
    'FanzaScraper',
    'FanzaSearchScraper',
    # HTTP 客户端
    'Request',
]
