"""
管理器模块
"""

from .fanza_scraper_manager import FanzaScraperManager, interleave_results
from .result_manager import ResultManager, ResultMode, ScrapeResponse

__all__ = ['FanzaScraperManager', 'interleave_results', 'ResultManager', 'ResultMode', 'ScrapeResponse']
