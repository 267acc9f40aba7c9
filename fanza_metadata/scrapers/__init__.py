"""
刮削器模块
"""

from .base_scraper import BaseScraper
from .fanza_scraper import FanzaScraper, append_locale
from .search_scraper import FanzaSearchScraper

__all__ = ['BaseScraper', 'FanzaScraper', 'FanzaSearchScraper', 'append_locale']
