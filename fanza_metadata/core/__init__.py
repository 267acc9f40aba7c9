"""
核心模块
"""

from .category import Category, CategoryDetector, parse_category
from .config_loader import FanzaSettings, load_config
from .language import SupportedLanguage, InfoField, LabelTable, DEFAULT_LABELS, parse_language
from .models import AgeRating, NormalizedRecord, SearchResultSummary

__all__ = [
    'Category',
    'CategoryDetector',
    'parse_category',
    'FanzaSettings',
    'load_config',
    'SupportedLanguage',
    'InfoField',
    'LabelTable',
    'DEFAULT_LABELS',
    'parse_language',
    'AgeRating',
    'NormalizedRecord',
    'SearchResultSummary',
]
