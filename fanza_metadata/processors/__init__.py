"""
数据处理器模块
"""

from .genre_processor import GenreProcessor

__all__ = ['GenreProcessor']
