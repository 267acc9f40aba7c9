"""工具模块"""

from .date_parser import parse_release_date

__all__ = ['parse_release_date']
