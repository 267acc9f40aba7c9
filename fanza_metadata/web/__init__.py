"""Web 模块 - HTTP 客户端和异常"""

from .exceptions import *
from .request import Request, fetch_document, cookies_for_url

__all__ = ['Request', 'fetch_document', 'cookies_for_url', 'ScraperError', 'NetworkError',
           'InvalidUrlError', 'UnknownDomainError', 'SiteBlocked']
