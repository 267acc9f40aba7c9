"""
网页抓取相关的异常
消息同时提供中文和英文，由 ErrorHandler 原样返回给宿主程序
"""

from typing import Optional

__all__ = ['ScraperError', 'NetworkError', 'InvalidUrlError', 'UnknownDomainError', 'SiteBlocked']


class ScraperError(Exception):
    """刮削相关异常的基类"""

    def __init__(self, message_zh: str, message_en: Optional[str] = None):
        """
        Args:
            message_zh: 中文错误消息
            message_en: 英文错误消息（缺省时与中文相同）
        """
        super().__init__(message_zh)
        self.message_zh = message_zh
        self.message_en = message_en or message_zh

    def __str__(self):
        return self.message_zh


class NetworkError(ScraperError):
    """请求失败：超时、连接错误或非 2xx 响应（不重试）"""

    def __init__(self, message_zh: str, message_en: Optional[str] = None, http_status: Optional[int] = None):
        super().__init__(message_zh, message_en)
        # 没有收到响应时为 None
        self.http_status = http_status


class InvalidUrlError(ScraperError):
    """不是商品详情页的 URL（在发起任何网络请求之前检查）"""

    def __init__(self, url: str):
        super().__init__(f"无效的商品 URL: {url}", f"Invalid product URL: {url}")
        self.url = url


class UnknownDomainError(InvalidUrlError):
    """URL 不属于 dlsoft.dmm.co.jp / www.dmm.co.jp（配置错误，不重试）"""

    def __init__(self, url: str):
        super().__init__(url)
        self.message_zh = f"未知的域名: {url}"
        self.message_en = f"Unknown domain: {url}"


class SiteBlocked(ScraperError):
    """被 CloudFlare 验证页拦截，或 cloudscraper 无法通过验证"""
