"""
错误处理

把刮削过程中的异常归类为宿主程序能理解的错误分类，附带双语消息和操作建议。
多个分类并发搜索时，用 ErrorAggregator 汇总各自的失败。
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..web.exceptions import InvalidUrlError, NetworkError, ScraperError, SiteBlocked


logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """错误分类"""
    INVALID_INPUT = "invalid_input"
    NETWORK_ERROR = "network_error"
    PROXY_REQUIRED = "proxy_required"
    REGIONAL_RESTRICTION = "regional_restriction"
    NOT_FOUND = "not_found"
    SITE_ERROR = "site_error"
    UNKNOWN = "unknown"


# 各分类的操作建议（中文, 英文），{source} 替换为数据源名称
SUGGESTIONS = {
    ErrorCategory.INVALID_INPUT: (
        ['🔗 确认链接是 FANZA 商品详情页', '🔍 或直接输入游戏名搜索'],
        ['🔗 Use a FANZA product detail URL', '🔍 Or search by game title'],
    ),
    ErrorCategory.NETWORK_ERROR: (
        ['🔌 检查网络连接', '⏱️ 调大 network.timeout 后重试'],
        ['🔌 Check network connection', '⏱️ Raise network.timeout and retry'],
    ),
    ErrorCategory.PROXY_REQUIRED: (
        ['🚫 {source} 触发了 CloudFlare 验证', '⚙️ 请配置代理或开启 network.use_scraper'],
        ['🚫 {source} triggered a CloudFlare challenge', '⚙️ Configure a proxy or enable network.use_scraper'],
    ),
    ErrorCategory.REGIONAL_RESTRICTION: (
        ['🌏 {source} 仅限日本地区访问', '🇯🇵 必须使用日本 IP 代理'],
        ['🌏 {source} is Japan only', '🇯🇵 A Japan IP proxy is required'],
    ),
    ErrorCategory.NOT_FOUND: (
        ['🔍 确认商品链接是否正确', '🗑️ 商品可能已下架'],
        ['🔍 Verify the product URL', '🗑️ The product may have been removed'],
    ),
    ErrorCategory.SITE_ERROR: (
        ['⚠️ {source} 服务器错误', '🔄 稍后重试'],
        ['⚠️ {source} server error', '🔄 Retry later'],
    ),
    ErrorCategory.UNKNOWN: (
        ['❓ 未知错误', '📋 查看日志了解详情'],
        ['❓ Unknown error', '📋 Check logs for details'],
    ),
}

# 已配置代理时，代理 / 地域类错误改为检查代理本身
PROXY_CHECK_SUGGESTIONS = (
    ['🔧 当前代理: {proxy}', '✅ 确认代理正常运行且出口为日本 IP'],
    ['🔧 Current proxy: {proxy}', '✅ Ensure the proxy is up and exits in Japan'],
)


@dataclass
class StructuredError:
    """结构化错误（返回给宿主程序）"""
    category: ErrorCategory
    source: str
    target: str
    message_zh: str
    message_en: str
    suggestions_zh: List[str] = field(default_factory=list)
    suggestions_en: List[str] = field(default_factory=list)
    http_status: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'source': self.source,
            'target': self.target,
            'message': {'zh': self.message_zh, 'en': self.message_en},
            'suggestions': {'zh': self.suggestions_zh, 'en': self.suggestions_en},
            'http_status': self.http_status,
            'timestamp': self.timestamp.isoformat()
        }


class ErrorHandler:
    """错误处理器 - 负责错误分类、消息生成和建议生成"""

    def __init__(self, config: Optional[Dict[str, Any]] = None, logger: Optional[logging.Logger] = None):
        """
        Args:
            config: 配置字典（读取 network.proxy_server 生成建议）
            logger: 日志记录器（默认使用本模块的 logger）
        """
        self.config = config or {}
        self.logger = logger or logging.getLogger(__name__)

    def handle_exception(
        self,
        exception: Exception,
        source: str,
        target: str,
        http_status: Optional[int] = None
    ) -> StructuredError:
        """
        处理异常，生成结构化错误并记录日志

        Args:
            exception: 捕获的异常
            source: 数据源名称（刮削器的 name）
            target: 商品 URL 或搜索关键词
            http_status: HTTP 状态码（默认从 NetworkError 中读取）

        Returns:
            StructuredError 对象
        """
        if http_status is None and isinstance(exception, NetworkError):
            http_status = exception.http_status

        category = self._categorize_error(exception, http_status)

        if isinstance(exception, ScraperError):
            message_zh, message_en = exception.message_zh, exception.message_en
        else:
            message_zh = message_en = str(exception) or type(exception).__name__

        suggestions_zh, suggestions_en = self._generate_suggestions(category, source)
        self._log_error(exception, source, target, category, http_status)

        return StructuredError(
            category=category,
            source=source,
            target=target,
            message_zh=message_zh,
            message_en=message_en,
            suggestions_zh=suggestions_zh,
            suggestions_en=suggestions_en,
            http_status=http_status
        )

    @staticmethod
    def _categorize_error(exception: Exception, http_status: Optional[int] = None) -> ErrorCategory:
        """
        错误分类：先看异常类型，再看 HTTP 状态码

        UnknownDomainError 是 InvalidUrlError 的子类，一并视为无效输入。
        FANZA 对日本以外的 IP 返回 403。
        """
        if isinstance(exception, InvalidUrlError):
            return ErrorCategory.INVALID_INPUT
        if isinstance(exception, SiteBlocked):
            return ErrorCategory.PROXY_REQUIRED

        if http_status in (403, 451):
            return ErrorCategory.REGIONAL_RESTRICTION
        if http_status == 404:
            return ErrorCategory.NOT_FOUND
        if http_status and http_status >= 500:
            return ErrorCategory.SITE_ERROR

        if isinstance(exception, NetworkError):
            return ErrorCategory.NETWORK_ERROR
        return ErrorCategory.UNKNOWN

    def _generate_suggestions(self, category: ErrorCategory, source: str) -> Tuple[List[str], List[str]]:
        """
        Returns:
            (中文建议列表, 英文建议列表)
        """
        proxy = self.config.get('network', {}).get('proxy_server')
        if proxy and category in (ErrorCategory.PROXY_REQUIRED, ErrorCategory.REGIONAL_RESTRICTION):
            zh, en = PROXY_CHECK_SUGGESTIONS
        else:
            zh, en = SUGGESTIONS[category]

        return (
            [s.format(source=source, proxy=proxy) for s in zh],
            [s.format(source=source, proxy=proxy) for s in en]
        )

    def _log_error(self, exception: Exception, source: str, target: str,
                   category: ErrorCategory, http_status: Optional[int] = None):
        log_msg = f"[{category.value}] {source}: {target} - {exception}"
        if http_status:
            log_msg += f" (HTTP {http_status})"
        self.logger.error(log_msg)

        # 堆栈只在 DEBUG 级别输出
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Exception details:", exc_info=exception)


class ErrorAggregator:
    """错误聚合器 - 收集同一次搜索中各分类的失败"""

    def __init__(self):
        self.errors: List[StructuredError] = []

    def add_error(self, error: StructuredError):
        self.errors.append(error)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_error_count(self) -> int:
        return len(self.errors)

    def get_summary(self) -> Dict[str, Any]:
        """
        生成错误摘要

        Returns:
            错误摘要字典，没有错误时返回空字典
        """
        if not self.errors:
            return {}

        failed_sources = list(dict.fromkeys(e.source for e in self.errors))
        by_category: Dict[str, List[str]] = {}
        for error in self.errors:
            by_category.setdefault(error.category.value, []).append(error.source)

        sources = ', '.join(failed_sources)
        return {
            'total_errors': len(self.errors),
            'failed_sources': failed_sources,
            'summary': {
                'zh': f"共 {len(self.errors)} 次请求失败 ({sources})",
                'en': f"{len(self.errors)} request(s) failed ({sources})"
            },
            'by_category': by_category,
            'suggestions': self.get_consolidated_suggestions(),
            'errors': [e.to_dict() for e in self.errors]
        }

    def get_consolidated_suggestions(self) -> Dict[str, List[str]]:
        """合并所有错误的建议（去重，保持顺序）"""
        return {
            'zh': list(dict.fromkeys(s for e in self.errors for s in e.suggestions_zh)),
            'en': list(dict.fromkeys(s for e in self.errors for s in e.suggestions_en))
        }
