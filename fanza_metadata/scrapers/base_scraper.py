"""
基础刮削器类
所有刮削器的基类
集成 ErrorHandler 进行统一错误处理
"""

import logging
from abc import ABC
from typing import Any, Callable, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from ..core.error_handler import ErrorHandler, StructuredError
from ..core.language import DEFAULT_LABELS, LabelTable
from ..web.request import fetch_document


logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """刮削器基类（带统一错误处理）"""

    # 数据源名称（子类必须设置）
    name: str = 'base'

    def __init__(self, config: Optional[Dict[str, Any]] = None, labels: Optional[LabelTable] = None):
        """
        初始化刮削器

        Args:
            config: 配置字典
            labels: 信息栏标签表（默认使用内置的只读表）
        """
        self.config = config or {}
        self.labels = labels or DEFAULT_LABELS
        self.logger = logging.getLogger(f"{__name__}.{self.name}")
        # 初始化错误处理器
        self.error_handler = ErrorHandler(self.config, self.logger)

    def fetch(self, url: str) -> BeautifulSoup:
        """
        抓取并解析页面（每次调用都使用独立的会话和 Cookie）

        Raises:
            UnknownDomainError: 未知域名
            NetworkError: 网络错误
        """
        return fetch_document(url, self.config)

    def _run_guarded(self, func: Callable, target: str, *args,
                     default: Any = None) -> Tuple[Any, Optional[StructuredError]]:
        """
        执行刮削实现，捕获异常并交给 ErrorHandler 处理

        Args:
            func: 刮削实现（可以直接抛出异常）
            target: URL 或搜索关键词（用于日志）
            *args: 传给 func 的参数
            default: 失败时的返回值

        Returns:
            (结果, 结构化错误)，成功时错误为 None
        """
        try:
            return func(*args), None
        except Exception as e:
            error = self.error_handler.handle_exception(e, self.name, target)
            return default, error
