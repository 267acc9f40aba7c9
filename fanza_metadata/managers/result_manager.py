"""
刮削结果管理器
统一封装商品页结果和搜索候选，支持单个/多个结果返回
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.models import NormalizedRecord, SearchResultSummary


ResultItem = Union[NormalizedRecord, SearchResultSummary]


class ResultMode(Enum):
    """结果返回模式"""
    SINGLE = "single"      # 单个商品页结果
    MULTIPLE = "multiple"  # 多个搜索候选（供前端选择）


@dataclass
class ScrapeResponse:
    """刮削成功的响应（失败响应由 plugin_main 直接构造结构化错误）"""
    mode: ResultMode
    results: List[ResultItem]
    message: Optional[str] = None

    @property
    def total_count(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为插件协议的响应字典

        单个结果放在 data 字段，多个结果放在 results 字段。
        """
        if self.mode == ResultMode.SINGLE:
            return {
                'success': True,
                'mode': self.mode.value,
                'data': self.results[0].to_dict(),
            }

        return {
            'success': True,
            'mode': self.mode.value,
            'total_count': self.total_count,
            'results': [r.to_dict() for r in self.results],
            'message': self.message,
        }


class ResultManager:
    """刮削结果管理器"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def create_single_response(self, result: NormalizedRecord) -> ScrapeResponse:
        """商品页结果"""
        return ScrapeResponse(mode=ResultMode.SINGLE, results=[result])

    def create_multiple_response(self, results: List[SearchResultSummary]) -> ScrapeResponse:
        """
        搜索候选（供前端选择）

        Args:
            results: 非空的搜索候选列表

        Returns:
            ScrapeResponse
        """
        self.logger.debug(f"返回 {len(results)} 个候选")
        return ScrapeResponse(
            mode=ResultMode.MULTIPLE,
            results=results,
            message=f"找到 {len(results)} 个结果"
        )
