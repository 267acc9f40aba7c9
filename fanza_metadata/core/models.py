"""
核心数据模型
商品页刮削结果与搜索结果摘要
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Any, Optional, List

from .category import Category


# 链接表中规范 URL 的固定标签
SOURCE_LINK_NAME = 'Fanza'


class AgeRating(Enum):
    """年龄分级"""
    ALL_AGES = "All ages"
    R_RATED = "R-Rated"
    ADULT = "Adult"


@dataclass
class NormalizedRecord:
    """
    商品页刮削结果（与页面布局无关的统一结构）

    字段：
        title: 标题
        author: 品牌 / 社团名
        description: 简介（HTML 片段，PC 游戏可能追加了 iframe 中的推广说明）
        age_rating: 年龄分级（FANZA 成人区固定为 ADULT）
        rating: 评分（星级数，限制在 0-100）
        release_date: 配信开始日
        series: 系列
        genres: 类型列表（已过滤促销类噪声标签）
        illustrators: 原画
        scenario_writers: 剧本
        voice_actors: 声优
        musicians: 音乐
        main_image: 主图 URL
        icon: 图标 URL（由主图文件名 pl.jpg -> ps.jpg 推导）
        product_images: 商品图片列表（去重，保持页面顺序）
        links: 链接表，至少包含 {'Fanza': 规范 URL}
        category: 产生该记录的页面布局

    除 age_rating 和 links 外所有字段都可以缺失，部分结果是合法的。
    """

    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    age_rating: AgeRating = AgeRating.ADULT
    rating: Optional[int] = None
    release_date: Optional[date] = None
    series: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    illustrators: List[str] = field(default_factory=list)
    scenario_writers: List[str] = field(default_factory=list)
    voice_actors: List[str] = field(default_factory=list)
    musicians: List[str] = field(default_factory=list)
    main_image: Optional[str] = None
    icon: Optional[str] = None
    product_images: List[str] = field(default_factory=list)
    links: Dict[str, str] = field(default_factory=dict)
    category: Optional[Category] = None

    @property
    def community_score(self) -> Optional[int]:
        """宿主程序使用的社区评分（星级 x 20）"""
        if self.rating is None:
            return None
        return self.rating * 20

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为字典（用于 JSON 序列化）

        Returns:
            Dict[str, Any]: 序列化后的字典
        """
        return {
            'title': self.title,
            'author': self.author,
            'developers': [self.author] if self.author else [],
            'publisher': SOURCE_LINK_NAME,
            'description': self.description,
            'age_rating': self.age_rating.value,
            'rating': self.rating,
            'community_score': self.community_score,
            'release_date': self.release_date.strftime('%Y-%m-%d') if self.release_date else None,
            'series': self.series,
            'genres': list(self.genres),
            'illustrators': list(self.illustrators),
            'scenario_writers': list(self.scenario_writers),
            'voice_actors': list(self.voice_actors),
            'musicians': list(self.musicians),
            'main_image': self.main_image,
            'icon': self.icon,
            'product_images': list(self.product_images),
            'links': dict(self.links),
            'category': self.category.value if self.category else None,
        }


@dataclass
class SearchResultSummary:
    """
    搜索结果中的一项

    excerpt 为两行：第一行作者 / 说明，第二行品牌，缺失的一侧用 'Unknown' 占位
    """

    title: str
    link: str
    excerpt: Optional[str] = None
    image: Optional[str] = None
    category: Optional[Category] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'link': self.link,
            'excerpt': self.excerpt,
            'image': self.image,
            'category': self.category.value if self.category else None,
        }
