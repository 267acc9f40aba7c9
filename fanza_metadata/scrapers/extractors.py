"""
FANZA 商品页字段提取器

每个字段一个函数，签名统一为 (soup, category, language) -> 值 / None。
两种页面布局的 CSS 选择器集中在 LayoutSelectors 中，布局在页面级别只判断一次，
再显式传入每个提取器。提取器找不到节点或解析失败时返回 None / 空列表，不抛异常。
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..core.category import Category
from ..core.language import DEFAULT_LABELS, InfoField, LabelTable, SupportedLanguage
from ..processors.genre_processor import GenreProcessor
from ..utils.date_parser import parse_release_date


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutSelectors:
    """一种页面布局的全部选择器"""
    title: str
    author: str
    description: str
    info_rows: str
    info_header: str
    info_value: str


GENERAL_SELECTORS = LayoutSelectors(
    title='h1.productTitle__headline',
    author=".component-textLink[title*='ブランド']",
    description='p.text-overflow',
    info_rows='.contentsDetailBottom__tableRow',
    info_header='.contentsDetailBottom__tableDataLeft',
    info_value='.contentsDetailBottom__tableDataRight',
)

DOUJIN_SELECTORS = LayoutSelectors(
    title='h1.productTitle__txt',
    author='.circleName__txt',
    description='p.summary__txt',
    info_rows='div.m-productInformation div.productInformation__item',
    info_header='dt.informationList__ttl',
    info_value='dd.informationList__txt, dd.informationList__item',
)

LAYOUT_SELECTORS = {
    Category.GENERAL: GENERAL_SELECTORS,
    Category.DOUJIN: DOUJIN_SELECTORS,
}

# 评分
DOUJIN_RATING_SELECTOR = 'div.userReview__item a span'
DOUJIN_RATING_CLASS_PREFIX = 'u-common__ico--review'
GENERAL_RATING_SELECTOR = "div.reviewStars span.reviewStars__star svg path[fill='#FFAA47']"
RATING_MIN = 0
RATING_MAX = 100

# 图片
DOUJIN_MAIN_IMAGE_SELECTOR = "img[src*='doujin-assets.dmm.co.jp'][src*='pr.jpg']"
DOUJIN_SUB_IMAGE_SELECTOR = "a.fn-colorbox img[src*='doujin-assets.dmm.co.jp']"
GENERAL_IMAGE_CONTAINER = '.slider-area'
GENERAL_IMAGE_SELECTOR = "img[src*='pics.dmm.co.jp']"

# 大图 -> 小图（图标）
MAIN_IMAGE_SUFFIX = 'pl.jpg'
ICON_SUFFIX = 'ps.jpg'

# 简介中的推广说明 iframe（仅 PC 游戏）
FRAME_SECTION_SELECTOR = 'section, div.contentsDetailBottom__section'
FRAME_HEADING_SELECTOR = 'h2, h3, .contentsDetailBottom__ttl'
FRAME_SELECTOR = 'iframe[src]'
DARK_COLOR_PATTERN = re.compile(r'(?<![-\w])color:\s*(#000000|#000|#111111|#222222|#333333|black)\b', re.IGNORECASE)
LIGHT_COLOR = 'color:#FFFFFF'

_RATING_NUMBER = re.compile(r'\d+(\.\d+)?')


def selectors_for(category: Category) -> LayoutSelectors:
    """
    返回布局对应的选择器

    Raises:
        ValueError: ALL / UNKNOWN 不是页面布局
    """
    try:
        return LAYOUT_SELECTORS[category]
    except KeyError:
        raise ValueError(f"不是页面布局: {category}")


def _text(element: Optional[Tag]) -> Optional[str]:
    """元素的文本内容（去除首尾空白），元素不存在或文本为空返回 None"""
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None


def _link_texts(element: Tag) -> List[str]:
    """元素内所有链接的文本（保持顺序，跳过空文本）"""
    texts = []
    for link in element.select('a'):
        text = _text(link)
        if text:
            texts.append(text)
    return texts


def _clamp(value: int) -> int:
    return max(RATING_MIN, min(value, RATING_MAX))


def extract_title(soup: BeautifulSoup, category: Category,
                  language: Optional[SupportedLanguage] = None) -> Optional[str]:
    """
    标题

    标题元素内嵌的 span 是促销徽章，不属于标题文字，在副本上移除后再读取。
    """
    heading = soup.select_one(selectors_for(category).title)
    if heading is None:
        return None

    heading = copy.copy(heading)
    for span in heading.select('span'):
        span.decompose()
    return _text(heading)


def extract_author(soup: BeautifulSoup, category: Category,
                   language: Optional[SupportedLanguage] = None) -> Optional[str]:
    """品牌（PC 游戏）或社团名（同人）"""
    return _text(soup.select_one(selectors_for(category).author))


def extract_rating(soup: BeautifulSoup, category: Category,
                   language: Optional[SupportedLanguage] = None) -> Optional[int]:
    """
    评分

    - 同人: 从星级元素的 class 中去掉固定前缀，取数字 / 10 后取整
    - PC 游戏: 统计高亮的星形 path 数量，没有匹配元素时为 0（与「0 星」无法区分）

    结果限制在 [0, 100]
    """
    if category == Category.DOUJIN:
        element = soup.select_one(DOUJIN_RATING_SELECTOR)
        if element is None:
            return None

        class_name = ' '.join(element.get('class') or [])
        remainder = class_name.replace(DOUJIN_RATING_CLASS_PREFIX, '').strip()
        if not remainder:
            return None

        match = _RATING_NUMBER.search(remainder)
        if not match:
            return None
        return _clamp(int(float(match.group(0)) / 10))

    selectors_for(category)  # 校验布局
    return _clamp(len(soup.select(GENERAL_RATING_SELECTOR)))


def extract_images(soup: BeautifulSoup, category: Category,
                   language: Optional[SupportedLanguage] = None) -> List[str]:
    """
    商品图片（按 URL 去重，保持首次出现的顺序）

    - 同人: 主图（域名 + 文件名双重匹配）在前，随后是图库中的子图
    - PC 游戏: 轮播区域内所有图片
    """
    elements = []
    if category == Category.DOUJIN:
        main_image = soup.select_one(DOUJIN_MAIN_IMAGE_SELECTOR)
        if main_image is not None:
            elements.append(main_image)
        elements.extend(soup.select(DOUJIN_SUB_IMAGE_SELECTOR))
    else:
        selectors_for(category)  # 校验布局
        container = soup.select_one(GENERAL_IMAGE_CONTAINER)
        if container is None:
            return []
        elements.extend(container.select(GENERAL_IMAGE_SELECTOR))

    images = []
    for element in elements:
        src = (element.get('src') or '').strip()
        if src and src not in images:
            images.append(src)
    return images


def derive_icon(main_image: Optional[str]) -> Optional[str]:
    """由主图 URL 推导图标 URL（pl.jpg -> ps.jpg），没有主图时返回 None"""
    if not main_image:
        return None
    return main_image.replace(MAIN_IMAGE_SUFFIX, ICON_SUFFIX)


def extract_description(soup: BeautifulSoup, category: Category,
                        language: Optional[SupportedLanguage] = None) -> Optional[str]:
    """简介（内部 HTML，去除首尾空白）"""
    element = soup.select_one(selectors_for(category).description)
    if element is None:
        return None
    markup = element.decode_contents().strip()
    return markup or None


def find_description_frame_url(soup: BeautifulSoup, category: Category, page_url: str,
                               marker: str) -> Optional[str]:
    """
    查找推广说明所在的 iframe 并返回绝对 URL（仅 PC 游戏）

    Args:
        soup: 商品页
        category: 页面布局
        page_url: 商品页 URL（用于解析相对地址）
        marker: 区块标题中需要包含的文字

    Returns:
        iframe 的绝对 URL，没有找到返回 None
    """
    if category != Category.GENERAL or not marker:
        return None

    for section in soup.select(FRAME_SECTION_SELECTOR):
        heading = section.select_one(FRAME_HEADING_SELECTOR)
        if heading is None or marker not in heading.get_text():
            continue

        frame = section.select_one(FRAME_SELECTOR)
        if frame is None:
            continue

        src = frame.get('src', '').strip()
        if src:
            return urljoin(page_url, src)
    return None


def extract_frame_markup(frame_soup: BeautifulSoup) -> Optional[str]:
    """
    读取 iframe 页面 body 的内部 HTML，并把接近黑色的内联文字颜色替换为白色
    （宿主程序使用深色主题）
    """
    body = frame_soup.body or frame_soup
    markup = body.decode_contents().strip()
    if not markup:
        return None
    return DARK_COLOR_PATTERN.sub(LIGHT_COLOR, markup)


@dataclass
class InfoPanel:
    """商品信息栏中提取出的字段"""
    release_date: Optional[date] = None
    series: Optional[str] = None
    illustrators: List[str] = field(default_factory=list)
    scenario_writers: List[str] = field(default_factory=list)
    voice_actors: List[str] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)
    musicians: List[str] = field(default_factory=list)


def extract_info_panel(soup: BeautifulSoup, category: Category, language: SupportedLanguage,
                       labels: LabelTable = DEFAULT_LABELS,
                       genre_processor: Optional[GenreProcessor] = None) -> InfoPanel:
    """
    遍历信息栏的每一行，按表头匹配标签表中的字段

    表头与标签是包含关系（不是相等），每行只取第一个匹配的字段，
    无法识别的行被忽略。单行解析失败不影响其他行。

    Args:
        soup: 商品页
        category: 页面布局
        language: 页面语言
        labels: 标签表
        genre_processor: 类型噪声过滤器（默认新建）

    Returns:
        InfoPanel 对象
    """
    selectors = selectors_for(category)
    genre_processor = genre_processor or GenreProcessor()
    panel = InfoPanel()

    for row in soup.select(selectors.info_rows):
        header = _text(row.select_one(selectors.info_header))
        value = row.select_one(selectors.info_value)
        if header is None or value is None:
            continue

        info_field = labels.match(language, header)
        if info_field is None:
            continue

        try:
            if info_field == InfoField.RELEASE_DATE:
                panel.release_date = parse_release_date(value.get_text(), language)
            elif info_field == InfoField.SERIES:
                panel.series = _text(value.select_one('a'))
            elif info_field == InfoField.ILLUSTRATION:
                panel.illustrators = _link_texts(value)
            elif info_field == InfoField.SCENARIO:
                panel.scenario_writers = _link_texts(value)
            elif info_field == InfoField.VOICE_ACTOR:
                panel.voice_actors = _link_texts(value)
            elif info_field == InfoField.GENRE:
                panel.genres = genre_processor.process_genres(_link_texts(value))
            elif info_field == InfoField.MUSIC:
                panel.musicians = _link_texts(value)
        except Exception as e:
            logger.warning(f"信息栏解析失败: {header} - {e}")

    return panel
