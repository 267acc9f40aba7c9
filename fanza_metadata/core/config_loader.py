"""
配置加载器
从 config.yml 加载插件配置，并提供搜索设置的辅助方法
"""

import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional

from .category import Category, parse_category
from .language import SupportedLanguage, LANGUAGE_NAMES, parse_language


DEFAULT_CONFIG_FILE = "config/config.yml"

# 各分类的搜索入口
SEARCH_BASE_URLS = {
    Category.GENERAL: 'https://dlsoft.dmm.co.jp/',
    Category.DOUJIN: 'https://www.dmm.co.jp/',
}

SEARCH_PATHS = {
    Category.GENERAL: 'search/?service=pcgame&floor=digital_pcgame&searchstr=',
    Category.DOUJIN: 'dc/doujin/-/search/=/searchstr=',
}

DEFAULT_SEARCH_PARAMETERS = {
    Category.GENERAL: '',
    Category.DOUJIN: '/n1=AgReSwMKX1VZCFQCloTHi8SF/',
}

AVAILABLE_SEARCH_CATEGORIES = [Category.ALL.value, Category.GENERAL.value, Category.DOUJIN.value]
AVAILABLE_LANGUAGES = list(LANGUAGE_NAMES.keys())
MAX_SEARCH_RESULTS_STEPS = [30, 50, 100]


def load_config(config_file: str = DEFAULT_CONFIG_FILE) -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_file: 配置文件路径（相对路径以包根目录为基准）

    Returns:
        配置字典（缺失的配置项用默认值补全）
    """
    config_path = Path(config_file)
    if not config_path.is_absolute():
        # 包根目录（core 的父目录）
        config_path = Path(__file__).parent.parent / config_file

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        return _get_default_config()
    except Exception as e:
        raise RuntimeError(f"配置文件加载失败: {e}")

    return _merge_defaults(config or {})


def _merge_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """用默认配置补全缺失的节和键"""
    merged = _get_default_config()
    for section, values in config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def _get_default_config() -> Dict[str, Any]:
    """返回默认配置"""
    return {
        'network': {
            'proxy_server': None,
            'timeout': 30,
            'use_scraper': False,
            'max_concurrent_workers': 4
        },
        'search': {
            'category': Category.ALL.value,
            'language': 'Japanese',
            'max_results': 30,
            'parameters': {}
        },
        'description': {
            'frame_marker': '作品紹介',
            'spacer': '<br><br>'
        },
        'logging': {
            'level': 'INFO',
            'log_file': 'fanza_metadata.log',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }


class FanzaSettings:
    """
    搜索设置（对应宿主程序设置界面中的分类 / 语言 / 结果数）
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        search_config = (config or {}).get('search', {})
        self.search_category = search_config.get('category', Category.ALL.value)
        self.page_language = search_config.get('language', 'Japanese')
        self.max_search_results = search_config.get('max_results', 30)
        self._custom_parameters = {
            parse_category(name): value
            for name, value in (search_config.get('parameters') or {}).items()
        }

    def get_supported_language(self) -> SupportedLanguage:
        return parse_language(self.page_language)

    def get_category(self) -> Category:
        return parse_category(self.search_category)

    @staticmethod
    def get_search_category_base_url(category: Category) -> str:
        """ALL 和未知分类使用 PC 游戏的入口"""
        return SEARCH_BASE_URLS.get(category, SEARCH_BASE_URLS[Category.GENERAL])

    @staticmethod
    def get_search_path(category: Category) -> str:
        return SEARCH_PATHS.get(category, SEARCH_PATHS[Category.GENERAL])

    @staticmethod
    def get_default_parameters(category: Category) -> str:
        return DEFAULT_SEARCH_PARAMETERS.get(category, '')

    def get_search_parameters(self, category: Category) -> str:
        """优先使用配置中的自定义参数"""
        if category in self._custom_parameters:
            return self._custom_parameters[category]
        return self.get_default_parameters(category)

    def verify(self) -> List[str]:
        """
        校验设置

        Returns:
            错误消息列表（为空表示设置有效）
        """
        errors = []

        if self.search_category not in AVAILABLE_SEARCH_CATEGORIES:
            errors.append("Selected category is not supported.")

        if self.page_language not in AVAILABLE_LANGUAGES:
            errors.append("Selected language is not supported.")

        if self.max_search_results not in MAX_SEARCH_RESULTS_STEPS:
            errors.append("Selected search results is not in the list of steps.")

        return errors


def get_frame_settings(config: Dict[str, Any]) -> Dict[str, str]:
    """返回描述 iframe 的设置（标记文字和分隔符）"""
    settings = dict(_get_default_config()['description'])
    settings.update((config or {}).get('description') or {})
    return settings
