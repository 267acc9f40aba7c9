#!/usr/bin/env python3
"""
FANZA Metadata Plugin - 主入口
通过 stdin/stdout 与主程序通信（每行一个 JSON 请求 / 响应）
"""

import sys
import json
import logging
import io
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Any, Optional, TextIO

from . import __version__
from .core.category import CategoryDetector
from .core.config_loader import load_config
from .managers.fanza_scraper_manager import FanzaScraperManager
from .managers.result_manager import ResultManager


PLUGIN_ID = 'fanza_metadata'
PLUGIN_NAME = 'FANZA Metadata'


def emit_progress(current: int, total: int, item_name: str, status: str, error: Optional[str] = None):
    """
    输出进度到 stderr（实时流式输出）

    Args:
        current: 当前进度
        total: 总数
        item_name: 当前处理的项目名称
        status: 状态 ("scraping", "completed", "failed")
        error: 错误信息（可选）
    """
    progress = {
        "current": current,
        "total": total,
        "item_name": item_name,
        "status": status
    }
    if error:
        progress["error"] = error

    print(f"PROGRESS:{json.dumps(progress, ensure_ascii=False)}", file=sys.stderr, flush=True)


def _error_response(category: str, message_zh: str, message_en: str,
                    suggestions_zh: Optional[list] = None, suggestions_en: Optional[list] = None) -> Dict[str, Any]:
    """构造结构化错误响应（与 StructuredError.to_dict() 的主要字段一致）"""
    return {
        'success': False,
        'error': {
            'category': category,
            'message': {
                'zh': message_zh,
                'en': message_en
            },
            'suggestions': {
                'zh': suggestions_zh or [],
                'en': suggestions_en or []
            }
        }
    }


class PluginMain:
    """插件主入口"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化插件

        Args:
            config: 配置字典（默认从 config/config.yml 加载）
        """
        self.config = config if config is not None else load_config()

        # 设置日志（写入文件，避免干扰 stdout）
        self._setup_logging()

        self.result_manager = ResultManager()
        self._manager = None

        self.logger.info("Plugin initialized")

    def _setup_logging(self):
        """设置日志"""
        log_config = self.config.get('logging', {})
        log_level = str(log_config.get('level', 'INFO')).upper()
        log_file = log_config.get('log_file', 'fanza_metadata.log')
        log_format = log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        # 配置日志到文件
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format=log_format,
            filename=log_file,
            filemode='a',
            encoding='utf-8'
        )

        self.logger = logging.getLogger(__name__)

    @property
    def manager(self) -> FanzaScraperManager:
        """延迟加载刮削管理器"""
        if self._manager is None:
            self._manager = FanzaScraperManager(self.config)
        return self._manager

    def run(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        """
        运行插件主循环

        Args:
            stdin: 请求输入流（默认 sys.stdin）
            stdout: 响应输出流（默认 sys.stdout）
        """
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        self.logger.info("Plugin started")

        def write(response: Dict[str, Any]):
            print(json.dumps(response, ensure_ascii=False), file=stdout)
            stdout.flush()

        try:
            for line in stdin:
                line = line.strip()
                if not line:
                    continue

                try:
                    request = json.loads(line)
                    self.logger.debug(f"Received request: {request}")
                    write(self.handle_request(request))

                except json.JSONDecodeError as e:
                    self.logger.error(f"JSON decode error: {e}")
                    write(_error_response('invalid_input', f'无效的 JSON: {e}', f'Invalid JSON: {e}'))

                except Exception as e:
                    self.logger.exception(f"Unexpected error: {e}")
                    write(_error_response('unknown', f'内部错误: {e}', f'Internal error: {e}',
                                          ['📋 查看日志了解详情'], ['📋 Check logs for details']))

        except KeyboardInterrupt:
            self.logger.info("Plugin interrupted by user")

        finally:
            self.logger.info("Plugin stopped")

    def handle_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        处理请求

        Args:
            request: 请求字典，包含 action 字段

        Returns:
            响应字典
        """
        if not isinstance(request, dict):
            return _error_response('invalid_input', '请求必须是 JSON 对象', 'Request must be a JSON object')

        action = request.get('action')

        if action == 'info':
            return self._handle_info()
        elif action == 'get':
            return self._handle_get(request)
        elif action == 'search':
            return self._handle_search(request)
        elif action == 'batch_get':
            return self._handle_batch_get(request)
        else:
            return _error_response('invalid_input', f'未知操作: {action}', f'Unknown action: {action}')

    def _handle_info(self) -> Dict[str, Any]:
        """返回插件信息"""
        return {
            'success': True,
            'data': {
                'id': PLUGIN_ID,
                'name': PLUGIN_NAME,
                'version': __version__,
                'description': 'FANZA PC 游戏 / 同人游戏元数据刮削插件',
                'author': 'Media Manager',
                'url_patterns': [
                    r'https://dlsoft\.dmm\.co\.jp/detail/[a-z0-9_]+/',
                    r'https://www\.dmm\.co\.jp/dc/doujin/-/detail/=/cid=[a-z0-9_]+',
                ],
                'supports_search': True
            }
        }

    def _handle_get(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        刮削单个商品页，链接无效时按名称搜索候选

        Args:
            request: 请求字典，包含：
                - id / url: 商品详情页 URL
                - name: 游戏名（可选，链接无效时用于搜索）
                - language: 页面语言（可选）

        Returns:
            - 商品页结果：{success: true, mode: 'single', data: {...}}
            - 搜索候选：{success: true, mode: 'multiple', total_count, results: [...]}
        """
        link = (request.get('url') or request.get('id') or '').strip()
        name = (request.get('name') or '').strip()
        language = request.get('language')

        if not link and not name:
            return _error_response(
                'invalid_input', '缺少 id / url 参数', 'Missing id / url parameter',
                ['🔗 提供 FANZA 商品详情页链接', '🔍 或提供游戏名'],
                ['🔗 Provide a FANZA product URL', '🔍 Or provide a game title']
            )

        self.logger.info(f"Get: link={link!r}, name={name!r}")
        record, candidates, error = self.manager.get(link or None, name or None, language)

        if record:
            return self.result_manager.create_single_response(record).to_dict()

        if candidates:
            return self.result_manager.create_multiple_response(candidates).to_dict()

        if error:
            return {'success': False, 'error': error.to_dict()}

        return _error_response(
            'not_found', f'未找到结果: {name or link}', f'No results found: {name or link}',
            ['🔍 尝试其他关键词', '🔄 或切换搜索分类'],
            ['🔍 Try other keywords', '🔄 Or switch the search category']
        )

    def _handle_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        搜索

        Args:
            request: 请求字典，包含：
                - query: 搜索关键词
                - category: ALL / PC Games / Doujin Games（可选）
                - language: Japanese / English（可选）
                - max_results: 最大结果数（可选）

        Returns:
            {success: true, total_count, results: [...]}
        """
        query = (request.get('query') or '').strip()
        if not query:
            return _error_response('invalid_input', '缺少 query 参数', 'Missing query parameter')

        max_results = request.get('max_results')
        if max_results is not None:
            try:
                max_results = int(max_results)
            except (TypeError, ValueError):
                return _error_response('invalid_input', f'无效的 max_results: {max_results}',
                                       f'Invalid max_results: {max_results}')
            if max_results < 0:
                return _error_response('invalid_input', f'max_results 不能为负数: {max_results}',
                                       f'max_results must not be negative: {max_results}')

        results, error_aggregator = self.manager.search_with_errors(
            query,
            category=request.get('category'),
            max_results=max_results,
            language=request.get('language')
        )

        response = {
            'success': True,
            'total_count': len(results),
            'results': [r.to_dict() for r in results]
        }
        if error_aggregator.has_errors():
            response['errors'] = error_aggregator.get_summary()
        return response

    def _handle_batch_get(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        批量刮削商品页

        Args:
            request: 请求字典，包含：
                - urls: 商品详情页 URL 列表
                - concurrent: 是否并发（布尔值）
                - language: 页面语言（可选）

        Returns:
            {success: true, data: [{url, success, data | error}, ...]}（保持输入顺序）
        """
        urls = request.get('urls', [])
        concurrent = request.get('concurrent', False)
        language = request.get('language')

        if not urls or not isinstance(urls, list):
            return _error_response('invalid_input', 'urls 必须是非空列表', 'urls must be a non-empty list')

        self.logger.info(f"Batch scraping {len(urls)} urls (concurrent={concurrent})")

        total = len(urls)
        completed_count = 0
        progress_lock = threading.Lock()

        def scrape_with_progress(url: str) -> Dict[str, Any]:
            nonlocal completed_count
            with progress_lock:
                emit_progress(completed_count + 1, total, url, "scraping")

            record, error = self.manager.scrape_with_error(url, language)
            if record:
                result = {'url': url, 'success': True, 'data': record.to_dict()}
            else:
                result = {'url': url, 'success': False, 'error': error.to_dict() if error else None}

            with progress_lock:
                completed_count += 1
                status = "completed" if record else "failed"
                emit_progress(completed_count, total, url, status, None if record else (error and error.message_en))
            return result

        if not concurrent:
            results = [scrape_with_progress(url) for url in urls]
        else:
            max_workers = self.config.get('network', {}).get('max_concurrent_workers', 4)
            results = [None] * total
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_index = {executor.submit(scrape_with_progress, url): i for i, url in enumerate(urls)}
                for future in as_completed(future_to_index):
                    results[future_to_index[future]] = future.result()

        success_count = sum(1 for r in results if r['success'])
        self.logger.info(f"Batch scrape complete: {success_count} success, {total - success_count} failed")
        return {
            'success': True,
            'data': results
        }


def main():
    """主函数"""
    # 设置 stdin/stdout 为 UTF-8 编码
    sys.stdin = io.TextIOWrapper(sys.stdin.buffer, encoding='utf-8')
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', line_buffering=True)
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', line_buffering=True)

    plugin = PluginMain()
    plugin.run()


if __name__ == '__main__':
    main()
