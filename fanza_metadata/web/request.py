"""
HTTP 请求封装

每次抓取都创建独立的 Request（独立的 Session 和 Cookie Jar），
按域名预置 FANZA 的年龄认证 Cookie，返回可用 CSS 选择器查询的 DOM 树。
"""

import logging
import requests
import cloudscraper
from cloudscraper.exceptions import CloudflareException
from typing import Dict, Any, Optional
from bs4 import BeautifulSoup
from requests.cookies import RequestsCookieJar
from requests.models import Response

from .exceptions import NetworkError, SiteBlocked, UnknownDomainError

logger = logging.getLogger(__name__)


GENERAL_DOMAIN = 'dlsoft.dmm.co.jp'
DOUJIN_DOMAIN = 'www.dmm.co.jp'

# 各域名需要的年龄认证 Cookie
AGE_CHECK_COOKIES = {
    GENERAL_DOMAIN: {'age_check_done': '1'},
    DOUJIN_DOMAIN: {'age_check_done': '1', 'dc_doujin_age_check_done': '1'},
}


def cookies_for_url(url: str) -> RequestsCookieJar:
    """
    根据 URL 的域名构造预置的 Cookie Jar

    Args:
        url: 目标 URL

    Returns:
        RequestsCookieJar 对象

    Raises:
        UnknownDomainError: 域名不是已知的商品目录（配置错误，不重试）
    """
    for domain, cookies in AGE_CHECK_COOKIES.items():
        if domain in url:
            jar = RequestsCookieJar()
            for name, value in cookies.items():
                jar.set(name, value, domain=domain, path='/')
            return jar

    raise UnknownDomainError(url)


class Request:
    """
    HTTP 请求封装类
    支持自定义 headers、cookies、代理
    支持 CloudFlare 绕过（cloudscraper）
    """

    # 默认 User-Agent 和浏览器请求头（模拟真实浏览器）
    DEFAULT_HEADERS = {
        'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/132.0.0.0 Safari/537.36',
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8',
        'Accept-Language': 'ja-JP,ja;q=0.9,en-US;q=0.8,en;q=0.7',
        'Connection': 'keep-alive',
        'Upgrade-Insecure-Requests': '1',
        'Sec-Fetch-Dest': 'document',
        'Sec-Fetch-Mode': 'navigate',
        'Sec-Fetch-Site': 'none',
        'Sec-Fetch-User': '?1',
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None, cookies: Optional[RequestsCookieJar] = None):
        """
        初始化 Request 对象

        Args:
            config: 配置字典，包含 network 配置
            cookies: 预置的 Cookie Jar（可选）
        """
        self.config = config or {}
        network_config = self.config.get('network', {})

        self.headers = self.DEFAULT_HEADERS.copy()
        self.cookies = cookies if cookies is not None else RequestsCookieJar()

        proxy_server = network_config.get('proxy_server')
        if proxy_server:
            self.proxies = {'http': proxy_server, 'https': proxy_server}
            logger.debug(f"使用代理: {proxy_server}")
        else:
            self.proxies = {}

        # 超时由调用方配置，网络阻塞必须以 NetworkError 的形式返回
        self.timeout = network_config.get('timeout', 30)

        if network_config.get('use_scraper', False):
            self.session = cloudscraper.create_scraper()
        else:
            self.session = requests.Session()

    @classmethod
    def for_url(cls, url: str, config: Optional[Dict[str, Any]] = None) -> 'Request':
        """
        为指定 URL 创建一个新的 Request（按域名预置 Cookie）

        Raises:
            UnknownDomainError: 未知域名
        """
        return cls(config, cookies=cookies_for_url(url))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """关闭底层 Session，释放连接"""
        self.session.close()

    def get(self, url: str, **kwargs) -> Response:
        """
        发送 GET 请求（不自动重试）

        Args:
            url: 请求 URL
            **kwargs: 其他 requests 参数

        Returns:
            Response 对象

        Raises:
            NetworkError: 网络错误或非成功状态码
            SiteBlocked: 站点封锁
        """
        try:
            r = self.session.get(
                url,
                headers=self.headers,
                proxies=self.proxies,
                cookies=self.cookies,
                timeout=self.timeout,
                **kwargs
            )

            # 检查 CloudFlare 封锁
            if r.status_code == 403 and b'>Just a moment...<' in r.content:
                raise SiteBlocked(
                    f"403 Forbidden: 无法通过 CloudFlare 检测: {url}",
                    f"403 Forbidden: Cannot bypass CloudFlare detection: {url}"
                )

            r.raise_for_status()
            return r

        except CloudflareException as e:
            # cloudscraper 无法通过验证时抛出，不属于 requests 的异常体系
            raise SiteBlocked(
                f"CloudFlare 验证失败: {url}",
                f"CloudFlare challenge failed: {url}"
            ) from e
        except requests.exceptions.Timeout as e:
            raise NetworkError(
                f"请求超时: {url}",
                f"Request timeout: {url}"
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(
                f"连接错误: {url}",
                f"Connection error: {url}"
            ) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NetworkError(
                f"请求失败 (HTTP {status}): {url}",
                f"Request failed (HTTP {status}): {url}",
                http_status=status
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"请求失败: {url}",
                f"Request failed: {url}"
            ) from e

    def get_html(self, url: str) -> BeautifulSoup:
        """
        获取 HTML 并解析为 BeautifulSoup 对象（lxml 解析器）
        """
        r = self.get(url)
        # FANZA 页面均为 UTF-8，响应头有时不带 charset
        r.encoding = 'utf-8'
        return BeautifulSoup(r.text, 'lxml')


def fetch_document(url: str, config: Optional[Dict[str, Any]] = None) -> BeautifulSoup:
    """
    抓取单个页面：创建请求、GET、解析，返回后立即释放连接

    Args:
        url: 页面 URL
        config: 配置字典

    Returns:
        BeautifulSoup 对象

    Raises:
        UnknownDomainError: 未知域名
        NetworkError: 网络错误或非成功状态码
    """
    with Request.for_url(url, config) as request:
        logger.debug(f"GET {url}")
        return request.get_html(url)
