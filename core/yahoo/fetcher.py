"""
Page fetchers - how the raw auction HTML is obtained.

Design Patterns:
    - Strategy Pattern: the pipeline depends on PageFetcher only
    - Factory Pattern: get_page_fetcher() picks the configured backend

Backends:
    - HttpPageFetcher: single GET via curl_cffi impersonating Chrome (default)
    - BrowserPageFetcher: headless Chromium via Playwright, for pages that only
      render their data client side

Neither backend retries. A failed fetch raises UpstreamFetchError and the
request ends there.
"""

import time
from abc import ABC, abstractmethod
from typing import Literal, Optional

from curl_cffi import CurlError, requests

from core.config import config
from core.errors import UpstreamFetchError
from core.logging import get_logger
from core.yahoo.urls import percent_encode_url

logger = get_logger("page-fetcher")


class PageFetcher(ABC):
    """Fetches the HTML of a page."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """
        Fetch a page.

        Args:
            url: Absolute page URL

        Returns:
            Page HTML

        Raises:
            UpstreamFetchError: network failure or non-2xx status
        """
        pass


class HttpPageFetcher(PageFetcher):
    """
    Single GET through curl_cffi with browser TLS impersonation.

    Example:
        fetcher = HttpPageFetcher()
        html = fetcher.fetch("https://auctions.yahoo.co.jp/jp/auction/x1234567890")
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        impersonate: Optional[str] = None,
        session=None,
    ):
        self.user_agent = user_agent or config.FETCH_USER_AGENT
        self.timeout = timeout or config.FETCH_TIMEOUT_SECONDS
        self.impersonate = impersonate or config.FETCH_IMPERSONATE
        self._session = session

    @property
    def session(self):
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
            "Upgrade-Insecure-Requests": "1",
        }

    @staticmethod
    def _decode(response) -> str:
        # An unknown declared charset falls back to UTF-8
        charset = response.encoding or "utf-8"
        try:
            return response.content.decode(charset, errors="replace")
        except LookupError:
            return response.content.decode("utf-8", errors="replace")

    def fetch(self, url: str) -> str:
        start_time = time.time()
        url = percent_encode_url(url)

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
                impersonate=self.impersonate,
            )
        except (CurlError, OSError) as e:
            logger.error(f"Upstream request failed: {e}", extra={"url": url})
            raise UpstreamFetchError(f"Failed to fetch Yahoo page ({e})")

        if not 200 <= response.status_code < 300:
            logger.warning(
                f"Upstream answered {response.status_code}",
                extra={"url": url, "status_code": response.status_code},
            )
            raise UpstreamFetchError(
                f"Failed to fetch Yahoo page ({response.status_code})",
                upstream_status=response.status_code,
            )

        html = self._decode(response)
        logger.debug(
            "Fetched auction page",
            extra={
                "url": url,
                "bytes": len(html),
                "latency_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return html


class BrowserPageFetcher(PageFetcher):
    """
    Headless Chromium fetcher.

    Example:
        fetcher = BrowserPageFetcher(headless=False)
        html = fetcher.fetch("https://auctions.yahoo.co.jp/jp/auction/x1234567890")
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.headless = headless
        self.user_agent = user_agent or config.FETCH_USER_AGENT
        self.timeout = timeout or config.FETCH_TIMEOUT_SECONDS

    def fetch(self, url: str) -> str:
        from playwright.sync_api import sync_playwright, Error as PlaywrightError

        start_time = time.time()
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=self.headless)
                try:
                    context = browser.new_context(
                        viewport={"width": 1920, "height": 1080},
                        user_agent=self.user_agent,
                        locale="ja-JP",
                        timezone_id="Asia/Tokyo",
                    )
                    page = context.new_page()
                    response = page.goto(url, wait_until="domcontentloaded", timeout=self.timeout * 1000)

                    if response is None or not response.ok:
                        status = response.status if response is not None else None
                        logger.warning(
                            f"Upstream answered {status}",
                            extra={"url": url, "status_code": status},
                        )
                        raise UpstreamFetchError(
                            f"Failed to fetch Yahoo page ({status})", upstream_status=status
                        )

                    html = page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.error(f"Browser fetch failed: {e}", extra={"url": url})
            raise UpstreamFetchError(f"Failed to fetch Yahoo page ({e})")

        logger.debug(
            "Fetched auction page with browser",
            extra={
                "url": url,
                "bytes": len(html),
                "latency_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return html


def get_page_fetcher(
    kind: Optional[Literal["http", "browser"]] = None,
    headless: bool = True,
) -> PageFetcher:
    """
    Build the configured page fetcher.

    Args:
        kind: "http" or "browser" (defaults to YAHOO_FETCHER)
        headless: Browser mode only

    Returns:
        PageFetcher instance
    """
    kind = kind or config.FETCHER
    if kind == "http":
        return HttpPageFetcher()
    if kind == "browser":
        return BrowserPageFetcher(headless=headless)
    raise ValueError(f"Unsupported page fetcher: {kind}")
