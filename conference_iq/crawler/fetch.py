"""Headless-browser page fetcher.

One Playwright Chromium session per fetcher: started lazily on the first fetch,
reused for every following fetch, released by ``close()``. Connects to a remote
browser (Browserless) when ``BROWSERLESS_WS_ENDPOINT`` or ``BROWSERLESS_TOKEN``
is set, launches a local headless Chromium otherwise.

``fetch`` never raises: navigation errors come back as ``status_code=0`` with
an ``error`` string.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright
from rich.console import Console

console = Console()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_POST_LOAD_WAIT_MS = 2_000

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
]

VIEWPORT = {"width": 1920, "height": 1080}


def get_remote_endpoint() -> Optional[str]:
    """Remote browser endpoint from the environment, if configured."""
    endpoint = os.environ.get("BROWSERLESS_WS_ENDPOINT")
    if endpoint:
        return endpoint
    token = os.environ.get("BROWSERLESS_TOKEN")
    if token:
        return f"wss://chrome.browserless.io?token={token}"
    return None


@dataclass
class FetchResult:
    """Rendered page, or the reason it could not be rendered."""

    url: str
    html: str = ""
    status_code: int = 0
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200


class PageFetcher:
    """Scoped headless browser session.

    Use as ``async with PageFetcher() as fetcher`` or call ``close()`` in a
    ``finally`` block; the browser is torn down on every exit path.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        headless: Optional[bool] = None,
    ):
        self.endpoint = endpoint if endpoint is not None else get_remote_endpoint()
        if headless is None:
            headless = os.environ.get("CRAWLER_HEADLESS", "1") != "0"
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def is_started(self) -> bool:
        return self._browser is not None

    async def _ensure_browser(self) -> Browser:
        if self._browser is not None:
            return self._browser

        self._playwright = await async_playwright().start()
        try:
            if self.endpoint:
                console.print("[dim]Connecting to remote browser...[/dim]")
                self._browser = await self._playwright.chromium.connect_over_cdp(self.endpoint)
            else:
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless,
                    args=LAUNCH_ARGS,
                )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        return self._browser

    async def fetch(
        self,
        url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        post_load_wait_ms: int = DEFAULT_POST_LOAD_WAIT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> FetchResult:
        """Load ``url`` and return the rendered HTML and HTTP status.

        Args:
            url: Page to load
            timeout_ms: Hard navigation timeout
            post_load_wait_ms: Flat grace period after navigation settles,
                for client-side rendered content
            user_agent: User-Agent for the browser context
            extra_headers: Merged over the default request headers

        Returns:
            FetchResult. HTML is returned even for non-200 responses.
        """
        try:
            browser = await self._ensure_browser()
            context = await browser.new_context(
                user_agent=user_agent,
                viewport=VIEWPORT,
                locale="en-US",
                extra_http_headers={**DEFAULT_HEADERS, **(extra_headers or {})},
            )
            try:
                page = await context.new_page()
                response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                if response is None:
                    return FetchResult(url=url, error="No response from page")

                if post_load_wait_ms > 0:
                    await page.wait_for_timeout(post_load_wait_ms)

                html = await page.content()
                return FetchResult(url=url, html=html, status_code=response.status)
            finally:
                await context.close()

        except Exception as e:
            console.print(f"[yellow]Fetch failed for {url[:80]}: {e}[/yellow]")
            return FetchResult(url=url, error=str(e) or type(e).__name__)

    async def close(self) -> None:
        """Disconnect from / close the browser and stop Playwright."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
