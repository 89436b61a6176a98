"""Tests for the headless-browser fetcher, with Playwright mocked out."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from conference_iq.crawler import fetch
from conference_iq.crawler.fetch import PageFetcher, get_remote_endpoint


class FakePlaywright:
    """Mocked Playwright object graph: manager -> playwright -> browser -> context -> page."""

    def __init__(self, status: int = 200, html: str = "<html><body>ok</body></html>", goto_error=None):
        self.page = AsyncMock()
        if goto_error is not None:
            self.page.goto.side_effect = goto_error
        else:
            self.page.goto.return_value = MagicMock(status=status)
        self.page.content.return_value = html

        self.context = AsyncMock()
        self.context.new_page.return_value = self.page

        self.browser = AsyncMock()
        self.browser.new_context.return_value = self.context

        self.playwright = AsyncMock()
        self.playwright.chromium.launch.return_value = self.browser
        self.playwright.chromium.connect_over_cdp.return_value = self.browser

        self.manager = MagicMock()
        self.manager.start = AsyncMock(return_value=self.playwright)


@pytest.fixture
def fake_playwright(monkeypatch):
    def install(**kwargs) -> FakePlaywright:
        fake = FakePlaywright(**kwargs)
        monkeypatch.setattr(fetch, "async_playwright", lambda: fake.manager)
        return fake
    return install


class TestRemoteEndpoint:
    """Tests for remote browser configuration."""

    def test_explicit_endpoint(self, monkeypatch):
        monkeypatch.setenv("BROWSERLESS_WS_ENDPOINT", "ws://browser:3000")
        monkeypatch.setenv("BROWSERLESS_TOKEN", "secret")
        assert get_remote_endpoint() == "ws://browser:3000"

    def test_token(self, monkeypatch):
        monkeypatch.delenv("BROWSERLESS_WS_ENDPOINT", raising=False)
        monkeypatch.setenv("BROWSERLESS_TOKEN", "secret")
        assert get_remote_endpoint() == "wss://chrome.browserless.io?token=secret"

    def test_local(self, monkeypatch):
        monkeypatch.delenv("BROWSERLESS_WS_ENDPOINT", raising=False)
        monkeypatch.delenv("BROWSERLESS_TOKEN", raising=False)
        assert get_remote_endpoint() is None


class TestPageFetcher:
    """Tests for page fetching and session lifetime."""

    @pytest.mark.asyncio
    async def test_fetch_success(self, fake_playwright):
        """Rendered HTML and status are returned; the context is closed."""
        fake = fake_playwright(html="<html><body>DevConf</body></html>")
        fetcher = PageFetcher(endpoint="", headless=True)

        result = await fetcher.fetch("https://devconf.io/", post_load_wait_ms=0)

        assert result.ok
        assert result.status_code == 200
        assert "DevConf" in result.html
        fake.playwright.chromium.launch.assert_awaited_once()
        assert fake.playwright.chromium.launch.await_args.kwargs["headless"] is True
        fake.context.close.assert_awaited_once()
        fake.page.wait_for_timeout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_post_load_wait(self, fake_playwright):
        """A positive grace period is waited after navigation."""
        fake = fake_playwright()
        fetcher = PageFetcher(endpoint="", headless=True)

        await fetcher.fetch("https://devconf.io/", post_load_wait_ms=1500)

        fake.page.wait_for_timeout.assert_awaited_once_with(1500)

    @pytest.mark.asyncio
    async def test_non_200_keeps_html(self, fake_playwright):
        """Error pages still return their HTML."""
        fake_playwright(status=404, html="<html><body>Not found</body></html>")
        fetcher = PageFetcher(endpoint="", headless=True)

        result = await fetcher.fetch("https://devconf.io/missing", post_load_wait_ms=0)

        assert not result.ok
        assert result.status_code == 404
        assert "Not found" in result.html
        assert result.error is None

    @pytest.mark.asyncio
    async def test_navigation_error(self, fake_playwright):
        """Navigation failures come back as status 0 with an error."""
        fake = fake_playwright(goto_error=TimeoutError("Timeout 30000ms exceeded"))
        fetcher = PageFetcher(endpoint="", headless=True)

        result = await fetcher.fetch("https://devconf.io/")

        assert result.status_code == 0
        assert result.error == "Timeout 30000ms exceeded"
        assert result.html == ""
        fake.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_response(self, fake_playwright):
        fake = fake_playwright()
        fake.page.goto.return_value = None
        fetcher = PageFetcher(endpoint="", headless=True)

        result = await fetcher.fetch("https://devconf.io/")

        assert result.error == "No response from page"
        fake.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_browser_reused(self, fake_playwright):
        """One browser session serves every fetch until close."""
        fake = fake_playwright()
        fetcher = PageFetcher(endpoint="", headless=True)

        await fetcher.fetch("https://devconf.io/", post_load_wait_ms=0)
        await fetcher.fetch("https://devconf.io/agenda", post_load_wait_ms=0)

        fake.manager.start.assert_awaited_once()
        assert fake.browser.new_context.await_count == 2

    @pytest.mark.asyncio
    async def test_remote_endpoint(self, fake_playwright):
        """A configured endpoint connects instead of launching."""
        fake = fake_playwright()
        fetcher = PageFetcher(endpoint="ws://browser:3000")

        await fetcher.fetch("https://devconf.io/", post_load_wait_ms=0)

        fake.playwright.chromium.connect_over_cdp.assert_awaited_once_with("ws://browser:3000")
        fake.playwright.chromium.launch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_launch_failure_stops_playwright(self, fake_playwright):
        """A failed launch releases Playwright and reports the error."""
        fake = fake_playwright()
        fake.playwright.chromium.launch.side_effect = RuntimeError("Executable doesn't exist")
        fetcher = PageFetcher(endpoint="", headless=True)

        result = await fetcher.fetch("https://devconf.io/")

        assert result.status_code == 0
        assert "Executable" in result.error
        fake.playwright.stop.assert_awaited_once()
        assert not fetcher.is_started

    @pytest.mark.asyncio
    async def test_close(self, fake_playwright):
        """close() shuts the browser and stops Playwright."""
        fake = fake_playwright()
        async with PageFetcher(endpoint="", headless=True) as fetcher:
            await fetcher.fetch("https://devconf.io/", post_load_wait_ms=0)
            assert fetcher.is_started

        fake.browser.close.assert_awaited_once()
        fake.playwright.stop.assert_awaited_once()
        assert not fetcher.is_started

    @pytest.mark.asyncio
    async def test_close_without_start(self):
        """Closing an unused fetcher is a no-op."""
        fetcher = PageFetcher(endpoint="", headless=True)
        await fetcher.close()
        assert not fetcher.is_started
