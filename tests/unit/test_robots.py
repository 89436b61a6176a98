"""Tests for the robots.txt gate."""

import httpx
import pytest

from conference_iq.crawler.robots import check_robots_txt, robots_url_for

USER_AGENT = "conference-iq/1.0"


def robots_client(status: int = 200, body: str = "", error: Exception = None):
    """Client answering every request with a canned robots.txt, plus the requested URLs."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        if error is not None:
            raise error
        return httpx.Response(status, text=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requested


class TestRobotsUrl:
    @pytest.mark.parametrize("url,expected", [
        ("https://devconf.io/agenda?day=1", "https://devconf.io/robots.txt"),
        ("http://devconf.io:8080/x/y", "http://devconf.io:8080/robots.txt"),
    ])
    def test_robots_url_for(self, url: str, expected: str):
        """robots.txt always lives at the origin root."""
        assert robots_url_for(url) == expected


class TestCheckRobotsTxt:
    """Tests for the allow/deny decision."""

    @pytest.mark.asyncio
    async def test_disallowed_path(self):
        """A matching Disallow rule blocks the URL."""
        client, requested = robots_client(body="User-agent: *\nDisallow: /private\n")
        result = await check_robots_txt("https://devconf.io/private/page", USER_AGENT, client=client)

        assert result.allowed is False
        assert result.reason == "Blocked by robots.txt"
        assert requested == ["https://devconf.io/robots.txt"]

    @pytest.mark.asyncio
    async def test_allowed_path(self):
        """Paths outside Disallow rules are allowed without a delay."""
        client, _ = robots_client(body="User-agent: *\nDisallow: /private\n")
        result = await check_robots_txt("https://devconf.io/agenda", USER_AGENT, client=client)

        assert result.allowed is True
        assert result.crawl_delay is None
        assert result.reason is None

    @pytest.mark.asyncio
    async def test_agent_specific_rule(self):
        """Rules for our own user agent apply."""
        client, _ = robots_client(body="User-agent: conference-iq\nDisallow: /\n")
        result = await check_robots_txt("https://devconf.io/", USER_AGENT, client=client)
        assert result.allowed is False

    @pytest.mark.asyncio
    async def test_crawl_delay(self):
        """Crawl-delay is reported, not slept."""
        client, _ = robots_client(body="User-agent: *\nCrawl-delay: 5\n")
        result = await check_robots_txt("https://devconf.io/", USER_AGENT, client=client)

        assert result.allowed is True
        assert result.crawl_delay == 5.0
        assert "crawl delay" in result.reason

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500])
    async def test_missing_robots_allows(self, status: int):
        """An unreadable robots.txt never blocks crawling."""
        client, _ = robots_client(status=status)
        result = await check_robots_txt("https://devconf.io/", USER_AGENT, client=client)

        assert result.allowed is True
        assert f"HTTP {status}" in result.reason

    @pytest.mark.asyncio
    async def test_network_error_allows(self):
        """Network failures fail open with the error as reason."""
        client, _ = robots_client(error=httpx.ConnectError("connection refused"))
        result = await check_robots_txt("https://devconf.io/", USER_AGENT, client=client)

        assert result.allowed is True
        assert result.reason.startswith("robots.txt check failed: ConnectError")
