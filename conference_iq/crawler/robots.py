"""robots.txt politeness gate.

Fetches and parses ``{origin}/robots.txt`` before a page is requested. The gate
only reports; sleeping for a crawl delay is the caller's job. An unreadable
robots.txt never blocks crawling.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit
from urllib.robotparser import RobotFileParser

import httpx
from rich.console import Console

console = Console()

ROBOTS_TIMEOUT = 10.0  # seconds


@dataclass
class RobotsCheckResult:
    """Allow/deny decision for one URL."""

    allowed: bool
    crawl_delay: Optional[float] = None  # seconds
    reason: Optional[str] = None


def robots_url_for(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/robots.txt"


def parse_robots(robots_url: str, text: str) -> RobotFileParser:
    parser = RobotFileParser(robots_url)
    parser.parse(text.splitlines())
    return parser


async def _fetch_robots(
    client: httpx.AsyncClient,
    robots_url: str,
    user_agent: str,
) -> httpx.Response:
    return await client.get(robots_url, headers={"User-Agent": user_agent})


async def check_robots_txt(
    url: str,
    user_agent: str,
    timeout: float = ROBOTS_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> RobotsCheckResult:
    """Decide whether ``user_agent`` may fetch ``url``.

    Args:
        url: Page URL to check
        user_agent: User-Agent the page will be requested with
        timeout: robots.txt request timeout in seconds
        client: Optional shared client (a short-lived one is created otherwise)

    Returns:
        RobotsCheckResult. ``allowed`` is False only on an explicit disallow
        matching the path; every error path returns allowed with a reason.
    """
    try:
        robots_url = robots_url_for(url)

        if client is not None:
            response = await _fetch_robots(client, robots_url, user_agent)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await _fetch_robots(own_client, robots_url, user_agent)

        if not response.is_success:
            return RobotsCheckResult(
                allowed=True,
                reason=f"robots.txt not found or inaccessible (HTTP {response.status_code})",
            )

        parser = parse_robots(robots_url, response.text)

        if not parser.can_fetch(user_agent, url):
            return RobotsCheckResult(allowed=False, reason="Blocked by robots.txt")

        delay = parser.crawl_delay(user_agent)
        if delay and delay > 0:
            return RobotsCheckResult(
                allowed=True,
                crawl_delay=float(delay),
                reason=f"Allowed with crawl delay of {delay}s",
            )

        return RobotsCheckResult(allowed=True)

    except Exception as e:
        console.print(f"[yellow]Failed to check robots.txt for {url}: {e}[/yellow]")
        return RobotsCheckResult(
            allowed=True,
            reason=f"robots.txt check failed: {type(e).__name__}: {e}",
        )
