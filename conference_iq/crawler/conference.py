"""Conference crawler: robots gate + headless fetch + the five extractors.

One call handles one URL. There is no link following and no retry; a
failed fetch comes back as a result with ``error`` set and an empty bundle.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from rich.console import Console

from conference_iq.crawler.fetch import DEFAULT_USER_AGENT, PageFetcher
from conference_iq.crawler.robots import check_robots_txt
from conference_iq.crawler.urls import is_valid_conference_url, normalize_url
from conference_iq.extractors import (
    ParsedPage,
    extract_basic_info,
    extract_contact,
    extract_exhibitors,
    extract_pricing,
    extract_speakers,
)
from conference_iq.models import (
    BasicInfo,
    ExtractedContact,
    ExtractedPricing,
    ExtractionBundle,
)

console = Console()

# Conference sites tend to be heavy and client-side rendered
CONFERENCE_TIMEOUT_MS = 60_000
CONFERENCE_POST_LOAD_WAIT_MS = 3_000

# (bundle field, extractor, default factory)
EXTRACTORS: list[tuple[str, Callable, Callable]] = [
    ("basic_info", extract_basic_info, BasicInfo),
    ("speakers", extract_speakers, list),
    ("exhibitors", extract_exhibitors, list),
    ("pricing", extract_pricing, ExtractedPricing),
    ("contact", extract_contact, ExtractedContact),
]


@dataclass
class ConferenceCrawlResult:
    """Raw page plus everything extracted from it."""

    url: str
    html: str = ""
    status_code: int = 0
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: ExtractionBundle = field(default_factory=ExtractionBundle)
    blocked_by_robots: bool = False
    crawl_delay: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200


class ConferenceCrawler:
    """Crawl one conference page and extract structured data from it."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        respect_robots_txt: bool = True,
        timeout_ms: int = CONFERENCE_TIMEOUT_MS,
        post_load_wait_ms: int = CONFERENCE_POST_LOAD_WAIT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
        robots_client: Optional[httpx.AsyncClient] = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.respect_robots_txt = respect_robots_txt
        self.timeout_ms = timeout_ms
        self.post_load_wait_ms = post_load_wait_ms
        self.user_agent = user_agent
        self.robots_client = robots_client

    def normalize_url(self, url: str) -> str:
        return normalize_url(url)

    def is_valid_conference_url(self, url: str) -> bool:
        return is_valid_conference_url(url)

    async def crawl(self, url: str) -> ConferenceCrawlResult:
        """Gate, fetch and extract one URL.

        Returns:
            ConferenceCrawlResult. A robots.txt denial comes back as status 403
            with ``blocked_by_robots`` set; any other fetch failure keeps the
            fetcher's status and error. ``data`` is only filled for a 200 page.
        """
        crawl_delay = None

        if self.respect_robots_txt:
            robots = await check_robots_txt(url, self.user_agent, client=self.robots_client)
            if not robots.allowed:
                console.print(f"[yellow]Blocked by robots.txt: {url}[/yellow]")
                return ConferenceCrawlResult(
                    url=url,
                    status_code=403,
                    error=robots.reason or "Blocked by robots.txt",
                    blocked_by_robots=True,
                )

            if robots.crawl_delay:
                crawl_delay = robots.crawl_delay
                console.print(f"[dim]Respecting crawl delay of {crawl_delay}s for {url}[/dim]")
                await asyncio.sleep(crawl_delay)

        fetched = await self.fetcher.fetch(
            url,
            timeout_ms=self.timeout_ms,
            post_load_wait_ms=self.post_load_wait_ms,
            user_agent=self.user_agent,
        )

        result = ConferenceCrawlResult(
            url=fetched.url,
            html=fetched.html,
            status_code=fetched.status_code,
            error=fetched.error,
            timestamp=fetched.timestamp,
            crawl_delay=crawl_delay,
        )

        if not result.ok:
            return result

        result.data = self.extract(result.html, url)
        return result

    def extract(self, html: str, url: str) -> ExtractionBundle:
        """Run every extractor over one parsed page.

        An extractor that raises contributes its empty default instead of
        failing the whole crawl.
        """
        page = ParsedPage.from_html(html, url)
        values = {}
        for name, extractor, default in EXTRACTORS:
            try:
                values[name] = extractor(page)
            except Exception as e:
                console.print(f"[yellow]{name} extraction failed for {url[:80]}: {e}[/yellow]")
                values[name] = default()
        return ExtractionBundle(**values)

    async def close(self) -> None:
        await self.fetcher.close()

    async def __aenter__(self) -> "ConferenceCrawler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
