"""Shared test fixtures and configuration."""

from typing import Optional

import pytest

from conference_iq.crawler.conference import ConferenceCrawler, ConferenceCrawlResult
from conference_iq.crawler.fetch import FetchResult
from conference_iq.storage import JSONConferenceStore

CONFERENCE_HTML = """
<html>
<head><title>DevConf 2024 | Home</title></head>
<body>
  <nav>
    <ul>
      <li><a href="/">Home</a></li>
      <li><a href="/agenda">Agenda</a></li>
      <li><a href="/tickets">Tickets</a></li>
    </ul>
  </nav>
  <h1>DevConf 2024</h1>
  <p class="event-dates">January 15, 2024 - January 17, 2024</p>
  <p class="event-location">San Francisco, United States</p>
  <p>Join 5,000+ attendees for three days of software and AI talks.</p>

  <section class="speakers">
    <h2>Speakers</h2>
    <div class="speaker-card">
      <h3 class="speaker-name">Jane Doe</h3>
      <p class="speaker-title">CTO at Acme Corp</p>
    </div>
    <div class="speaker-card">
      <h3 class="speaker-name">John Smith</h3>
      <p class="speaker-title">Principal Engineer, Globex</p>
    </div>
  </section>

  <section class="sponsors">
    <h2>Our Sponsors</h2>
    <div class="sponsor-card">
      <h4>Initech</h4>
      <p>Gold Sponsor - $25,000</p>
    </div>
    <div class="sponsor-card">
      <h4>Umbrella</h4>
      <p>Bronze Sponsor</p>
    </div>
  </section>

  <section class="tickets">
    <p>Early Bird: $499</p>
    <p>Regular: $799</p>
    <p>Student: $99</p>
  </section>

  <footer>
    <div class="contact">
      <h3>Organized by DevConf Foundation</h3>
      <a href="mailto:hello@devconf.io">Email us</a>
      <a href="tel:+1-555-123-4567">Call us</a>
    </div>
  </footer>
</body>
</html>
"""

NAMELESS_HTML = """
<html><body>
  <div>
    <p>lorem ipsum</p>
  </div>
</body></html>
"""


@pytest.fixture
def conference_html() -> str:
    return CONFERENCE_HTML


@pytest.fixture
def nameless_html() -> str:
    return NAMELESS_HTML


@pytest.fixture
def store(tmp_path) -> JSONConferenceStore:
    """Empty JSON store in a temporary directory."""
    return JSONConferenceStore(tmp_path / "store.json")


class FakeFetcher:
    """Stands in for PageFetcher: serves canned pages by URL."""

    def __init__(self, pages: Optional[dict[str, tuple[int, str]]] = None, error: Optional[str] = None):
        self.pages = pages or {}
        self.error = error
        self.fetched: list[str] = []
        self.closed = False

    async def fetch(self, url: str, **kwargs) -> FetchResult:
        self.fetched.append(url)
        if self.error:
            return FetchResult(url=url, error=self.error)
        status, html = self.pages.get(url, (404, "<html><body>Not found</body></html>"))
        return FetchResult(url=url, html=html, status_code=status)

    async def close(self) -> None:
        self.closed = True


class FakeCrawler(ConferenceCrawler):
    """Crawler wired to a FakeFetcher with robots.txt checks off."""

    def __init__(self, pages: Optional[dict[str, tuple[int, str]]] = None, error: Optional[str] = None):
        super().__init__(fetcher=FakeFetcher(pages, error), respect_robots_txt=False)


class BlockedCrawler(ConferenceCrawler):
    """Crawler whose robots.txt gate always denies."""

    def __init__(self):
        super().__init__(fetcher=FakeFetcher())

    async def crawl(self, url: str) -> ConferenceCrawlResult:
        return ConferenceCrawlResult(
            url=url,
            status_code=403,
            error="Blocked by robots.txt",
            blocked_by_robots=True,
        )


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def make_crawler():
    return FakeCrawler


@pytest.fixture
def blocked_crawler() -> BlockedCrawler:
    return BlockedCrawler()
