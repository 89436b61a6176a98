"""Page acquisition: URL identity, robots.txt gate, headless fetcher.

The composed per-URL crawler lives in ``conference_iq.crawler.conference``.
"""

from conference_iq.crawler.fetch import FetchResult, PageFetcher
from conference_iq.crawler.robots import RobotsCheckResult, check_robots_txt
from conference_iq.crawler.urls import is_valid_conference_url, normalize_url

__all__ = [
    "FetchResult",
    "PageFetcher",
    "RobotsCheckResult",
    "check_robots_txt",
    "is_valid_conference_url",
    "normalize_url",
]
