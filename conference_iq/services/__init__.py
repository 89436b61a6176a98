"""Crawl orchestration, scheduling, HTML archive and spend summaries."""

from conference_iq.services.archive import HtmlArchive, LocalHtmlArchive
from conference_iq.services.crawl_service import CrawlerService, calculate_field_count
from conference_iq.services.scheduler import (
    BatchSummary,
    crawl_urls,
    run_scheduled_crawl,
    select_conferences_to_crawl,
)

__all__ = [
    "BatchSummary",
    "CrawlerService",
    "HtmlArchive",
    "LocalHtmlArchive",
    "calculate_field_count",
    "crawl_urls",
    "run_scheduled_crawl",
    "select_conferences_to_crawl",
]
