"""Scheduled re-crawls: pick stale conferences and crawl them one by one."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from rich.console import Console

from conference_iq.models import ConferenceRecord, CrawlOptions, CrawlOutcome
from conference_iq.models.conference import as_utc
from conference_iq.services.crawl_service import CrawlerService
from conference_iq.storage import ConferenceRepository

console = Console()

STALE_AFTER_DAYS = 30
BATCH_LIMIT = 10
INTER_CRAWL_DELAY = 2.0  # seconds


@dataclass
class BatchItem:
    url: str
    conference_id: Optional[str] = None
    name: Optional[str] = None
    outcome: Optional[CrawlOutcome] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is not None and self.outcome.success


@dataclass
class BatchSummary:
    """Result of a sequential batch of crawls."""

    items: list[BatchItem] = field(default_factory=list)

    @property
    def crawled(self) -> int:
        return len(self.items)

    @property
    def success_count(self) -> int:
        return sum(1 for item in self.items if item.success)

    @property
    def failure_count(self) -> int:
        return self.crawled - self.success_count


def select_conferences_to_crawl(
    repository: ConferenceRepository,
    now: Optional[datetime] = None,
    stale_after_days: int = STALE_AFTER_DAYS,
    limit: int = BATCH_LIMIT,
) -> list[ConferenceRecord]:
    """Conferences never crawled or last crawled before the stale cutoff.

    Never-crawled conferences come first, then the oldest crawls.
    """
    now = as_utc(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=stale_after_days)

    due = [
        record for record in repository.list_conferences()
        if record.last_crawled_at is None or as_utc(record.last_crawled_at) < cutoff
    ]
    due.sort(key=lambda r: (
        r.last_crawled_at is not None,
        as_utc(r.last_crawled_at) if r.last_crawled_at else now,
    ))
    return due[:limit]


async def _crawl_sequentially(
    service: CrawlerService,
    items: list[BatchItem],
    options: CrawlOptions,
    delay_seconds: float,
) -> BatchSummary:
    summary = BatchSummary()

    for index, item in enumerate(items):
        console.print(f"[cyan]Crawling:[/cyan] {item.name or item.url}")
        try:
            item.outcome = await service.crawl_by_url(item.url, options)
        except Exception as e:
            console.print(f"[red]Error crawling {item.url}: {e}[/red]")
            item.error = str(e) or type(e).__name__
        summary.items.append(item)

        # No wait after the last crawl
        if delay_seconds > 0 and index < len(items) - 1:
            await asyncio.sleep(delay_seconds)

    console.print(
        f"[green]Crawl job completed: {summary.success_count} succeeded, "
        f"{summary.failure_count} failed[/green]"
    )
    return summary


async def run_scheduled_crawl(
    service: CrawlerService,
    repository: ConferenceRepository,
    now: Optional[datetime] = None,
    stale_after_days: int = STALE_AFTER_DAYS,
    limit: int = BATCH_LIMIT,
    delay_seconds: float = INTER_CRAWL_DELAY,
) -> BatchSummary:
    """Re-crawl the conferences that are due."""
    due = select_conferences_to_crawl(repository, now, stale_after_days, limit)
    if not due:
        console.print("[green]No conferences need crawling at this time[/green]")
        return BatchSummary()

    console.print(f"[bold]Found {len(due)} conference(s) to crawl[/bold]")
    items = [BatchItem(url=r.url, conference_id=r.id, name=r.name) for r in due]
    return await _crawl_sequentially(service, items, CrawlOptions(), delay_seconds)


async def crawl_urls(
    service: CrawlerService,
    urls: list[str],
    delay_seconds: float = INTER_CRAWL_DELAY,
    options: Optional[CrawlOptions] = None,
) -> BatchSummary:
    """Crawl a caller-supplied list of URLs."""
    items = [BatchItem(url=url) for url in urls]
    return await _crawl_sequentially(service, items, options or CrawlOptions(), delay_seconds)
