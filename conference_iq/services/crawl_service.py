"""Crawl orchestration: crawl → completeness → upsert → child rows → audit log.

Each crawl call blocks until the crawl is finished and returns a
``CrawlOutcome``. Every attempt writes exactly one crawl log entry.
"""

from typing import Any, Literal, Optional

from rich.console import Console

from conference_iq.crawler.conference import ConferenceCrawler
from conference_iq.crawler.urls import normalize_url
from conference_iq.models import (
    TOTAL_FIELDS_COUNT,
    BasicInfo,
    ConferenceRecord,
    CrawlLogEntry,
    CrawlOptions,
    CrawlOutcome,
    CrawlStats,
    CrawlStatus,
    Exhibitor,
    ExtractedContact,
    ExtractionBundle,
    Speaker,
)
from conference_iq.models.conference import utcnow
from conference_iq.services.archive import HtmlArchive, LocalHtmlArchive
from conference_iq.storage import ConferenceRepository

console = Console()

UNKNOWN_CONFERENCE_NAME = "Unknown Conference"

ChildPolicy = Literal["replace", "append"]
CHILD_POLICIES = ("replace", "append")


def calculate_field_count(basic_info: BasicInfo, contact: ExtractedContact) -> tuple[int, int]:
    """Count populated crawler-owned fields.

    Seven basic-info fields plus four contact/agenda fields. The total stays at
    15: the remaining fields are set outside the crawler.
    """
    populated = sum(
        1
        for value in (
            basic_info.name,
            basic_info.start_date,
            basic_info.end_date,
            basic_info.city,
            basic_info.country,
            basic_info.industry,
            basic_info.attendance_estimate,
            contact.organizer_name,
            contact.organizer_email,
            contact.organizer_phone,
            contact.agenda_url,
        )
        if value
    )
    return populated, TOTAL_FIELDS_COUNT


def conference_changes(
    data: ExtractionBundle,
    existing: Optional[ConferenceRecord],
) -> dict[str, Any]:
    """Crawler-owned fields of a conference record, from one extraction."""
    basic, contact = data.basic_info, data.contact
    populated, total = calculate_field_count(basic, contact)

    return {
        "name": basic.name or (existing.name if existing else UNKNOWN_CONFERENCE_NAME),
        "start_date": basic.start_date,
        "end_date": basic.end_date,
        "city": basic.city,
        "country": basic.country,
        "industry": basic.industry,
        "attendance_estimate": basic.attendance_estimate,
        "agenda_url": contact.agenda_url,
        "pricing_url": data.pricing.pricing_url,
        "organizer_name": contact.organizer_name,
        "organizer_email": contact.organizer_email,
        "organizer_phone": contact.organizer_phone,
        "fields_populated_count": populated,
        "total_fields_count": total,
        "last_crawled_at": utcnow(),
    }


class CrawlerService:
    """Runs crawls and persists their results.

    Args:
        repository: Persistence backend
        crawler: Conference crawler (a default one owning its own browser
            session is created otherwise)
        archive: Raw HTML archive used when ``save_html_to_storage`` is set
        child_policy: ``"replace"`` drops a conference's older speakers
            (exhibitors) once a non-empty fresh batch is stored; ``"append"``
            always adds the fresh rows
    """

    def __init__(
        self,
        repository: ConferenceRepository,
        crawler: Optional[ConferenceCrawler] = None,
        archive: Optional[HtmlArchive] = None,
        child_policy: ChildPolicy = "replace",
    ):
        if child_policy not in CHILD_POLICIES:
            raise ValueError(f"Unknown child policy: {child_policy}")
        self.repository = repository
        self.crawler = crawler or ConferenceCrawler()
        self.archive = archive or LocalHtmlArchive()
        self.child_policy = child_policy

    async def crawl_by_url(self, url: str, options: Optional[CrawlOptions] = None) -> CrawlOutcome:
        """Crawl a conference by URL, creating or updating its record."""
        options = options or CrawlOptions()

        try:
            normalized_url = normalize_url(url)

            existing = self.repository.find_by_url(normalized_url)
            conference_id = existing.id if existing else None

            result = await self.crawler.crawl(normalized_url)

            if not result.ok:
                error = result.error or f"HTTP {result.status_code}"
                console.print(f"[yellow]Crawl failed for {normalized_url}: {error}[/yellow]")
                self._log_crawl_result(conference_id, "failed", None, error)
                return CrawlOutcome.failure(normalized_url, error, conference_id)

            data = result.data
            changes = conference_changes(data, existing)

            if existing:
                record = self.repository.update_conference(existing.id, changes)
            else:
                record = self.repository.insert_conference(
                    ConferenceRecord(url=normalized_url, **changes)
                )
            conference_id = record.id

            speakers_created = self._store_speakers(conference_id, data, normalized_url)
            exhibitors_created = self._store_exhibitors(conference_id, data, normalized_url)

            if options.save_html_to_storage and result.html:
                self.archive.save(result.html, conference_id, normalized_url)

            has_issues = not data.basic_info.name or speakers_created == 0
            status: CrawlStatus = "partial" if has_issues else "success"
            populated = changes["fields_populated_count"]

            self._log_crawl_result(conference_id, status, {
                "speakers_extracted": len(data.speakers),
                "exhibitors_extracted": len(data.exhibitors),
                "fields_populated": populated,
                "speakers_created": speakers_created,
                "exhibitors_created": exhibitors_created,
            })

            return CrawlOutcome(
                success=True,
                conference_id=conference_id,
                conference_url=normalized_url,
                status=status,
                message=(
                    "Conference crawled successfully"
                    if status == "success"
                    else "Conference crawled with some issues"
                ),
                stats=CrawlStats(
                    speakers_created=speakers_created,
                    exhibitors_created=exhibitors_created,
                    fields_populated=populated,
                    total_fields=changes["total_fields_count"],
                ),
            )

        except Exception as e:
            error = str(e) or type(e).__name__
            console.print(f"[red]Error crawling {url}: {error}[/red]")
            self._log_crawl_result(None, "failed", None, error)
            return CrawlOutcome.failure(url, error)

    async def crawl_by_id(self, conference_id: str, options: Optional[CrawlOptions] = None) -> CrawlOutcome:
        """Re-crawl a stored conference by id."""
        try:
            record = self.repository.find_by_id(conference_id)
        except Exception as e:
            error = str(e) or type(e).__name__
            console.print(f"[red]Error loading conference {conference_id}: {error}[/red]")
            self._log_crawl_result(None, "failed", None, error)
            return CrawlOutcome(
                success=False,
                conference_id=conference_id,
                conference_url="",
                status="failed",
                message=f"Error loading conference: {conference_id}",
                error=error,
            )

        if record is None:
            error = "Conference not found"
            self._log_crawl_result(None, "failed", None, f"{error}: {conference_id}")
            return CrawlOutcome(
                success=False,
                conference_id=conference_id,
                conference_url="",
                status="failed",
                message=f"Conference not found: {conference_id}",
                error=error,
            )

        return await self.crawl_by_url(record.url, options)

    def _store_speakers(self, conference_id: str, data: ExtractionBundle, source_url: str) -> int:
        if not data.speakers:
            return 0
        created = self.repository.insert_speakers([
            Speaker(
                conference_id=conference_id,
                name=speaker.name,
                title=speaker.title,
                company=speaker.company,
                source_url=source_url,
            )
            for speaker in data.speakers
        ])
        if self.child_policy == "replace":
            self.repository.delete_speakers(conference_id, keep={s.id for s in created})
        return len(created)

    def _store_exhibitors(self, conference_id: str, data: ExtractionBundle, source_url: str) -> int:
        if not data.exhibitors:
            return 0
        created = self.repository.insert_exhibitors([
            Exhibitor(
                conference_id=conference_id,
                company_name=exhibitor.company_name,
                exhibitor_tier_raw=exhibitor.exhibitor_tier_raw,
                exhibitor_tier_normalized=exhibitor.exhibitor_tier_normalized,
                estimated_cost=exhibitor.estimated_cost,
                source_url=source_url,
            )
            for exhibitor in data.exhibitors
        ])
        if self.child_policy == "replace":
            self.repository.delete_exhibitors(conference_id, keep={e.id for e in created})
        return len(created)

    def _log_crawl_result(
        self,
        conference_id: Optional[str],
        status: CrawlStatus,
        data_extracted: Optional[dict[str, Any]],
        error_message: Optional[str] = None,
    ) -> None:
        # A log write failure never fails the crawl
        try:
            self.repository.insert_crawl_log(CrawlLogEntry(
                conference_id=conference_id,
                status=status,
                data_extracted=data_extracted,
                error_message=error_message,
            ))
        except Exception as e:
            console.print(f"[yellow]Error logging crawl result: {e}[/yellow]")

    async def close(self) -> None:
        await self.crawler.close()

    async def __aenter__(self) -> "CrawlerService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
