"""Options and results of the crawl orchestration service."""

from typing import Optional

from pydantic import BaseModel, Field

from conference_iq.models.conference import TOTAL_FIELDS_COUNT, CrawlStatus


class CrawlOptions(BaseModel):
    """Options accepted by a crawl trigger."""

    save_html_to_storage: bool = False
    save_pdf_to_storage: bool = False  # Accepted, no effect
    overwrite_existing: bool = False  # Accepted, no effect (see child_policy)


class CrawlStats(BaseModel):
    speakers_created: int = 0
    exhibitors_created: int = 0
    fields_populated: int = 0
    total_fields: int = TOTAL_FIELDS_COUNT


class CrawlOutcome(BaseModel):
    """Structured result returned by every crawl call."""

    success: bool
    conference_id: Optional[str] = None
    conference_url: str
    status: CrawlStatus
    message: str
    stats: CrawlStats = Field(default_factory=CrawlStats)
    error: Optional[str] = None

    @classmethod
    def failure(
        cls,
        url: str,
        error: str,
        conference_id: Optional[str] = None,
    ) -> "CrawlOutcome":
        return cls(
            success=False,
            conference_id=conference_id,
            conference_url=url,
            status="failed",
            message=f"Crawl failed: {error}",
            error=error,
        )
