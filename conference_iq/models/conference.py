"""Stored conference records and their child rows."""

from datetime import date, datetime, timezone
from typing import Any, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Maximum number of independently extractable fields on a conference.
# The crawler owns 11 of them, the rest come from manual verification.
TOTAL_FIELDS_COUNT = 15

CrawlStatus = Literal["success", "partial", "failed"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_id() -> str:
    return uuid4().hex


class ConferenceRecord(BaseModel):
    """Canonical conference entity, keyed by its normalized URL."""

    model_config = ConfigDict(extra="ignore")

    # Identity
    id: str = Field(default_factory=new_id)
    url: str  # Normalized URL, unique
    name: str

    # Dates
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # Location
    city: Optional[str] = None
    country: Optional[str] = None

    industry: list[str] = Field(default_factory=list)
    attendance_estimate: Optional[int] = Field(default=None, gt=0)

    # Links
    agenda_url: Optional[str] = None
    pricing_url: Optional[str] = None

    # Organizer contact
    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    organizer_phone: Optional[str] = None

    # Completeness
    fields_populated_count: int = Field(default=0, ge=0)
    total_fields_count: int = TOTAL_FIELDS_COUNT

    # Provenance
    last_crawled_at: Optional[datetime] = None
    last_verified_at: Optional[datetime] = None  # Human verification only
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_completeness(self) -> "ConferenceRecord":
        if self.fields_populated_count > self.total_fields_count:
            raise ValueError(
                f"fields_populated_count ({self.fields_populated_count}) exceeds "
                f"total_fields_count ({self.total_fields_count})"
            )
        return self

    @property
    def completeness(self) -> float:
        """Share of populated fields, 0-1."""
        if not self.total_fields_count:
            return 0.0
        return self.fields_populated_count / self.total_fields_count


class Speaker(BaseModel):
    """A speaker row owned by one conference."""

    id: str = Field(default_factory=new_id)
    conference_id: str
    name: str = Field(min_length=1)
    title: Optional[str] = None
    company: Optional[str] = None
    source_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Exhibitor(BaseModel):
    """An exhibitor/sponsor row owned by one conference."""

    id: str = Field(default_factory=new_id)
    conference_id: str
    company_name: str = Field(min_length=1)
    exhibitor_tier_raw: Optional[str] = None
    exhibitor_tier_normalized: Optional[str] = None
    estimated_cost: Optional[int] = None  # Explicit figures only, never inferred
    source_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class CrawlLogEntry(BaseModel):
    """Audit record written once per crawl attempt."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    conference_id: Optional[str] = None  # None when no record was resolved
    status: CrawlStatus
    data_extracted: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    crawled_at: datetime = Field(default_factory=utcnow)
