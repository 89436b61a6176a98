"""Data models for the conference crawl pipeline."""

from conference_iq.models.conference import (
    TOTAL_FIELDS_COUNT,
    ConferenceRecord,
    CrawlLogEntry,
    CrawlStatus,
    Exhibitor,
    Speaker,
)
from conference_iq.models.extraction import (
    BasicInfo,
    ExtractedContact,
    ExtractedExhibitor,
    ExtractedPricing,
    ExtractedSpeaker,
    ExtractionBundle,
    SponsorTierPrice,
    TicketPricing,
)
from conference_iq.models.outcome import CrawlOptions, CrawlOutcome, CrawlStats

__all__ = [
    "TOTAL_FIELDS_COUNT",
    "ConferenceRecord",
    "CrawlLogEntry",
    "CrawlStatus",
    "Exhibitor",
    "Speaker",
    "BasicInfo",
    "ExtractedContact",
    "ExtractedExhibitor",
    "ExtractedPricing",
    "ExtractedSpeaker",
    "ExtractionBundle",
    "SponsorTierPrice",
    "TicketPricing",
    "CrawlOptions",
    "CrawlOutcome",
    "CrawlStats",
]
