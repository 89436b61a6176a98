"""HTML → conference facts extraction.

Five independent extractors operate on one shared parsed page:
- basic info (name, dates, location, attendance, industry)
- speakers
- exhibitors / sponsors
- pricing (tickets, sponsor tiers, pricing page link; PDF variant)
- contact (organizer, agenda link)

Extractors never raise on missing data; they return nulls and empty lists.
"""

from conference_iq.extractors.basic_info import extract_basic_info
from conference_iq.extractors.contact import extract_contact
from conference_iq.extractors.document import ParsedPage
from conference_iq.extractors.exhibitors import extract_exhibitors, normalize_tier
from conference_iq.extractors.pricing import (
    extract_pricing,
    extract_pricing_from_pdf,
    extract_pricing_from_text,
)
from conference_iq.extractors.speakers import extract_speakers
from conference_iq.models import ExtractionBundle


def extract_all(html: str, url: str = "") -> ExtractionBundle:
    """Parse once and run all five extractors."""
    page = ParsedPage.from_html(html, url)
    return ExtractionBundle(
        basic_info=extract_basic_info(page),
        speakers=extract_speakers(page),
        exhibitors=extract_exhibitors(page),
        pricing=extract_pricing(page),
        contact=extract_contact(page),
    )


__all__ = [
    "ParsedPage",
    "extract_all",
    "extract_basic_info",
    "extract_speakers",
    "extract_exhibitors",
    "extract_pricing",
    "extract_pricing_from_text",
    "extract_pricing_from_pdf",
    "extract_contact",
    "normalize_tier",
]
