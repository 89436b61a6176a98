"""Pricing extractor: ticket prices, sponsor-tier prices, pricing page link.

Only explicit figures are read. The PDF variant extracts the document text with
pdfplumber and runs the same patterns over it.
"""

import io
import re
from pathlib import Path
from typing import Optional, Union

import pdfplumber
from rich.console import Console

from conference_iq.crawler.urls import resolve_link
from conference_iq.extractors.document import (
    AMOUNT,
    PageInput,
    ParsedPage,
    as_page,
    clean_text,
    parse_amount,
)
from conference_iq.models import ExtractedPricing, SponsorTierPrice, TicketPricing

console = Console()

# "Early Bird: $499", "Regular ticket - 799", "Student pass: $99"
PRICE_SUFFIX = rf"(?:[ \t]+(?:tickets?|pass(?:es)?|rates?|registration|price))?\s*[:\-–—]\s*\$?\s?{AMOUNT}"

TICKET_PRICE_PATTERNS = {
    "early_bird": re.compile(rf"\b(?:super[ \t]*early[ \t]*bird|early[ \t]*bird|early){PRICE_SUFFIX}", re.I),
    "regular": re.compile(rf"\b(?:regular|standard|general(?:[ \t]+admission)?){PRICE_SUFFIX}", re.I),
    "late": re.compile(rf"\b(?:late|last[ \t]*minute|on-site|onsite){PRICE_SUFFIX}", re.I),
    "student": re.compile(rf"\b(?:student|academic){PRICE_SUFFIX}", re.I),
    "group": re.compile(rf"\b(?:group|bulk|team){PRICE_SUFFIX}", re.I),
}

SPONSOR_TIERS = r"platinum|diamond|titanium|gold|silver|bronze|copper|standard|basic"
SPONSOR_WORDS = r"(?:sponsor(?:ship)?|tier|level|package)s?"

SPONSOR_TIER_PRICE_PATTERNS = [
    # "Gold Sponsor - $25,000", "Platinum package: $50,000"
    re.compile(
        rf"\b(?P<tier>{SPONSOR_TIERS})\s*{SPONSOR_WORDS}\b[\s:\-–—]*\$\s?(?P<amount>{AMOUNT})",
        re.I,
    ),
    # "Sponsor $10,000 - Silver"
    re.compile(
        rf"\b{SPONSOR_WORDS}[\s:]*\$\s?(?P<amount>{AMOUNT})\s*[-–—]\s*(?P<tier>{SPONSOR_TIERS})\b",
        re.I,
    ),
]

PRICING_LINK_SELECTOR = 'a[href*="pric"], a[href*="ticket"], a[href*="register"], a[href*="cost"]'
PRICING_LINK_TEXT = re.compile(r"\b(?:pricing|prices|tickets?|register|registration)\b", re.I)

PdfSource = Union[bytes, str, Path]


def extract_ticket_pricing(text: str) -> Optional[TicketPricing]:
    """Named ticket tiers found in text, or None when none are present."""
    prices = {}
    for tier, pattern in TICKET_PRICE_PATTERNS.items():
        for match in pattern.finditer(text):
            price = parse_amount(match.group(1))
            if price:
                prices[tier] = price
                break

    if not prices:
        return None
    return TicketPricing(**prices)


def extract_sponsor_tiers(text: str) -> list[SponsorTierPrice]:
    """Every (tier, cost) pair with an explicit dollar figure, first seen first."""
    tiers: list[SponsorTierPrice] = []
    seen: set[tuple[str, int]] = set()
    for pattern in SPONSOR_TIER_PRICE_PATTERNS:
        for match in pattern.finditer(text):
            cost = parse_amount(match.group("amount"))
            tier = match.group("tier").strip().lower()
            if not cost or (tier, cost) in seen:
                continue
            seen.add((tier, cost))
            tiers.append(SponsorTierPrice(tier=tier, cost=cost))
    return tiers


def find_pricing_url(page: ParsedPage) -> Optional[str]:
    root = page.soup.body or page.soup
    for link in root.select(PRICING_LINK_SELECTOR):
        resolved = resolve_link(link.get("href", ""), page.url)
        if resolved:
            return resolved

    for link in root.find_all("a", href=True):
        if PRICING_LINK_TEXT.search(link.get_text(" ")):
            resolved = resolve_link(link["href"], page.url)
            if resolved:
                return resolved
    return None


def extract_pricing_from_text(text: str) -> ExtractedPricing:
    """Ticket and sponsor-tier prices from plain text (no link lookup)."""
    text = clean_text(text)
    return ExtractedPricing(
        ticket_pricing=extract_ticket_pricing(text),
        sponsor_tiers=extract_sponsor_tiers(text),
    )


def extract_pricing(html: PageInput, url: str = "") -> ExtractedPricing:
    """Extract pricing information from a page."""
    page = as_page(html, url)
    result = extract_pricing_from_text(page.text)
    result.pricing_url = find_pricing_url(page)
    return result


def read_pdf_text(source: PdfSource) -> str:
    """Concatenated text of every page of a PDF."""
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    text_parts = []
    with pdfplumber.open(source) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    return "\n".join(text_parts)


def extract_pricing_from_pdf(source: PdfSource) -> ExtractedPricing:
    """Extract pricing from a PDF (sponsorship prospectus, price list).

    Returns an empty result when the document cannot be read.
    """
    try:
        text = read_pdf_text(source)
    except Exception as e:
        console.print(f"[yellow]Error parsing PDF: {e}[/yellow]")
        return ExtractedPricing()

    return extract_pricing_from_text(text)
