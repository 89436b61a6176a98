"""Exhibitors extractor: company name, sponsorship tier, explicit cost.

Costs are only ever read from an explicit figure on the page ("Gold Sponsor -
$25,000"); nothing is estimated from the tier.
"""

import re
from typing import Optional

from bs4 import Tag

from conference_iq.extractors.document import (
    AMOUNT,
    PageInput,
    Strategy,
    as_page,
    element_text,
    first_match,
    in_page_chrome,
    parse_amount,
    select_cards,
    select_text,
)
from conference_iq.models import ExtractedExhibitor

EXHIBITOR_SELECTORS = [
    '[class*="exhibitor"]',
    '[class*="sponsor"]',
    '[id*="exhibitor"]',
    '[id*="sponsor"]',
    ".exhibitors",
    ".sponsors",
    'section[class*="exhibitor"]',
    'section[class*="sponsor"]',
]

FALLBACK_SELECTOR = '[class*="card"], [class*="item"], [class*="logo"], li, .grid > div'

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 200

TIER_MAPPING = {
    "platinum": "platinum",
    "diamond": "platinum",
    "titanium": "platinum",
    "gold": "gold",
    "silver": "silver",
    "bronze": "bronze",
    "copper": "bronze",
    "standard": "standard",
    "basic": "standard",
    "exhibitor": "standard",
    "sponsor": "standard",
}

TIER_WORDS = (
    r"platinum|diamond|titanium|gold|silver|bronze|copper|standard|basic|"
    r"premier|headline|startup|community|media|associate"
)

TIER_PATTERNS = [
    # "Gold Sponsor", "Platinum tier", "Silver Partners"
    re.compile(
        rf"\b({TIER_WORDS})\s*(?:sponsors?|tier|level|package|partners?|exhibitors?)\b",
        re.I,
    ),
    # "Tier: Gold"
    re.compile(rf"\b(?:sponsor|tier|level|package)\s*:\s*({TIER_WORDS})\b", re.I),
]

COST_PATTERNS = [
    re.compile(rf"\$\s?{AMOUNT}"),                                # "$25,000"
    re.compile(rf"{AMOUNT}\s*(?:USD|dollars?)\b", re.I),          # "25,000 USD"
    re.compile(rf"\b(?:cost|price|fee)\s*:\s*\$?\s?{AMOUNT}", re.I),  # "Cost: 25000"
]

NAME_HEADINGS = 'h1, h2, h3, h4, h5, h6, strong, b, [class*="name"], [class*="company"]'

# Leading capitalized words of the first line: "Acme Corp & Sons"
LEADING_NAME = re.compile(r"^([A-Z][A-Za-z &]+)")

# Section labels picked up as company names
NOT_A_COMPANY = re.compile(r"\b(?:sponsors?|exhibitors?|partners?)\b", re.I)


def normalize_tier(tier: Optional[str]) -> Optional[str]:
    """Map a raw tier token to platinum/gold/silver/bronze/standard.

    Returns None when there is no token and 'unknown' for a token outside the
    synonym table.
    """
    if not tier:
        return None

    lower = tier.lower().strip()
    if lower in TIER_MAPPING:
        return TIER_MAPPING[lower]

    for key, value in TIER_MAPPING.items():
        if key in lower:
            return value

    return "unknown"


def extract_tier(text: str) -> Optional[str]:
    for pattern in TIER_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def extract_cost(text: str) -> Optional[int]:
    """First explicit monetary figure in the text, as an integer."""
    for pattern in COST_PATTERNS:
        for match in pattern.finditer(text):
            cost = parse_amount(match.group(1))
            if cost:
                return cost
    return None


def _company_name(candidate: Optional[str]) -> Optional[str]:
    if not candidate:
        return None
    candidate = candidate.strip()
    if not MIN_NAME_LENGTH <= len(candidate) < MAX_NAME_LENGTH:
        return None
    if NOT_A_COMPANY.search(candidate):
        return None
    return candidate


def _name_from_heading(element: Tag, text: str) -> Optional[str]:
    return _company_name(select_text(element, NAME_HEADINGS))


def _name_from_logo(element: Tag, text: str) -> Optional[str]:
    img = element.find("img", alt=True)
    return _company_name(img["alt"]) if img else None


def _name_from_text(element: Tag, text: str) -> Optional[str]:
    first_line = text.split("\n", 1)[0]
    match = LEADING_NAME.match(first_line)
    return _company_name(match.group(1)) if match else None


NAME_STRATEGIES: list[Strategy] = [
    ("heading", _name_from_heading),
    ("logo_alt", _name_from_logo),
    ("leading_text", _name_from_text),
]


def find_exhibitor_elements(soup) -> list[Tag]:
    root = soup.body or soup
    for selector in EXHIBITOR_SELECTORS:
        elements = root.select(selector)
        if elements:
            return elements
    return [el for el in root.select(FALLBACK_SELECTOR) if not in_page_chrome(el)]


def extract_exhibitors(html: PageInput, url: str = "") -> list[ExtractedExhibitor]:
    """Extract exhibitors and sponsors from a page.

    Every row needs a company name. A card whose only text is a tier label
    such as "Gold Sponsor - $25,000" names no company and is skipped; the
    figure still reaches the sponsor-tier prices of ``extract_pricing``.
    """
    page = as_page(html, url)

    candidates: list[tuple[Tag, str, str]] = []
    for element in find_exhibitor_elements(page.soup):
        text = element_text(element)
        # Logo-only cards carry no text but still name the company in alt
        if len(text) < MIN_NAME_LENGTH and element.find("img", alt=True) is None:
            continue
        name = first_match(NAME_STRATEGIES, element, text)
        if name:
            candidates.append((element, name, text))

    kept = {id(el) for el, _ in select_cards([(el, name) for el, name, _ in candidates])}

    exhibitors: list[ExtractedExhibitor] = []
    seen: set[str] = set()
    for element, name, text in candidates:
        if id(element) not in kept:
            continue
        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)

        searchable = f"{text} {element.decode_contents()}"
        tier_raw = extract_tier(searchable)
        exhibitors.append(ExtractedExhibitor(
            company_name=name,
            exhibitor_tier_raw=tier_raw,
            exhibitor_tier_normalized=normalize_tier(tier_raw),
            estimated_cost=extract_cost(searchable),
        ))

    return exhibitors
