"""Basic-info extractor: name, dates, location, attendance, industry.

Each field has its own ordered strategy chain, most specific first; the first
acceptable match wins.
"""

import re
from typing import Callable, Optional

from conference_iq.extractors.document import (
    MONTHS,
    PageInput,
    ParsedPage,
    Strategy,
    as_page,
    clean_text,
    first_match,
    parse_date,
    select_text,
)
from conference_iq.models import BasicInfo

NAME_MIN_LENGTH = 5
NAME_MAX_LENGTH = 200
LOCATION_MAX_LENGTH = 200

NAME_SELECTORS = [
    "h1",
    ".conference-name",
    ".event-name",
    '[class*="title"]',
    '[class*="name"]',
]

# " | Home", " - Register now", ...
TITLE_SUFFIX = re.compile(
    r"\s*[-|–—]\s*(?:Home|About|Register|Contact|Welcome|Official Site)\b.*$",
    re.I,
)

LOCATION_SELECTORS = [
    '[class*="location"]',
    '[class*="venue"]',
    '[class*="address"]',
    '[id*="location"]',
    '[id*="venue"]',
]

LOCATION_LABEL = re.compile(r"^(?:location|venue|where|address)\s*:?\s*", re.I)

CAP_WORDS = r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"

LOCATION_PATTERNS = [
    re.compile(rf"({CAP_WORDS}),\s*({CAP_WORDS})"),   # "San Francisco, United States"
    re.compile(rf"({CAP_WORDS}),\s*([A-Z]{{2}})\b"),  # "San Francisco, CA"
]

LABELED_LOCATION = re.compile(
    r"(?i:location|venue|where)\s*:\s*"
    r"([A-Z][\w.'-]*(?:\s+[A-Z][\w.'-]*)*(?:,\s*[A-Z][\w.'-]*(?:\s+[A-Z][\w.'-]*)*){0,2})"
)

NUMBER = r"(?<![\d,.])(\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?"
AUDIENCE = r"(?:attendees?|participants?|delegates?|visitors?)"

ATTENDANCE_PATTERNS = [
    re.compile(rf"~?{NUMBER}\+?\s*{AUDIENCE}", re.I),              # "5,000+ attendees"
    re.compile(rf"{AUDIENCE}\s*:\s*~?{NUMBER}", re.I),             # "Attendees: 1200"
    re.compile(rf"(?:over|more than|up to)\s+{NUMBER}\s+(?:people|professionals)", re.I),
]

INDUSTRY_KEYWORDS = [
    "technology", "tech", "software", "ai", "artificial intelligence", "machine learning",
    "healthcare", "health", "medical", "pharma", "pharmaceutical",
    "finance", "fintech", "banking", "investment",
    "marketing", "advertising", "branding", "digital marketing",
    "legal", "law", "compliance",
    "education", "edtech",
    "retail", "ecommerce", "e-commerce",
    "manufacturing", "industrial",
    "energy", "renewable", "sustainability",
    "media", "entertainment",
    "consulting", "professional services",
]

DAY = r"\d{1,2}(?:st|nd|rd|th)?"
MONTH = rf"\b{MONTHS}"
DASH = r"\s*(?:[-–—]|to|through|until)\s*"

# Date patterns, most specific first
NAMED_RANGE = re.compile(rf"({MONTH}\s+{DAY},?\s+\d{{4}}){DASH}({MONTH}\s+{DAY},?\s+\d{{4}})", re.I)
CROSS_MONTH_RANGE = re.compile(rf"({MONTH})\s+({DAY}){DASH}({MONTH})\s+({DAY}),?\s+(\d{{4}})", re.I)
SAME_MONTH_RANGE = re.compile(rf"({MONTH})\s+({DAY})\s*[-–—]\s*({DAY}),?\s+(\d{{4}})", re.I)
DAY_FIRST_RANGE = re.compile(rf"\b({DAY})\s*[-–—]\s*({DAY})\s+({MONTH}),?\s+(\d{{4}})", re.I)
SLASH_RANGE = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\s*[-–—]\s*(\d{1,2}/\d{1,2}/\d{4})")
DASHED_RANGE = re.compile(r"\b(\d{1,2}-\d{1,2}-\d{4})\s*[-–—]\s*(\d{1,2}-\d{1,2}-\d{4})")
NAMED_SINGLE = re.compile(rf"({MONTH}\s+{DAY},?\s+\d{{4}})", re.I)
DAY_FIRST_SINGLE = re.compile(rf"\b({DAY}\s+{MONTH}),?\s+(\d{{4}})", re.I)
ISO_SINGLE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
SLASH_SINGLE = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\b")

DateRange = tuple[str, Optional[str]]


# ---------------------------------------------------------------------------
# Name


def _plausible_name(text: str) -> Optional[str]:
    text = clean_text(text)
    if NAME_MIN_LENGTH <= len(text) <= NAME_MAX_LENGTH:
        return text
    return None


def _name_from_selector(selector: str) -> Callable[[ParsedPage], Optional[str]]:
    def strategy(page: ParsedPage) -> Optional[str]:
        root = page.soup.body or page.soup
        return _plausible_name(select_text(root, selector))
    return strategy


def _name_from_title(page: ParsedPage) -> Optional[str]:
    title = page.soup.find("title")
    if title is None:
        return None
    return _plausible_name(TITLE_SUFFIX.sub("", clean_text(title.get_text())))


NAME_STRATEGIES: list[Strategy] = [
    *[(selector, _name_from_selector(selector)) for selector in NAME_SELECTORS],
    ("title", _name_from_title),
]


# ---------------------------------------------------------------------------
# Dates


def _range(start: Optional[str], end: Optional[str]) -> Optional[DateRange]:
    start_iso = parse_date(start)
    if not start_iso:
        return None
    return start_iso, parse_date(end)


def _cross_month(match: re.Match) -> Optional[DateRange]:
    # One trailing year; a December-to-January range starts the year before
    year = int(match[5])
    result = _range(f"{match[1]} {match[2]}, {year}", f"{match[3]} {match[4]}, {year}")
    if result and result[1] and result[0] > result[1]:
        result = _range(f"{match[1]} {match[2]}, {year - 1}", result[1])
    return result


def _first_range(pattern: re.Pattern, build: Callable[[re.Match], Optional[DateRange]]):
    def strategy(text: str) -> Optional[DateRange]:
        for match in pattern.finditer(text):
            result = build(match)
            if result:
                return result
        return None
    return strategy


def _single(match: re.Match) -> Optional[DateRange]:
    # Same-day conference
    day = parse_date(" ".join(match.groups()))
    return (day, day) if day else None


DATE_STRATEGIES: list[Strategy] = [
    ("named_range", _first_range(NAMED_RANGE, lambda m: _range(m[1], m[2]))),
    ("cross_month_range", _first_range(CROSS_MONTH_RANGE, _cross_month)),
    ("same_month_range", _first_range(
        SAME_MONTH_RANGE,
        lambda m: _range(f"{m[1]} {m[2]}, {m[4]}", f"{m[1]} {m[3]}, {m[4]}"),
    )),
    ("day_first_range", _first_range(
        DAY_FIRST_RANGE,
        lambda m: _range(f"{m[1]} {m[3]} {m[4]}", f"{m[2]} {m[3]} {m[4]}"),
    )),
    ("slash_range", _first_range(SLASH_RANGE, lambda m: _range(m[1], m[2]))),
    ("dashed_range", _first_range(DASHED_RANGE, lambda m: _range(m[1], m[2]))),
    ("named_single", _first_range(NAMED_SINGLE, _single)),
    ("day_first_single", _first_range(DAY_FIRST_SINGLE, _single)),
    ("iso_single", _first_range(ISO_SINGLE, _single)),
    ("slash_single", _first_range(SLASH_SINGLE, _single)),
]


def extract_dates(text: str) -> tuple[Optional[str], Optional[str]]:
    """Find (start, end) ISO dates in page text."""
    found = first_match(DATE_STRATEGIES, text)
    if not found:
        return None, None
    return found


# ---------------------------------------------------------------------------
# Location


def _location_from_selectors(page: ParsedPage) -> Optional[str]:
    root = page.soup.body or page.soup
    for selector in LOCATION_SELECTORS:
        text = LOCATION_LABEL.sub("", select_text(root, selector))
        if text and len(text) < LOCATION_MAX_LENGTH:
            return text
    return None


def _location_from_label(page: ParsedPage) -> Optional[str]:
    match = LABELED_LOCATION.search(page.text)
    return match.group(1).strip() if match else None


def _location_from_pattern(pattern: re.Pattern) -> Callable[[ParsedPage], Optional[str]]:
    def strategy(page: ParsedPage) -> Optional[str]:
        match = pattern.search(page.text)
        return match.group(0) if match else None
    return strategy


LOCATION_STRATEGIES: list[Strategy] = [
    ("selectors", _location_from_selectors),
    ("labeled", _location_from_label),
    ("city_country", _location_from_pattern(LOCATION_PATTERNS[0])),
    ("city_state", _location_from_pattern(LOCATION_PATTERNS[1])),
]


def split_location(location_text: str) -> tuple[Optional[str], Optional[str]]:
    """Split location text into (city, country)."""
    match = LOCATION_PATTERNS[0].search(location_text)
    if match:
        return match.group(1).strip(), match.group(2).strip()

    parts = [p.strip() for p in location_text.split(",") if p.strip()]
    if len(parts) >= 2:
        return parts[0], ", ".join(parts[1:])
    if parts:
        return parts[0], None
    return None, None


# ---------------------------------------------------------------------------
# Attendance and industry


def extract_attendance(text: str) -> Optional[int]:
    for pattern in ATTENDANCE_PATTERNS:
        match = pattern.search(text)
        if match:
            number = int(match.group(1).replace(",", ""))
            if number > 0:
                return number
    return None


def title_case(keyword: str) -> str:
    """Upper-case the first letter of each word: 'e-commerce' -> 'E-commerce'."""
    return " ".join(word[:1].upper() + word[1:] for word in keyword.split())


def extract_industries(text: str) -> list[str]:
    """All industry keywords present in the text, in dictionary order."""
    lower_text = text.lower()
    industries: list[str] = []
    for keyword in INDUSTRY_KEYWORDS:
        if re.search(rf"\b{re.escape(keyword)}\b", lower_text):
            tag = title_case(keyword)
            if tag not in industries:
                industries.append(tag)
    return industries


def extract_basic_info(html: PageInput, url: str = "") -> BasicInfo:
    """Extract basic conference information from a page."""
    page = as_page(html, url)
    result = BasicInfo()

    result.name = first_match(NAME_STRATEGIES, page)
    result.start_date, result.end_date = extract_dates(page.text)

    location_text = first_match(LOCATION_STRATEGIES, page)
    if location_text:
        result.city, result.country = split_location(location_text)

    result.attendance_estimate = extract_attendance(page.text)
    result.industry = extract_industries(page.text)

    return result
