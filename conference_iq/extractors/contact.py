"""Contact extractor: organizer name/email/phone and the agenda link.

Looks inside the first contact-like section, falling back to the whole page.
``mailto:``/``tel:`` links win over addresses and numbers found in the text.
The agenda page is only linked, never parsed.
"""

import re
from typing import Optional
from urllib.parse import unquote

from bs4 import Tag

from conference_iq.crawler.urls import resolve_link
from conference_iq.extractors.document import (
    PageInput,
    ParsedPage,
    Strategy,
    as_page,
    clean_text,
    element_text,
    first_match,
)
from conference_iq.models import ExtractedContact

CONTACT_SELECTORS = [
    '[class*="contact"]',
    '[class*="organizer"]',
    '[id*="contact"]',
    '[id*="organizer"]',
    ".contact",
    ".organizer",
    'section[class*="contact"]',
    'section[class*="organizer"]',
]

ORGANIZER_NAME_SELECTORS = [
    '[class*="name"]',
    '[class*="organizer"]',
    "h1, h2, h3",
    "strong, b",
]

AGENDA_SELECTORS = [
    'a[href*="agenda"]',
    'a[href*="schedule"]',
    'a[href*="program"]',
    'a[href*="timetable"]',
    '[class*="agenda"] a[href]',
    '[class*="schedule"] a[href]',
    '[class*="program"] a[href]',
]

AGENDA_LINK_TEXT = re.compile(r"agenda|schedule|program", re.I)

EMAIL_PATTERN = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")

PHONE_PATTERNS = [
    # US: "+1 (555) 123-4567", "555.123.4567"
    re.compile(r"(?<![\d+])(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"),
    # International: "+44 20 7946 0958"
    re.compile(r"(?<![\d+])\+\d{1,3}[-.\s]?\(?\d{1,4}\)?(?:[-.\s]?\d{1,4}){1,4}(?!\d)"),
]
MIN_PHONE_DIGITS = 7

ORGANIZER_LABEL = re.compile(
    r"^(?:organi[sz]ed by|organi[sz]ers?|hosted by|presented by)\s*:?\s*", re.I
)

# Section headings that are never an organizer's name
GENERIC_HEADING = re.compile(
    r"^(?:contact(?:\s+us)?|contacts|get in touch|reach us|organi[sz]ers?|about(?:\s+us)?|"
    r"questions\??|follow us)$",
    re.I,
)


def find_contact_section(page: ParsedPage) -> Tag:
    """First contact-like element outside navigation, or the page body."""
    root = page.soup.body or page.soup
    for selector in CONTACT_SELECTORS:
        for element in root.select(selector):
            if element.find_parent("nav") is None and element.name != "nav":
                return element
    return root


# ---------------------------------------------------------------------------
# Organizer name


def _organizer_name(text: str) -> Optional[str]:
    text = ORGANIZER_LABEL.sub("", clean_text(text))
    if not 3 <= len(text) < 200:
        return None
    if "@" in text or re.search(r"\d{3}", text):
        return None
    if GENERIC_HEADING.match(text):
        return None
    return text


def extract_organizer_name(section: Tag) -> Optional[str]:
    for selector in ORGANIZER_NAME_SELECTORS:
        found = section.select_one(selector)
        if found is not None:
            name = _organizer_name(found.get_text(" "))
            if name:
                return name
    return None


# ---------------------------------------------------------------------------
# Email and phone


def _email_from_mailto(section: Tag, text: str) -> Optional[str]:
    link = section.select_one('a[href^="mailto:"]')
    if link is None:
        return None
    address = unquote(link["href"][len("mailto:"):].split("?", 1)[0]).strip()
    return address or None


def _email_from_text(section: Tag, text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text)
    return match.group(1) if match else None


EMAIL_STRATEGIES: list[Strategy] = [
    ("mailto", _email_from_mailto),
    ("text", _email_from_text),
]


def _has_enough_digits(phone: str) -> bool:
    return sum(char.isdigit() for char in phone) >= MIN_PHONE_DIGITS


def _phone_from_tel(section: Tag, text: str) -> Optional[str]:
    link = section.select_one('a[href^="tel:"]')
    if link is None:
        return None
    number = unquote(link["href"][len("tel:"):]).strip()
    return number if _has_enough_digits(number) else None


def _phone_from_text(section: Tag, text: str) -> Optional[str]:
    for pattern in PHONE_PATTERNS:
        for match in pattern.finditer(text):
            phone = match.group(0).strip()
            if _has_enough_digits(phone):
                return phone
    return None


PHONE_STRATEGIES: list[Strategy] = [
    ("tel", _phone_from_tel),
    ("text", _phone_from_text),
]


# ---------------------------------------------------------------------------
# Agenda link


def find_agenda_url(page: ParsedPage) -> Optional[str]:
    root = page.soup.body or page.soup
    for selector in AGENDA_SELECTORS:
        for link in root.select(selector):
            resolved = resolve_link(link.get("href", ""), page.url)
            if resolved:
                return resolved

    # Secondary scan on link text
    for link in root.find_all("a", href=True):
        if AGENDA_LINK_TEXT.search(link.get_text(" ")):
            resolved = resolve_link(link["href"], page.url)
            if resolved:
                return resolved
    return None


def extract_contact(html: PageInput, url: str = "") -> ExtractedContact:
    """Extract organizer contact details and the agenda URL from a page."""
    page = as_page(html, url)
    section = find_contact_section(page)
    text = element_text(section)

    return ExtractedContact(
        organizer_name=extract_organizer_name(section),
        organizer_email=first_match(EMAIL_STRATEGIES, section, text),
        organizer_phone=first_match(PHONE_STRATEGIES, section, text),
        agenda_url=find_agenda_url(page),
    )
