"""Speakers extractor: name, title, company per speaker card.

Candidate elements come from speaker-specific selectors, or from generic
card/list-item selectors when the page has no speaker section. Within each
candidate, name, title and company each run an ordered strategy chain.
Entries without a resolvable name are dropped; duplicates (case-insensitive
name) keep the first occurrence.
"""

import re
from dataclasses import dataclass
from typing import Optional

from bs4 import Tag

from conference_iq.extractors.document import (
    PageInput,
    Strategy,
    as_page,
    element_text,
    first_match,
    in_page_chrome,
    select_cards,
    select_text,
)
from conference_iq.models import ExtractedSpeaker

SPEAKER_SELECTORS = [
    '[class*="speaker"]',
    '[class*="presenter"]',
    '[id*="speaker"]',
    '[id*="presenter"]',
    ".speakers",
    ".presenters",
    'section[class*="speaker"]',
]

FALLBACK_SELECTOR = '[class*="card"], [class*="item"], [class*="person"], li, .grid > div'

MIN_TEXT_LENGTH = 5
MAX_TEXT_LENGTH = 500
MAX_FIELD_LENGTH = 100

# A line made of 2-4 capitalized tokens: "Jane Doe", "John A. Smith", "Mary O'Neil"
NAME_LINE = re.compile(r"^([A-Z][\w'’.-]*(?:[ \t]+[A-Z][\w'’.-]*){1,3})[ \t]*$", re.M)
# "John A. Smith" anywhere in running text
MIDDLE_INITIAL_NAME = re.compile(r"\b([A-Z][a-z]+[ \t]+[A-Z]\.?[ \t]+[A-Z][a-z]+)\b")

NAME_HEADINGS = 'h1, h2, h3, h4, h5, h6, strong, b, [class*="name"]'

# Section and navigation words that never appear in a person's name
NON_NAME_WORDS = {
    "about", "agenda", "all", "call", "contact", "day", "featured", "for", "home",
    "keynote", "keynotes", "learn", "login", "meet", "more", "news", "our",
    "panel", "papers", "policy", "privacy", "program", "read", "register",
    "registration", "schedule", "session", "sessions", "sign", "speaker",
    "speakers", "sponsor", "sponsors", "exhibitors", "the", "terms", "tickets",
    "track", "travel", "venue", "view", "workshop", "workshops",
}

TITLE_KEYWORDS = re.compile(
    r"\b(?:VP|Vice President|President|CEO|CTO|CFO|COO|CMO|CIO|Director|Manager|Lead|"
    r"Head|Chief|Founder|Co-Founder|Engineer|Architect|Developer|Scientist|Partner|"
    r"Officer|Professor|Researcher|Consultant|Advocate|Evangelist|Analyst|Designer)\b"
)

LABELED_TITLE = re.compile(r"(?:title|position|role)\s*:\s*(.+?)(?:\n|$|,)", re.I)
LABELED_COMPANY = re.compile(
    r"(?:company|organi[sz]ation|firm|corporation|employer)\s*:\s*(.+?)(?:\n|$|,)", re.I
)

COMPANY_WORDS = r"([A-Z][\w&.'’-]*(?:[ \t]+(?:&[ \t]+)?[A-Z][\w&.'’-]*)*)"
AT_COMPANY = re.compile(rf"(?:\bat|@)[ \t]+{COMPANY_WORDS}")
FROM_COMPANY = re.compile(rf"\bfrom[ \t]+{COMPANY_WORDS}")

TITLE_SELECTOR = '[class*="title"], [class*="position"], [class*="role"], [class*="job"]'
COMPANY_SELECTOR = (
    '[class*="company"], [class*="organization"], [class*="organisation"], '
    '[class*="firm"], [class*="affiliation"]'
)

# "CTO at Acme", "CTO, Acme", "CTO - Acme", "CTO | Acme"
TITLE_SEPARATOR = re.compile(r"\s+(?:at|@)\s+|\s*,\s*|\s+[-–—|]\s+")


@dataclass
class SpeakerCard:
    element: Tag
    text: str
    name: Optional[str] = None

    @property
    def lines(self) -> list[str]:
        return [line for line in self.text.split("\n") if line != self.name]


def is_person_name(candidate: Optional[str]) -> bool:
    """2-4 capitalized words, no digits, no job-title or navigation words."""
    if not candidate:
        return False
    words = candidate.split()
    if not 2 <= len(words) <= 4:
        return False
    if any(not word[0].isupper() for word in words):
        return False
    if any(char.isdigit() for char in candidate):
        return False
    # "Principal Engineer" is a title line, not a name
    if TITLE_KEYWORDS.search(candidate):
        return False
    return not any(word.strip(".,:;!?'’").casefold() in NON_NAME_WORDS for word in words)


def _clean_field(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip(" \t,;:-–—|")
    if not value or len(value) > MAX_FIELD_LENGTH:
        return None
    return value


# ---------------------------------------------------------------------------
# Name strategies


def _name_from_lines(card: SpeakerCard) -> Optional[str]:
    for match in NAME_LINE.finditer(card.text):
        candidate = match.group(1).strip()
        if is_person_name(candidate):
            return candidate
    return None


def _name_with_initial(card: SpeakerCard) -> Optional[str]:
    for match in MIDDLE_INITIAL_NAME.finditer(card.text):
        if is_person_name(match.group(1)):
            return match.group(1)
    return None


def _name_from_heading(card: SpeakerCard) -> Optional[str]:
    heading = select_text(card.element, NAME_HEADINGS)
    if MIN_TEXT_LENGTH <= len(heading) < MAX_FIELD_LENGTH and is_person_name(heading):
        return heading
    return None


NAME_STRATEGIES: list[Strategy] = [
    ("name_line", _name_from_lines),
    ("middle_initial", _name_with_initial),
    ("heading", _name_from_heading),
]


# ---------------------------------------------------------------------------
# Title strategies


def _labeled_title(card: SpeakerCard) -> Optional[str]:
    match = LABELED_TITLE.search(card.text)
    return _clean_field(match.group(1)) if match else None


def _title_keyword_line(card: SpeakerCard) -> Optional[str]:
    for line in card.lines:
        if TITLE_KEYWORDS.search(line):
            return _clean_field(TITLE_SEPARATOR.split(line, maxsplit=1)[0])
    return None


def _title_from_selector(card: SpeakerCard) -> Optional[str]:
    text = select_text(card.element, TITLE_SELECTOR)
    if text == card.name:
        return None
    return _clean_field(text)


TITLE_STRATEGIES: list[Strategy] = [
    ("labeled", _labeled_title),
    ("keyword_line", _title_keyword_line),
    ("selector", _title_from_selector),
]


# ---------------------------------------------------------------------------
# Company strategies


def _labeled_company(card: SpeakerCard) -> Optional[str]:
    match = LABELED_COMPANY.search(card.text)
    return _clean_field(match.group(1)) if match else None


def _company_after_at(card: SpeakerCard) -> Optional[str]:
    for line in card.lines:
        match = AT_COMPANY.search(line)
        if match:
            return _clean_field(match.group(1))
    return None


def _company_after_title(card: SpeakerCard) -> Optional[str]:
    # "CTO, Acme Corp" / "CTO - Acme Corp"
    for line in card.lines:
        if TITLE_KEYWORDS.search(line):
            parts = TITLE_SEPARATOR.split(line, maxsplit=1)
            if len(parts) == 2:
                return _clean_field(parts[1])
    return None


def _company_after_from(card: SpeakerCard) -> Optional[str]:
    match = FROM_COMPANY.search(card.text)
    return _clean_field(match.group(1)) if match else None


def _company_from_selector(card: SpeakerCard) -> Optional[str]:
    return _clean_field(select_text(card.element, COMPANY_SELECTOR))


COMPANY_STRATEGIES: list[Strategy] = [
    ("labeled", _labeled_company),
    ("at", _company_after_at),
    ("after_title", _company_after_title),
    ("from", _company_after_from),
    ("selector", _company_from_selector),
]


# ---------------------------------------------------------------------------


def find_speaker_elements(soup) -> list[Tag]:
    """Speaker-section matches, else generic cards/list items outside page chrome."""
    root = soup.body or soup
    for selector in SPEAKER_SELECTORS:
        elements = root.select(selector)
        if elements:
            return elements
    return [el for el in root.select(FALLBACK_SELECTOR) if not in_page_chrome(el)]


def extract_speakers(html: PageInput, url: str = "") -> list[ExtractedSpeaker]:
    """Extract speakers from a page."""
    page = as_page(html, url)

    cards: list[SpeakerCard] = []
    for element in find_speaker_elements(page.soup):
        text = element_text(element)
        if not MIN_TEXT_LENGTH <= len(text) <= MAX_TEXT_LENGTH:
            continue
        card = SpeakerCard(element=element, text=text)
        card.name = first_match(NAME_STRATEGIES, card)
        if card.name:
            cards.append(card)

    kept = {id(el) for el, _ in select_cards([(c.element, c.name) for c in cards])}

    speakers: list[ExtractedSpeaker] = []
    seen: set[str] = set()
    for card in cards:
        if id(card.element) not in kept:
            continue
        key = card.name.casefold()
        if key in seen:
            continue
        seen.add(key)
        speakers.append(ExtractedSpeaker(
            name=card.name,
            title=first_match(TITLE_STRATEGIES, card),
            company=first_match(COMPANY_STRATEGIES, card),
        ))

    return speakers
