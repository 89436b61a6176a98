"""Shared parsed-document representation and helpers for the extractors.

Every fallback chain is an ordered list of named strategies; ``first_match``
returns the first acceptable value. There is no scoring across candidates.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, TypeVar, Union

from bs4 import BeautifulSoup, Tag

T = TypeVar("T")

# Strategy chains: (name, fn) pairs tried in order
Strategy = tuple[str, Callable[..., Optional[T]]]

# Tags that never carry visible page text
INVISIBLE_TAGS = ["script", "style", "noscript", "template"]

# Page furniture skipped by the generic list/card fallbacks
CHROME_TAGS = {"nav", "header", "footer"}

# Money amount: "25,000", "25,000.00", "2000", "99.5"
AMOUNT = r"(?<![\d,.])(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?"
)

DATE_FORMATS = [
    "%B %d, %Y",      # January 15, 2024
    "%b %d, %Y",      # Jan 15, 2024
    "%B %d %Y",       # January 15 2024
    "%b %d %Y",       # Jan 15 2024
    "%d %B %Y",       # 15 January 2024
    "%d %b %Y",       # 15 Jan 2024
    "%m/%d/%Y",       # 01/15/2024
    "%d/%m/%Y",       # 15/01/2024
    "%m-%d-%Y",       # 01-15-2024
    "%d-%m-%Y",       # 15-01-2024
    "%Y-%m-%d",       # 2024-01-15
    "%Y/%m/%d",       # 2024/01/15
]


@dataclass
class ParsedPage:
    """One page parsed once and shared by all extractors.

    Extractors only read from ``soup``; nothing mutates it after construction.
    """

    soup: BeautifulSoup
    text: str  # Whitespace-collapsed body text
    url: str

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "ParsedPage":
        soup = BeautifulSoup(html or "", "lxml")
        for tag in soup.find_all(INVISIBLE_TAGS):
            tag.decompose()
        root = soup.body or soup
        return cls(soup=soup, text=clean_text(root.get_text(separator=" ")), url=url)


PageInput = Union[str, ParsedPage]


def as_page(html: PageInput, url: str) -> ParsedPage:
    if isinstance(html, ParsedPage):
        return html
    return ParsedPage.from_html(html, url)


def first_match(strategies: Iterable[Strategy], *args) -> Optional[T]:
    """Run strategies in order and return the first truthy value."""
    for _name, strategy in strategies:
        value = strategy(*args)
        if value:
            return value
    return None


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def element_text(element: Tag) -> str:
    """Element text with one line per block, blank lines dropped."""
    raw = element.get_text(separator="\n")
    lines = (clean_text(line) for line in raw.split("\n"))
    return "\n".join(line for line in lines if line)


def select_text(element: Tag, selector: str) -> str:
    """Collapsed text of the first element matching ``selector``, or ''."""
    found = element.select_one(selector)
    if found is None:
        return ""
    return clean_text(found.get_text(separator=" "))


def in_page_chrome(element: Tag) -> bool:
    return any(parent.name in CHROME_TAGS for parent in element.parents)


def same_kind(a: Tag, b: Tag) -> bool:
    """Same tag and at least one shared class (or both classless)."""
    if a.name != b.name:
        return False
    a_classes, b_classes = set(a.get("class") or []), set(b.get("class") or [])
    return bool(a_classes & b_classes) or not (a_classes or b_classes)


def select_cards(candidates: list[tuple[Tag, str]]) -> list[tuple[Tag, str]]:
    """Keep one candidate per card, in document order.

    Section wrappers (``<section class="speakers">``) and the fields inside a
    card (``<h3 class="speaker-name">``) match the same selectors as the cards
    themselves. A wrapper is recognised by repeated same-kind candidates with
    different names directly below it; it is dropped. A candidate nested in a
    kept card is one of that card's fields; it is dropped too.
    """
    by_id = {id(element): (element, name) for element, name in candidates}

    parent_of: dict[int, Optional[int]] = {}
    children_of: dict[int, list[int]] = {key: [] for key in by_id}
    for element, _ in candidates:
        parent = next((id(p) for p in element.parents if id(p) in by_id), None)
        parent_of[id(element)] = parent
        if parent is not None:
            children_of[parent].append(id(element))

    def is_wrapper(key: int) -> bool:
        children = [by_id[child] for child in children_of[key]]
        return any(
            same_kind(a, b) and a_name.casefold() != b_name.casefold()
            for i, (a, a_name) in enumerate(children)
            for b, b_name in children[i + 1:]
        )

    wrappers = {key for key in by_id if is_wrapper(key)}

    kept = []
    for element, name in candidates:
        key = id(element)
        if key in wrappers:
            continue
        ancestor = parent_of[key]
        while ancestor is not None and ancestor in wrappers:
            ancestor = parent_of[ancestor]
        if ancestor is None:
            kept.append((element, name))
    return kept


def parse_amount(value: str) -> Optional[int]:
    """'25,000.50' -> 25001. Returns None for zero or unparseable input."""
    try:
        number = float(value.replace(",", ""))
    except ValueError:
        return None
    if number <= 0 or math.isinf(number):
        return None
    return int(math.floor(number + 0.5))


def parse_date(date_str: Optional[str]) -> Optional[str]:
    """Parse a date string to ISO YYYY-MM-DD through the ordered format list."""
    if not date_str:
        return None

    date_str = clean_text(date_str)
    # "Jan." -> "Jan", "Sept" -> "Sep", "15th" -> "15"
    date_str = re.sub(r"\b([A-Za-z]{3,9})\.", r"\1", date_str)
    date_str = re.sub(r"\bSept\b", "Sep", date_str, flags=re.I)
    date_str = re.sub(r"\b(\d{1,2})(?:st|nd|rd|th)\b", r"\1", date_str)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue

    return None
