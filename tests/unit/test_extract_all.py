"""Tests for running the extractors together over one page."""

import pytest

from conference_iq.extractors import (
    extract_all,
    extract_basic_info,
    extract_contact,
    extract_exhibitors,
    extract_pricing,
    extract_speakers,
)

URL = "https://devconf.io/"


def dump(result) -> str:
    if isinstance(result, list):
        return "[" + ",".join(item.model_dump_json() for item in result) + "]"
    return result.model_dump_json()


class TestDeterminism:
    """Identical HTML always gives identical results."""

    @pytest.mark.parametrize("extractor", [
        extract_basic_info,
        extract_speakers,
        extract_exhibitors,
        extract_pricing,
        extract_contact,
    ])
    def test_extractor_repeatable(self, extractor, conference_html: str):
        assert dump(extractor(conference_html, URL)) == dump(extractor(conference_html, URL))

    def test_extract_all_repeatable(self, conference_html: str):
        first = extract_all(conference_html, URL)
        second = extract_all(conference_html, URL)

        assert first.model_dump_json() == second.model_dump_json()
        assert first.basic_info.name == "DevConf 2024"


class TestExtractAll:
    def test_bundle_matches_single_extractors(self, conference_html: str):
        """The shared parse gives the same answers as separate calls."""
        bundle = extract_all(conference_html, URL)

        assert bundle.basic_info == extract_basic_info(conference_html, URL)
        assert bundle.speakers == extract_speakers(conference_html, URL)
        assert bundle.exhibitors == extract_exhibitors(conference_html, URL)
        assert bundle.pricing == extract_pricing(conference_html, URL)
        assert bundle.contact == extract_contact(conference_html, URL)

    def test_empty_page(self):
        """Nothing to extract gives empty defaults, not errors."""
        bundle = extract_all("<html><body></body></html>", URL)

        assert bundle.basic_info.name is None
        assert bundle.speakers == []
        assert bundle.exhibitors == []
        assert bundle.contact.organizer_email is None
