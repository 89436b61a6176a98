"""Tests for ticket and sponsor-tier pricing extraction."""

from conference_iq.extractors import pricing
from conference_iq.extractors.pricing import (
    extract_pricing,
    extract_pricing_from_pdf,
    extract_sponsor_tiers,
    extract_ticket_pricing,
)
from conference_iq.models import SponsorTierPrice, TicketPricing


class TestTicketPricing:
    """Tests for named ticket tiers."""

    def test_ticket_tiers(self):
        """Each named tier reads its explicit figure."""
        result = extract_ticket_pricing(
            "Early Bird Tickets: $299 General Admission - $399 Group rate: $250 Onsite: $499"
        )
        assert result.early_bird == 299
        assert result.regular == 399
        assert result.group == 250
        assert result.late == 499
        assert result.student is None

    def test_no_prices(self):
        """No named prices gives None rather than an empty object."""
        assert extract_ticket_pricing("Free entry for everyone") is None

    def test_is_empty(self):
        assert TicketPricing().is_empty()
        assert not extract_ticket_pricing("Student pass: $99").is_empty()


class TestSponsorTiers:
    """Tests for sponsor tier prices."""

    def test_tiers_in_order_without_duplicates(self):
        """Tier/cost pairs are deduplicated and keep first-seen order."""
        text = (
            "Platinum package: $50,000. Gold Sponsor - $25,000. "
            "Gold Sponsor - $25,000. Sponsor $10,000 - Silver"
        )
        assert extract_sponsor_tiers(text) == [
            SponsorTierPrice(tier="platinum", cost=50000),
            SponsorTierPrice(tier="gold", cost=25000),
            SponsorTierPrice(tier="silver", cost=10000),
        ]

    def test_dollar_sign_required(self):
        """Bare numbers next to a tier are not read as prices."""
        assert extract_sponsor_tiers("Gold Sponsor 25,000 attendees reached") == []


class TestExtractPricing:
    """Tests for page-level pricing extraction."""

    def test_conference_page(self, conference_html: str):
        """Tickets, sponsor tiers and the pricing link are all found."""
        result = extract_pricing(conference_html, "https://devconf.io/")

        assert result.ticket_pricing.early_bird == 499
        assert result.ticket_pricing.regular == 799
        assert result.ticket_pricing.student == 99
        assert result.sponsor_tiers == [SponsorTierPrice(tier="gold", cost=25000)]
        assert result.pricing_url == "https://devconf.io/tickets"

    def test_relative_pricing_link_needs_base_url(self, conference_html: str):
        """Without a page URL relative links cannot be resolved."""
        assert extract_pricing(conference_html).pricing_url is None

    def test_pricing_link_from_text(self):
        """Links are also recognized by their text."""
        html = '<html><body><a href="/buy">Get your tickets</a></body></html>'
        assert extract_pricing(html, "https://x.io/").pricing_url == "https://x.io/buy"


class TestPdfPricing:
    """Tests for pricing extraction from PDFs."""

    def test_unreadable_pdf_gives_empty_result(self):
        """A document that cannot be parsed yields an empty result."""
        result = extract_pricing_from_pdf(b"this is not a pdf")
        assert result.ticket_pricing is None
        assert result.sponsor_tiers == []
        assert result.pricing_url is None

    def test_pdf_text_uses_same_patterns(self, monkeypatch):
        """Text pulled from the PDF runs through the page patterns."""
        monkeypatch.setattr(
            pricing, "read_pdf_text", lambda source: "Gold Sponsor - $25,000\nStudent pass: $49"
        )
        result = extract_pricing_from_pdf(b"%PDF-1.4")
        assert result.sponsor_tiers == [SponsorTierPrice(tier="gold", cost=25000)]
        assert result.ticket_pricing.student == 49
