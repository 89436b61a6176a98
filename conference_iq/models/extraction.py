"""Typed partial results returned by the field extractors."""

from typing import Optional

from pydantic import BaseModel, Field


class BasicInfo(BaseModel):
    """Name, dates, location, attendance and industry of a conference page."""

    name: Optional[str] = None
    start_date: Optional[str] = None  # ISO YYYY-MM-DD
    end_date: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    attendance_estimate: Optional[int] = None
    industry: list[str] = Field(default_factory=list)


class ExtractedSpeaker(BaseModel):
    name: str
    title: Optional[str] = None
    company: Optional[str] = None


class ExtractedExhibitor(BaseModel):
    company_name: str
    exhibitor_tier_raw: Optional[str] = None
    exhibitor_tier_normalized: Optional[str] = None
    estimated_cost: Optional[int] = None  # Only explicit figures


class TicketPricing(BaseModel):
    early_bird: Optional[int] = None
    regular: Optional[int] = None
    late: Optional[int] = None
    student: Optional[int] = None
    group: Optional[int] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class SponsorTierPrice(BaseModel):
    tier: str
    cost: int


class ExtractedPricing(BaseModel):
    ticket_pricing: Optional[TicketPricing] = None
    sponsor_tiers: list[SponsorTierPrice] = Field(default_factory=list)
    pricing_url: Optional[str] = None


class ExtractedContact(BaseModel):
    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    organizer_phone: Optional[str] = None
    agenda_url: Optional[str] = None


class ExtractionBundle(BaseModel):
    """Everything the five extractors found on one page."""

    basic_info: BasicInfo = Field(default_factory=BasicInfo)
    speakers: list[ExtractedSpeaker] = Field(default_factory=list)
    exhibitors: list[ExtractedExhibitor] = Field(default_factory=list)
    pricing: ExtractedPricing = Field(default_factory=ExtractedPricing)
    contact: ExtractedContact = Field(default_factory=ExtractedContact)
