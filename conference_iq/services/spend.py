"""Explicit-cost spend summaries.

Only costs stated on the page or in a prospectus are counted. There is no
tier-based estimation, no industry average and no cost range: an exhibitor
without a figure is counted as unknown.
"""

from typing import Optional

from pydantic import BaseModel, Field

from conference_iq.extractors.pricing import PdfSource, extract_pricing_from_pdf
from conference_iq.models import ExtractedExhibitor, SponsorTierPrice


class ExhibitorCost(BaseModel):
    company_name: str
    tier: Optional[str] = None
    cost: Optional[int] = None  # None = unknown


class SpendSummary(BaseModel):
    exhibitor_costs: list[ExhibitorCost] = Field(default_factory=list)
    total_spend: Optional[int] = None  # None when no explicit cost was found
    unknown_count: int = 0


class PdfSpend(BaseModel):
    explicit_costs: list[SponsorTierPrice] = Field(default_factory=list)
    unknown_tiers: list[str] = Field(default_factory=list)


class CostsBySource(BaseModel):
    exhibitors: int = 0
    sponsor_tiers: int = 0


class CombinedSpend(BaseModel):
    total_explicit_spend: Optional[int] = None
    explicit_costs_by_source: CostsBySource = Field(default_factory=CostsBySource)
    unknown_count: int = 0


def extract_spend_from_exhibitors(exhibitors: list[ExtractedExhibitor]) -> SpendSummary:
    """Per-exhibitor explicit costs and their total."""
    summary = SpendSummary()
    total = 0

    for exhibitor in exhibitors:
        cost = exhibitor.estimated_cost
        if cost is not None and cost > 0:
            total += cost
        else:
            cost = None
            summary.unknown_count += 1

        summary.exhibitor_costs.append(ExhibitorCost(
            company_name=exhibitor.company_name,
            tier=exhibitor.exhibitor_tier_normalized,
            cost=cost,
        ))

    summary.total_spend = total if total > 0 else None
    return summary


def extract_spend_from_sponsor_tiers(tiers: list[SponsorTierPrice]) -> list[SponsorTierPrice]:
    return [tier for tier in tiers if tier.cost > 0]


def extract_spend_from_pdf(source: PdfSource) -> PdfSpend:
    """Sponsor-tier prices stated in a PDF prospectus."""
    pricing = extract_pricing_from_pdf(source)
    return PdfSpend(explicit_costs=extract_spend_from_sponsor_tiers(pricing.sponsor_tiers))


def combine_spend_data(
    exhibitor_spend: SpendSummary,
    sponsor_tiers: list[SponsorTierPrice],
) -> CombinedSpend:
    exhibitor_total = exhibitor_spend.total_spend or 0
    sponsor_total = sum(tier.cost for tier in sponsor_tiers)
    total = exhibitor_total + sponsor_total

    return CombinedSpend(
        total_explicit_spend=total if total > 0 else None,
        explicit_costs_by_source=CostsBySource(
            exhibitors=exhibitor_total,
            sponsor_tiers=sponsor_total,
        ),
        unknown_count=exhibitor_spend.unknown_count,
    )


def format_cost(cost: Optional[int]) -> str:
    """25000 -> '$25,000'; None -> 'Unknown'."""
    if cost is None:
        return "Unknown"
    return f"${cost:,.0f}"
