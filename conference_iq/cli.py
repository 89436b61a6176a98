"""CLI for the conference crawl pipeline."""

import asyncio
from datetime import timedelta
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from conference_iq.extractors import extract_all, extract_pricing_from_pdf
from conference_iq.models import CrawlOptions, CrawlOutcome, ExtractedPricing
from conference_iq.models.conference import utcnow
from conference_iq.services import CrawlerService, crawl_urls, run_scheduled_crawl
from conference_iq.services.scheduler import BATCH_LIMIT, INTER_CRAWL_DELAY, STALE_AFTER_DAYS, BatchSummary
from conference_iq.services.spend import (
    combine_spend_data,
    extract_spend_from_exhibitors,
    extract_spend_from_pdf,
    extract_spend_from_sponsor_tiers,
    format_cost,
)
from conference_iq.storage import JSONConferenceStore

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="conference-iq",
    help="Conference website crawler and extractor",
    add_completion=False,
)
console = Console()


def print_outcome(outcome: CrawlOutcome) -> None:
    color = {"success": "green", "partial": "yellow", "failed": "red"}[outcome.status]
    console.print(f"\n[bold {color}]{outcome.status.upper()}[/bold {color}] {outcome.message}")
    console.print(f"  URL: {outcome.conference_url or '-'}")
    console.print(f"  Conference id: {outcome.conference_id or '-'}")
    if outcome.success:
        stats = outcome.stats
        console.print(f"  Fields populated: {stats.fields_populated}/{stats.total_fields}")
        console.print(f"  Speakers created: {stats.speakers_created}")
        console.print(f"  Exhibitors created: {stats.exhibitors_created}")


def print_batch(summary: BatchSummary) -> None:
    table = Table(title=f"Crawled conferences ({summary.crawled})")
    table.add_column("URL", style="cyan", max_width=50)
    table.add_column("Status")
    table.add_column("Fields", justify="right")
    table.add_column("Speakers", justify="right")
    table.add_column("Exhibitors", justify="right")

    for item in summary.items:
        if item.outcome is None:
            table.add_row(item.url, "[red]error[/red]", "-", "-", "-")
            continue
        stats = item.outcome.stats
        table.add_row(
            item.url,
            item.outcome.status,
            f"{stats.fields_populated}/{stats.total_fields}",
            str(stats.speakers_created),
            str(stats.exhibitors_created),
        )

    console.print(table)
    console.print(
        f"[green]{summary.success_count} succeeded[/green], "
        f"[red]{summary.failure_count} failed[/red]"
    )


def print_pricing(pricing: ExtractedPricing) -> None:
    if pricing.ticket_pricing and not pricing.ticket_pricing.is_empty():
        console.print("\n[bold]Ticket pricing:[/bold]")
        for tier, price in pricing.ticket_pricing.model_dump().items():
            if price is not None:
                console.print(f"  {tier}: {format_cost(price)}")
    if pricing.sponsor_tiers:
        console.print("\n[bold]Sponsor tiers:[/bold]")
        for tier in pricing.sponsor_tiers:
            console.print(f"  {tier.tier}: {format_cost(tier.cost)}")
    if pricing.pricing_url:
        console.print(f"\n  Pricing page: {pricing.pricing_url}")


@app.command()
def crawl(
    urls: list[str] = typer.Argument(..., help="Conference URL(s)"),
    save_html: bool = typer.Option(False, "--save-html", help="Archive the raw HTML"),
    append: bool = typer.Option(False, "--append", help="Append speakers/exhibitors instead of replacing them"),
    delay: float = typer.Option(INTER_CRAWL_DELAY, "--delay", "-d", help="Seconds between crawls"),
):
    """Crawl one or more conference URLs and store the results."""
    store = JSONConferenceStore()
    options = CrawlOptions(save_html_to_storage=save_html)

    async def run():
        async with CrawlerService(store, child_policy="append" if append else "replace") as service:
            if len(urls) == 1:
                return await service.crawl_by_url(urls[0], options)
            return await crawl_urls(service, urls, delay_seconds=delay, options=options)

    result = asyncio.run(run())

    if isinstance(result, CrawlOutcome):
        print_outcome(result)
        if not result.success:
            raise typer.Exit(1)
    else:
        print_batch(result)
        if result.failure_count:
            raise typer.Exit(1)


@app.command()
def recrawl(
    conference_id: str = typer.Argument(..., help="Stored conference id"),
    save_html: bool = typer.Option(False, "--save-html", help="Archive the raw HTML"),
):
    """Re-crawl a stored conference by id."""
    store = JSONConferenceStore()

    async def run():
        async with CrawlerService(store) as service:
            return await service.crawl_by_id(
                conference_id, CrawlOptions(save_html_to_storage=save_html)
            )

    outcome = asyncio.run(run())
    print_outcome(outcome)
    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def scheduled(
    limit: int = typer.Option(BATCH_LIMIT, "--limit", "-l", help="Max conferences per run"),
    stale_days: int = typer.Option(STALE_AFTER_DAYS, "--stale-days", help="Re-crawl after this many days"),
    delay: float = typer.Option(INTER_CRAWL_DELAY, "--delay", "-d", help="Seconds between crawls"),
):
    """Re-crawl conferences never crawled or not crawled recently."""
    store = JSONConferenceStore()

    async def run():
        async with CrawlerService(store) as service:
            return await run_scheduled_crawl(
                service,
                store,
                stale_after_days=stale_days,
                limit=limit,
                delay_seconds=delay,
            )

    summary = asyncio.run(run())
    if summary.crawled:
        print_batch(summary)


@app.command()
def conferences():
    """List stored conferences with their completeness."""
    store = JSONConferenceStore()
    records = store.list_conferences()

    if not records:
        console.print("[yellow]No conferences stored[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Conferences ({len(records)})")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="cyan", max_width=40)
    table.add_column("Dates")
    table.add_column("Location", style="green")
    table.add_column("Complete", justify="right")
    table.add_column("Last crawled")

    for record in records:
        dates = f"{record.start_date or '?'} → {record.end_date or '?'}"
        location = ", ".join(p for p in (record.city, record.country) if p) or "-"
        table.add_row(
            record.id,
            record.name[:40],
            dates,
            location,
            f"{record.completeness:.0%}",
            record.last_crawled_at.strftime("%Y-%m-%d %H:%M") if record.last_crawled_at else "never",
        )

    console.print(table)


@app.command()
def logs(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="success, partial or failed"),
    days: int = typer.Option(7, "--days", help="Only entries from the last N days (0 = all)"),
    limit: int = typer.Option(50, "--limit", "-l", help="Max entries shown"),
):
    """Show the crawl audit log."""
    if status and status not in ("success", "partial", "failed"):
        console.print(f"[red]Unknown status: {status}[/red]")
        raise typer.Exit(1)

    store = JSONConferenceStore()
    since = utcnow() - timedelta(days=days) if days > 0 else None
    entries = store.list_crawl_logs(status=status, since=since)

    if not entries:
        console.print("[yellow]No crawl log entries[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Crawl log ({len(entries)})")
    table.add_column("Crawled at")
    table.add_column("Status")
    table.add_column("Conference", style="dim")
    table.add_column("Details", max_width=60)

    for entry in entries[-limit:]:
        if entry.error_message:
            details = f"[red]{entry.error_message}[/red]"
        elif entry.data_extracted:
            details = ", ".join(f"{k}={v}" for k, v in entry.data_extracted.items())
        else:
            details = "-"
        table.add_row(
            entry.crawled_at.strftime("%Y-%m-%d %H:%M:%S"),
            entry.status,
            entry.conference_id or "-",
            details,
        )

    console.print(table)


@app.command()
def extract(
    html_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML page"),
    url: str = typer.Option("", "--url", "-u", help="Page URL, for resolving relative links"),
):
    """Run the extractors over a saved HTML file (no fetch, nothing stored)."""
    bundle = extract_all(html_file.read_text(encoding="utf-8", errors="replace"), url)
    basic, contact = bundle.basic_info, bundle.contact

    console.print("\n[bold green]Extracted:[/bold green]")
    console.print(f"  Name: {basic.name or 'N/A'}")
    console.print(f"  Dates: {basic.start_date or '?'} → {basic.end_date or '?'}")
    console.print(f"  Location: {', '.join(p for p in (basic.city, basic.country) if p) or 'N/A'}")
    console.print(f"  Attendance: {basic.attendance_estimate or 'N/A'}")
    console.print(f"  Industry: {', '.join(basic.industry) or 'N/A'}")
    console.print(f"  Organizer: {contact.organizer_name or 'N/A'}")
    console.print(f"  Email: {contact.organizer_email or 'N/A'}")
    console.print(f"  Phone: {contact.organizer_phone or 'N/A'}")
    console.print(f"  Agenda: {contact.agenda_url or 'N/A'}")

    if bundle.speakers:
        table = Table(title=f"Speakers ({len(bundle.speakers)})")
        table.add_column("Name", style="cyan")
        table.add_column("Title")
        table.add_column("Company", style="green")
        for speaker in bundle.speakers:
            table.add_row(speaker.name, speaker.title or "-", speaker.company or "-")
        console.print(table)

    if bundle.exhibitors:
        spend = extract_spend_from_exhibitors(bundle.exhibitors)
        table = Table(title=f"Exhibitors ({len(bundle.exhibitors)})")
        table.add_column("Company", style="cyan")
        table.add_column("Tier")
        table.add_column("Cost", justify="right")
        for item in spend.exhibitor_costs:
            table.add_row(item.company_name, item.tier or "-", format_cost(item.cost))
        console.print(table)

        combined = combine_spend_data(
            spend, extract_spend_from_sponsor_tiers(bundle.pricing.sponsor_tiers)
        )
        console.print(
            f"  Total explicit spend: {format_cost(combined.total_explicit_spend)} "
            f"({combined.unknown_count} unknown)"
        )

    print_pricing(bundle.pricing)


@app.command()
def pricing_pdf(
    pdf_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Pricing / prospectus PDF"),
):
    """Extract ticket and sponsor-tier prices from a PDF."""
    data = pdf_file.read_bytes()
    pricing = extract_pricing_from_pdf(data)

    no_tickets = pricing.ticket_pricing is None or pricing.ticket_pricing.is_empty()
    if no_tickets and not pricing.sponsor_tiers:
        console.print("[yellow]No explicit prices found[/yellow]")
        raise typer.Exit(0)

    print_pricing(pricing)

    spend = extract_spend_from_pdf(data)
    total = sum(tier.cost for tier in spend.explicit_costs)
    console.print(f"\n  Sponsor tiers with explicit cost: {len(spend.explicit_costs)} (sum {format_cost(total or None)})")


if __name__ == "__main__":
    app()
