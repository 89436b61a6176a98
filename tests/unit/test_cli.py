"""Tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from conference_iq import cli
from conference_iq.cli import app
from conference_iq.models import ConferenceRecord, CrawlLogEntry
from conference_iq.storage import JSONConferenceStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep Rich tables from wrapping cell text."""
    monkeypatch.setattr(cli.console, "width", 200)


@pytest.fixture
def store_path(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    monkeypatch.setenv("CONFERENCE_IQ_STORE", str(path))
    monkeypatch.setenv("CONFERENCE_IQ_ARCHIVE_DIR", str(tmp_path / "html"))
    return path


class TestExtractCommand:
    def test_extract_saved_page(self, tmp_path, conference_html: str):
        """Extraction runs offline over a saved page."""
        page = tmp_path / "devconf.html"
        page.write_text(conference_html, encoding="utf-8")

        result = runner.invoke(app, ["extract", str(page), "--url", "https://devconf.io/"])

        assert result.exit_code == 0
        assert "DevConf 2024" in result.output
        assert "Jane Doe" in result.output
        assert "Initech" in result.output
        assert "$25,000" in result.output

    def test_unreadable_pdf(self, tmp_path):
        pdf = tmp_path / "prospectus.pdf"
        pdf.write_bytes(b"not a pdf")

        result = runner.invoke(app, ["pricing-pdf", str(pdf)])

        assert result.exit_code == 0
        assert "No explicit prices found" in result.output


class TestStoreCommands:
    def test_empty_store(self, store_path):
        result = runner.invoke(app, ["conferences"])
        assert result.exit_code == 0
        assert "No conferences stored" in result.output

    def test_list_conferences(self, store_path):
        JSONConferenceStore(store_path).insert_conference(ConferenceRecord(
            url="https://devconf.io/",
            name="DevConf 2024",
            city="Berlin",
            fields_populated_count=6,
        ))

        result = runner.invoke(app, ["conferences"])

        assert result.exit_code == 0
        assert "DevConf 2024" in result.output
        assert "40%" in result.output

    def test_logs(self, store_path):
        JSONConferenceStore(store_path).insert_crawl_log(
            CrawlLogEntry(status="failed", error_message="HTTP 503")
        )

        result = runner.invoke(app, ["logs", "--status", "failed"])

        assert result.exit_code == 0
        assert "HTTP 503" in result.output

    def test_logs_unknown_status(self, store_path):
        result = runner.invoke(app, ["logs", "--status", "broken"])
        assert result.exit_code == 1

    def test_recrawl_unknown_id(self, store_path):
        """Unknown ids fail without starting a browser."""
        result = runner.invoke(app, ["recrawl", "missing-id"])

        assert result.exit_code == 1
        assert "Conference not found: missing-id" in result.output
        assert len(JSONConferenceStore(store_path).list_crawl_logs()) == 1
