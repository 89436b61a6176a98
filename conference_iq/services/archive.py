"""Raw HTML archive for crawled pages."""

import os
from pathlib import Path
from typing import Optional, Protocol

from rich.console import Console

from conference_iq.crawler.urls import sanitize_hostname
from conference_iq.models.conference import utcnow

console = Console()

ARCHIVE_DIR = Path(__file__).parent.parent.parent / ".cache" / "html"


def default_archive_dir() -> Path:
    env_dir = os.environ.get("CONFERENCE_IQ_ARCHIVE_DIR")
    return Path(env_dir) if env_dir else ARCHIVE_DIR


def archive_filename(conference_id: str, url: str) -> str:
    timestamp = utcnow().strftime("%Y%m%d%H%M%S%f")
    return f"{conference_id}/{sanitize_hostname(url)}_{timestamp}.html"


class HtmlArchive(Protocol):
    def save(self, html: str, conference_id: str, url: str) -> Optional[str]: ...


class LocalHtmlArchive:
    """Writes ``{base}/{conference_id}/{host}_{timestamp}.html``."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else default_archive_dir()

    def save(self, html: str, conference_id: str, url: str) -> Optional[str]:
        """Write the page and return its path, or None on failure."""
        try:
            path = self.base_dir / archive_filename(conference_id, url)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
            return str(path)
        except Exception as e:
            console.print(f"[yellow]Error saving HTML to archive: {e}[/yellow]")
            return None
