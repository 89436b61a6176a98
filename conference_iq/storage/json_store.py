"""JSON file store for conferences, child rows and the crawl log."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from conference_iq.models import (
    ConferenceRecord,
    CrawlLogEntry,
    CrawlStatus,
    Exhibitor,
    Speaker,
)
from conference_iq.models.conference import as_utc, utcnow
from conference_iq.storage.base import StorageError

console = Console()

STORE_DIR = Path(__file__).parent.parent.parent / ".cache"
STORE_FILE = STORE_DIR / "conference_store.json"


def default_store_path() -> Path:
    env_path = os.environ.get("CONFERENCE_IQ_STORE")
    return Path(env_path) if env_path else STORE_FILE


class JSONConferenceStore:
    """Conference repository backed by one JSON file.

    The whole file is rewritten on every mutation; the last write wins.
    """

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path) if store_path else default_store_path()
        self._conferences: dict[str, ConferenceRecord] = {}
        self._speakers: list[Speaker] = []
        self._exhibitors: list[Exhibitor] = []
        self._crawl_logs: list[CrawlLogEntry] = []
        self._load()

    def _load(self) -> None:
        """Load store from disk."""
        if not self.store_path.exists():
            return
        try:
            with open(self.store_path) as f:
                data = json.load(f)
            for item in data.get("conferences", []):
                record = ConferenceRecord.model_validate(item)
                self._conferences[record.id] = record
            self._speakers = [Speaker.model_validate(s) for s in data.get("speakers", [])]
            self._exhibitors = [Exhibitor.model_validate(e) for e in data.get("exhibitors", [])]
            self._crawl_logs = [CrawlLogEntry.model_validate(c) for c in data.get("crawl_logs", [])]
        except Exception as e:
            console.print(f"[red]Failed to load conference store {self.store_path}: {e}[/red]")
            raise StorageError(f"Unreadable store file: {self.store_path}") from e

        console.print(f"[dim]Loaded {len(self._conferences)} conferences from store[/dim]")

    def _save(self) -> None:
        """Save store to disk."""
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.store_path, "w") as f:
            json.dump({
                "updated_at": utcnow().isoformat(),
                "conferences": [c.model_dump(mode="json") for c in self._conferences.values()],
                "speakers": [s.model_dump(mode="json") for s in self._speakers],
                "exhibitors": [e.model_dump(mode="json") for e in self._exhibitors],
                "crawl_logs": [c.model_dump(mode="json") for c in self._crawl_logs],
            }, f, indent=2)

    # -- conferences --------------------------------------------------------

    def find_by_url(self, url: str) -> Optional[ConferenceRecord]:
        for record in self._conferences.values():
            if record.url == url:
                return record
        return None

    def find_by_id(self, conference_id: str) -> Optional[ConferenceRecord]:
        return self._conferences.get(conference_id)

    def insert_conference(self, record: ConferenceRecord) -> ConferenceRecord:
        """Insert a new conference.

        Raises:
            StorageError: empty name or URL, or a conference with the same URL
                or id already exists
        """
        if not record.name.strip() or not record.url.strip():
            raise StorageError("Conference name and URL are required")
        if self.find_by_url(record.url) is not None:
            raise StorageError(f"Conference already exists for URL: {record.url}")
        if record.id in self._conferences:
            raise StorageError(f"Conference id already exists: {record.id}")

        self._conferences[record.id] = record
        self._save()
        return record

    def update_conference(self, conference_id: str, changes: dict[str, Any]) -> ConferenceRecord:
        """Apply ``changes`` to a stored conference and return the new record.

        Raises:
            StorageError: unknown id, or the new URL belongs to another record
        """
        existing = self._conferences.get(conference_id)
        if existing is None:
            raise StorageError(f"Conference not found: {conference_id}")

        new_url = changes.get("url")
        if new_url and new_url != existing.url:
            other = self.find_by_url(new_url)
            if other is not None and other.id != conference_id:
                raise StorageError(f"Conference already exists for URL: {new_url}")

        updated = ConferenceRecord.model_validate({
            **existing.model_dump(),
            **changes,
            "id": conference_id,
            "created_at": existing.created_at,
            "updated_at": utcnow(),
        })
        self._conferences[conference_id] = updated
        self._save()
        return updated

    def list_conferences(self) -> list[ConferenceRecord]:
        return list(self._conferences.values())

    # -- child rows ---------------------------------------------------------

    def insert_speakers(self, speakers: list[Speaker]) -> list[Speaker]:
        if not speakers:
            return []
        self._speakers.extend(speakers)
        self._save()
        return list(speakers)

    def insert_exhibitors(self, exhibitors: list[Exhibitor]) -> list[Exhibitor]:
        if not exhibitors:
            return []
        self._exhibitors.extend(exhibitors)
        self._save()
        return list(exhibitors)

    def delete_speakers(self, conference_id: str, keep: Optional[set[str]] = None) -> int:
        keep = keep or set()
        kept = [s for s in self._speakers if s.conference_id != conference_id or s.id in keep]
        deleted = len(self._speakers) - len(kept)
        if deleted:
            self._speakers = kept
            self._save()
        return deleted

    def delete_exhibitors(self, conference_id: str, keep: Optional[set[str]] = None) -> int:
        keep = keep or set()
        kept = [e for e in self._exhibitors if e.conference_id != conference_id or e.id in keep]
        deleted = len(self._exhibitors) - len(kept)
        if deleted:
            self._exhibitors = kept
            self._save()
        return deleted

    def list_speakers(self, conference_id: str) -> list[Speaker]:
        return [s for s in self._speakers if s.conference_id == conference_id]

    def list_exhibitors(self, conference_id: str) -> list[Exhibitor]:
        return [e for e in self._exhibitors if e.conference_id == conference_id]

    # -- crawl log ----------------------------------------------------------

    def insert_crawl_log(self, entry: CrawlLogEntry) -> CrawlLogEntry:
        self._crawl_logs.append(entry)
        self._save()
        return entry

    def list_crawl_logs(
        self,
        status: Optional[CrawlStatus] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> list[CrawlLogEntry]:
        """Crawl log entries, oldest first, filtered by status and time range.

        ``since`` is inclusive, ``until`` exclusive.
        """
        logs = self._crawl_logs
        if status:
            logs = [log for log in logs if log.status == status]
        if since:
            since = as_utc(since)
            logs = [log for log in logs if as_utc(log.crawled_at) >= since]
        if until:
            until = as_utc(until)
            logs = [log for log in logs if as_utc(log.crawled_at) < until]
        return sorted(logs, key=lambda log: as_utc(log.crawled_at))
