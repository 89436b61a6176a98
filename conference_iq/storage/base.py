"""Persistence interface consumed by the crawl service."""

from datetime import datetime
from typing import Any, Optional, Protocol

from conference_iq.models import (
    ConferenceRecord,
    CrawlLogEntry,
    CrawlStatus,
    Exhibitor,
    Speaker,
)


class StorageError(RuntimeError):
    """Invalid persistence operation (unknown id, duplicate URL, missing name)."""


class ConferenceRepository(Protocol):
    """Conferences keyed by normalized URL, their child rows, and the crawl log.

    The crawl log is append-only: entries are never updated or deleted.
    Child row deletes spare the ids in ``keep``.
    """

    def find_by_url(self, url: str) -> Optional[ConferenceRecord]: ...

    def find_by_id(self, conference_id: str) -> Optional[ConferenceRecord]: ...

    def insert_conference(self, record: ConferenceRecord) -> ConferenceRecord: ...

    def update_conference(self, conference_id: str, changes: dict[str, Any]) -> ConferenceRecord: ...

    def list_conferences(self) -> list[ConferenceRecord]: ...

    def insert_speakers(self, speakers: list[Speaker]) -> list[Speaker]: ...

    def insert_exhibitors(self, exhibitors: list[Exhibitor]) -> list[Exhibitor]: ...

    def delete_speakers(self, conference_id: str, keep: Optional[set[str]] = None) -> int: ...

    def delete_exhibitors(self, conference_id: str, keep: Optional[set[str]] = None) -> int: ...

    def list_speakers(self, conference_id: str) -> list[Speaker]: ...

    def list_exhibitors(self, conference_id: str) -> list[Exhibitor]: ...

    def insert_crawl_log(self, entry: CrawlLogEntry) -> CrawlLogEntry: ...

    def list_crawl_logs(
        self,
        status: Optional[CrawlStatus] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> list[CrawlLogEntry]: ...
