"""Persistence for conferences, speakers, exhibitors and the crawl log."""

from conference_iq.storage.base import ConferenceRepository, StorageError
from conference_iq.storage.json_store import JSONConferenceStore

__all__ = ["ConferenceRepository", "JSONConferenceStore", "StorageError"]
