"""
Activity Log

Most-recent-first history of point-earning events, stored as one list under
StorageKey.ACTIVITY_LOG. Only the newest `limit` entries are kept; older ones
are dropped on write.
"""

from typing import List, Optional
from datetime import datetime, timedelta
import logging

from pydantic import ValidationError as PydanticValidationError

from student_hub import config
from student_hub.models.activity import ActivityLogEntry
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.keys import StorageKey

logger = logging.getLogger(__name__)


class ActivityLog:
    """Bounded activity history"""

    def __init__(self, storage: StorageAdapter, limit: int = config.ACTIVITY_LOG_LIMIT):
        self.storage = storage
        self.limit = limit

    def _load_raw(self) -> list:
        raw = self.storage.get(StorageKey.ACTIVITY_LOG, [])
        if not isinstance(raw, list):
            logger.warning("Activity log is not a list, starting a new one")
            return []
        return raw

    def record(self, entry: ActivityLogEntry) -> bool:
        """
        Prepend an entry and drop anything past the limit

        Returns:
            True if the log was persisted
        """
        entries = self._load_raw()
        entries.insert(0, entry.model_dump(mode="json"))
        del entries[self.limit:]
        return self.storage.set(StorageKey.ACTIVITY_LOG, entries)

    def log(self, action: str, points: int, at: Optional[datetime] = None) -> Optional[ActivityLogEntry]:
        """
        Record an action with its point delta

        Returns:
            The stored entry, None if it could not be persisted
        """
        entry = ActivityLogEntry.create(action, points, at)
        return entry if self.record(entry) else None

    def get_entries(self, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        """Entries newest first, skipping any that fail validation"""
        entries = []
        for raw in self._load_raw()[:limit]:
            try:
                entries.append(ActivityLogEntry.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed activity entry: {e}")
        return entries

    def get_recent(self, days: int = 7, now: Optional[datetime] = None) -> List[ActivityLogEntry]:
        """
        Entries from the last `days` days

        Args:
            days: Window size
            now: Reference time (default: now)
        """
        cutoff = (now or datetime.now()) - timedelta(days=days)
        return [e for e in self.get_entries() if e.timestamp >= cutoff]

    def clear(self) -> bool:
        return self.storage.remove(StorageKey.ACTIVITY_LOG)

    def __len__(self) -> int:
        return len(self._load_raw())
