"""
In-memory key-value backend

Nothing is persisted across processes. Used by tests and by
STORAGE_BACKEND=memory for throwaway sessions.
"""

import logging
from typing import Dict, Iterator, Optional

from student_hub.exceptions import StorageQuotaExceededError
from student_hub.storage.backends.base import KeyValueBackend

logger = logging.getLogger(__name__)


class MemoryBackend(KeyValueBackend):
    """Dict-backed store with an optional byte quota"""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self.quota_bytes = quota_bytes
        logger.debug("MemoryBackend initialized - data will NOT survive a restart")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            projected = self.total_size() - self.size_of(key) + len(value.encode("utf-8"))
            if projected > self.quota_bytes:
                raise StorageQuotaExceededError(
                    message=f"Writing {key} would use {projected} of {self.quota_bytes} bytes",
                    quota_bytes=self.quota_bytes,
                    key=key,
                    operation="set",
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))
