"""
JSON file key-value backend

One JSON document per namespace under DATA_PATH:

    data/
        default.json    {"slh_user_profile": "{...}", "slh_user_data": "{...}"}

The whole document is rewritten on every change (write to a temp file, then
replace), so a crash mid-write leaves the previous document intact.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Optional

from student_hub.exceptions import (
    StorageQuotaExceededError,
    StorageUnavailableError,
    wrap_storage_exception,
)
from student_hub.storage.backends.base import KeyValueBackend

logger = logging.getLogger(__name__)


class FileBackend(KeyValueBackend):
    """Namespace-per-file store"""

    def __init__(self, data_path: Path, namespace: str = "default", quota_bytes: Optional[int] = None):
        self.data_path = Path(data_path)
        self.namespace = namespace
        self.quota_bytes = quota_bytes
        self._items: Optional[Dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self.data_path / f"{self.namespace}.json"

    def _load(self) -> Dict[str, str]:
        if self._items is not None:
            return self._items

        if not self.path.exists():
            self._items = {}
            return self._items

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise wrap_storage_exception(e, operation="load", key=str(self.path))
        except json.JSONDecodeError as e:
            raise StorageUnavailableError(
                message=f"Storage file {self.path} is corrupt: {e}",
                key=str(self.path),
                operation="load",
                cause=e,
            )

        if not isinstance(raw, dict):
            raise StorageUnavailableError(
                message=f"Storage file {self.path} does not hold an object",
                key=str(self.path),
                operation="load",
            )

        self._items = {str(k): str(v) for k, v in raw.items()}
        logger.debug(f"Loaded {len(self._items)} keys from {self.path}")
        return self._items

    def _flush(self, items: Dict[str, str], key: str) -> None:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(items), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise wrap_storage_exception(e, operation="write", key=key)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = dict(self._load())
        items[key] = value

        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for v in items.values())
            if used > self.quota_bytes:
                raise StorageQuotaExceededError(
                    message=f"Writing {key} would use {used} of {self.quota_bytes} bytes",
                    quota_bytes=self.quota_bytes,
                    key=key,
                    operation="set",
                )

        self._flush(items, key)
        self._items = items

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key not in items:
            return
        remaining = {k: v for k, v in items.items() if k != key}
        self._flush(remaining, key)
        self._items = remaining

    def keys(self) -> Iterator[str]:
        return iter(list(self._load()))
