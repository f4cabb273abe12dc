"""
Persistence adapter

JSON key-value access on top of a raw backend, with:
- Automatic serialization/deserialization
- Graceful degradation (failures are logged and reported as False/default)
- Availability probing
- Backup export/import
- Section clearing and size reporting
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Union

from student_hub import config
from student_hub.exceptions import (
    ImportPayloadError,
    StorageError,
    wrap_storage_exception,
)
from student_hub.models.progression import ProgressionState
from student_hub.models.user import Tier, UserProfile
from student_hub.storage.backends.base import KeyValueBackend
from student_hub.storage.keys import SECTION_KEYS, StorageKey, key_for_name

logger = logging.getLogger(__name__)

KeyLike = Union[StorageKey, str]

METADATA_KEY = "_metadata"
PROBE_KEY = "__storage_test__"


def _key(key: KeyLike) -> str:
    return key.value if isinstance(key, StorageKey) else key


class StorageAdapter:
    """
    JSON value store over a KeyValueBackend.

    Every method catches StorageError at this boundary; callers only ever
    see a default value or a False return.
    """

    def __init__(self, backend: KeyValueBackend, app_version: str = config.APP_VERSION):
        self.backend = backend
        self.app_version = app_version
        self._stats = {
            "reads": 0,
            "writes": 0,
            "removes": 0,
            "errors": 0,
        }

    # ------------------------------------------------------------------
    # Single-key operations
    # ------------------------------------------------------------------

    def get(self, key: KeyLike, default: Any = None) -> Any:
        """
        Load a value.

        Args:
            key: Storage key
            default: Returned when the key is absent or unreadable

        Returns:
            Deserialized value or default
        """
        raw_key = _key(key)
        try:
            raw = self.backend.get_item(raw_key)
        except StorageError:
            self._stats["errors"] += 1
            return default

        self._stats["reads"] += 1
        if raw is None:
            logger.debug(f"No data found for: {raw_key}, using default value")
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error for key '{raw_key}': {e}")
            self._stats["errors"] += 1
            return default

    def set(self, key: KeyLike, value: Any) -> bool:
        """
        Save a value.

        Args:
            key: Storage key
            value: JSON-serializable value

        Returns:
            True if successful, False on serialization or storage failure
        """
        raw_key = _key(key)
        try:
            try:
                serialized = json.dumps(value)
            except (TypeError, ValueError) as e:
                raise wrap_storage_exception(e, operation="set", key=raw_key)
            self.backend.set_item(raw_key, serialized)
        except StorageError:
            self._stats["errors"] += 1
            return False

        self._stats["writes"] += 1
        logger.debug(f"Saved to storage: {raw_key}")
        return True

    def remove(self, key: KeyLike) -> bool:
        """Remove a key; True if the backend accepted the removal"""
        raw_key = _key(key)
        try:
            self.backend.remove_item(raw_key)
        except StorageError:
            self._stats["errors"] += 1
            return False

        self._stats["removes"] += 1
        logger.debug(f"Removed from storage: {raw_key}")
        return True

    def exists(self, key: KeyLike) -> bool:
        try:
            return self.backend.get_item(_key(key)) is not None
        except StorageError:
            return False

    def is_available(self) -> bool:
        """Probe the backend with a throwaway write/remove"""
        try:
            self.backend.set_item(PROBE_KEY, json.dumps("test"))
            self.backend.remove_item(PROBE_KEY)
            return True
        except StorageError:
            logger.warning("Storage not available")
            return False

    def get_stats(self) -> Dict[str, int]:
        return dict(self._stats)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def clear_all(self) -> bool:
        """
        Remove every app key.

        WARNING: cannot be undone.
        """
        ok = True
        for key in StorageKey:
            ok = self.remove(key) and ok
        if ok:
            logger.info("All storage cleared")
        return ok

    def clear_section(self, section: str) -> bool:
        """
        Remove the keys of one app section (study, meals, cleaning, diy, budget, uni).

        Returns:
            False for unknown sections or removal failures
        """
        keys_to_remove = SECTION_KEYS.get(section)
        if keys_to_remove is None:
            logger.error(f"Unknown section: {section}")
            return False

        ok = True
        for key in keys_to_remove:
            ok = self.remove(key) and ok
        logger.info(f"Cleared {section} section data")
        return ok

    def get_storage_size(self) -> Optional[Dict[str, Any]]:
        """
        Approximate size of stored app data.

        Returns:
            {
                'total_bytes': int,
                'total_kb': float,
                'total_mb': float,
                'breakdown': {key name: bytes},
                'limit_bytes': int or None
            }
        """
        try:
            breakdown = {}
            for key in StorageKey:
                size = self.backend.size_of(key.value)
                if size:
                    breakdown[key.name] = size
        except StorageError:
            return None

        total = sum(breakdown.values())
        return {
            "total_bytes": total,
            "total_kb": round(total / 1024, 2),
            "total_mb": round(total / 1024 / 1024, 2),
            "breakdown": breakdown,
            "limit_bytes": getattr(self.backend, "quota_bytes", None),
        }

    def export_all(self) -> Dict[str, Any]:
        """
        Collect every stored app key for backup.

        Returns:
            {KEY_NAME: value, ..., '_metadata': {
                'export_timestamp': ISO-8601 str,
                'schema_version': str,
                'data_keys': [KEY_NAME, ...]
            }}
        """
        export_data: Dict[str, Any] = {}
        for key in StorageKey:
            if not self.exists(key):
                continue
            export_data[key.name] = self.get(key)

        export_data[METADATA_KEY] = {
            "export_timestamp": datetime.now(timezone.utc).isoformat(),
            "schema_version": self.app_version,
            "data_keys": [name for name in export_data],
        }

        logger.info(f"Data exported: {len(export_data) - 1} keys")
        return export_data

    def export_json(self) -> str:
        """export_all() as an indented JSON document"""
        return json.dumps(self.export_all(), indent=2)

    def import_all(self, payload: Union[Dict[str, Any], str]) -> bool:
        """
        Restore a backup produced by export_all()/export_json().

        Matching names overwrite stored values, unknown names are ignored and
        the metadata entry is never written. Not transactional: keys written
        before a failure stay written.

        Args:
            payload: Backup dict or JSON string

        Returns:
            True if the payload parsed and every write succeeded
        """
        try:
            if isinstance(payload, str):
                try:
                    payload = json.loads(payload)
                except json.JSONDecodeError as e:
                    raise ImportPayloadError(f"Backup is not valid JSON: {e}", operation="import", cause=e)

            if not isinstance(payload, dict):
                raise ImportPayloadError(
                    f"Backup must be an object, got {type(payload).__name__}",
                    operation="import",
                )
        except ImportPayloadError:
            return False

        ok = True
        imported = 0
        for name, value in payload.items():
            if name == METADATA_KEY:
                continue
            key = key_for_name(name)
            if key is None:
                logger.debug(f"Skipping unknown backup key: {name}")
                continue
            if self.set(key, value):
                imported += 1
            else:
                ok = False

        logger.info(f"Data imported: {imported} keys")
        return ok

    # ------------------------------------------------------------------
    # First-run defaults and activity timestamps
    # ------------------------------------------------------------------

    def initialize_defaults(self, profile: Optional[UserProfile] = None) -> bool:
        """
        Write default values for keys that are not stored yet.

        Args:
            profile: Profile to store if none exists (default: a "Student" profile)

        Returns:
            True if anything was written
        """
        state = ProgressionState()
        defaults = {
            StorageKey.USER_PROFILE: (profile or UserProfile()).model_dump(mode="json"),
            StorageKey.PROGRESSION: state.model_dump(mode="json", exclude={"achievements"}),
            StorageKey.ACHIEVEMENTS: [],
            StorageKey.USER_TIER: Tier.FREE.value,
            StorageKey.COMPLETED_ITEMS: [],
            StorageKey.LAST_ACTIVE: datetime.now().isoformat(),
        }

        written = 0
        for key, value in defaults.items():
            if self.exists(key):
                continue
            if self.set(key, value):
                written += 1

        if written:
            logger.info(f"Storage initialized with {written} default values")
        else:
            logger.debug("Storage already initialized")
        return written > 0

    def update_last_active(self, now: Optional[datetime] = None) -> bool:
        return self.set(StorageKey.LAST_ACTIVE, (now or datetime.now()).isoformat())

    def was_active_today(self, today: Optional[date] = None) -> bool:
        """True if the last-active timestamp falls on today's local date"""
        last_active = self.get(StorageKey.LAST_ACTIVE)
        if not last_active:
            return False

        try:
            last_date = datetime.fromisoformat(last_active).date()
        except (TypeError, ValueError):
            logger.warning(f"Unreadable last-active timestamp: {last_active!r}")
            return False

        return last_date == (today or date.today())
