"""Unit tests for the persistence adapter and backends (student_hub/storage/)"""
import json
from datetime import date, datetime, timedelta

import pytest

from student_hub.exceptions import StorageQuotaExceededError, StorageUnavailableError
from student_hub.storage.adapter import METADATA_KEY, StorageAdapter
from student_hub.storage.backends.file import FileBackend
from student_hub.storage.backends.memory import MemoryBackend
from student_hub.storage.keys import StorageKey, key_for_name


# ============================================================================
# Single-key Tests
# ============================================================================

def test_get_missing_returns_default(storage):
    assert storage.get(StorageKey.USER_PROFILE) is None
    assert storage.get(StorageKey.FLASHCARDS, []) == []


def test_set_and_get_json(storage):
    value = {"name": "Ana", "tags": ["a", "b"], "count": 3}

    assert storage.set(StorageKey.USER_PROFILE, value) is True
    assert storage.get(StorageKey.USER_PROFILE) == value


def test_set_accepts_raw_string_key(storage):
    storage.set("custom_key", 5)
    assert storage.get("custom_key") == 5


def test_set_unserializable_returns_false(storage):
    assert storage.set(StorageKey.USER_PROFILE, {"when": object()}) is False
    assert storage.get_stats()["errors"] == 1
    assert not storage.exists(StorageKey.USER_PROFILE)


def test_get_corrupt_json_returns_default(storage, memory_backend):
    memory_backend.set_item(StorageKey.USER_PROFILE.value, "{not json")
    assert storage.get(StorageKey.USER_PROFILE, "fallback") == "fallback"


def test_remove_and_exists(storage):
    storage.set(StorageKey.FLASHCARDS, [1])
    assert storage.exists(StorageKey.FLASHCARDS)

    assert storage.remove(StorageKey.FLASHCARDS) is True
    assert not storage.exists(StorageKey.FLASHCARDS)


def test_is_available_leaves_no_probe(storage, memory_backend):
    assert storage.is_available() is True
    assert list(memory_backend.keys()) == []


def test_quota_exceeded_returns_false():
    storage = StorageAdapter(MemoryBackend(quota_bytes=20))

    assert storage.set(StorageKey.USER_TIER, "free") is True
    assert storage.set(StorageKey.FLASHCARDS, ["x" * 50]) is False
    assert storage.get(StorageKey.USER_TIER) == "free"


# ============================================================================
# Bulk Tests
# ============================================================================

def test_clear_all(storage):
    storage.set(StorageKey.USER_PROFILE, {"name": "A"})
    storage.set(StorageKey.BUDGET_DATA, {"income": 100})

    assert storage.clear_all() is True
    assert not storage.exists(StorageKey.USER_PROFILE)
    assert not storage.exists(StorageKey.BUDGET_DATA)


def test_clear_section_only_touches_section(storage):
    storage.set(StorageKey.BUDGET_DATA, {"income": 100})
    storage.set(StorageKey.SAVINGS_GOALS, [])
    storage.set(StorageKey.FLASHCARDS, [1])

    assert storage.clear_section("budget") is True
    assert not storage.exists(StorageKey.BUDGET_DATA)
    assert not storage.exists(StorageKey.SAVINGS_GOALS)
    assert storage.exists(StorageKey.FLASHCARDS)


def test_clear_unknown_section(storage):
    assert storage.clear_section("gardening") is False


def test_get_storage_size(storage):
    storage.set(StorageKey.USER_TIER, "free")
    size = storage.get_storage_size()

    assert size["breakdown"] == {"USER_TIER": len('"free"')}
    assert size["total_bytes"] == 6
    assert size["limit_bytes"] is None


# ============================================================================
# Export / Import Tests
# ============================================================================

def test_export_all_shape(storage):
    storage.set(StorageKey.USER_TIER, "premium")
    storage.set(StorageKey.FLASHCARDS, [{"q": "2+2", "a": "4"}])

    exported = storage.export_all()

    assert exported["USER_TIER"] == "premium"
    assert exported["FLASHCARDS"] == [{"q": "2+2", "a": "4"}]
    metadata = exported[METADATA_KEY]
    assert metadata["schema_version"] == "2.0"
    assert set(metadata["data_keys"]) == {"USER_TIER", "FLASHCARDS"}
    datetime.fromisoformat(metadata["export_timestamp"])


def test_export_import_restores_values(storage):
    storage.set(StorageKey.USER_PROFILE, {"name": "Ana"})
    storage.set(StorageKey.SHOPPING_LIST, ["milk"])
    backup = storage.export_json()

    other = StorageAdapter(MemoryBackend())
    assert other.import_all(backup) is True

    assert other.get(StorageKey.USER_PROFILE) == {"name": "Ana"}
    assert other.get(StorageKey.SHOPPING_LIST) == ["milk"]


def test_import_skips_metadata_and_unknown(storage, memory_backend):
    payload = {
        "USER_TIER": "premium",
        "NOT_A_KEY": 1,
        METADATA_KEY: {"schema_version": "2.0"},
    }

    assert storage.import_all(payload) is True
    assert storage.get(StorageKey.USER_TIER) == "premium"
    assert set(memory_backend.keys()) == {StorageKey.USER_TIER.value}


def test_import_overwrites_but_keeps_other_keys(storage):
    storage.set(StorageKey.USER_TIER, "free")
    storage.set(StorageKey.FLASHCARDS, [1])

    storage.import_all({"USER_TIER": "premium"})

    assert storage.get(StorageKey.USER_TIER) == "premium"
    assert storage.get(StorageKey.FLASHCARDS) == [1]


@pytest.mark.parametrize("payload", ["{broken", "[1, 2]", json.dumps("text")])
def test_import_rejects_malformed_payload(storage, payload):
    assert storage.import_all(payload) is False


def test_key_for_name():
    assert key_for_name("USER_PROFILE") is StorageKey.USER_PROFILE
    assert key_for_name("slh_user_profile") is None


# ============================================================================
# Defaults & Activity Timestamp Tests
# ============================================================================

def test_initialize_defaults_fresh(storage):
    assert storage.initialize_defaults() is True

    assert storage.get(StorageKey.USER_PROFILE)["name"] == "Student"
    assert storage.get(StorageKey.PROGRESSION)["level"] == 1
    assert "achievements" not in storage.get(StorageKey.PROGRESSION)
    assert storage.get(StorageKey.ACHIEVEMENTS) == []
    assert storage.get(StorageKey.USER_TIER) == "free"


def test_initialize_defaults_never_overwrites(storage):
    storage.set(StorageKey.USER_TIER, "premium")
    storage.initialize_defaults()
    assert storage.get(StorageKey.USER_TIER) == "premium"

    assert storage.initialize_defaults() is False


def test_was_active_today(storage):
    today = date(2026, 3, 10)

    assert storage.was_active_today(today) is False
    storage.update_last_active(datetime(2026, 3, 10, 8, 30))
    assert storage.was_active_today(today) is True
    assert storage.was_active_today(today + timedelta(days=1)) is False


def test_was_active_today_unreadable(storage):
    storage.set(StorageKey.LAST_ACTIVE, "yesterday-ish")
    assert storage.was_active_today() is False


# ============================================================================
# Backend Tests
# ============================================================================

def test_memory_backend_quota_counts_replacement():
    backend = MemoryBackend(quota_bytes=10)
    backend.set_item("a", "12345")
    backend.set_item("a", "1234567890")

    with pytest.raises(StorageQuotaExceededError):
        backend.set_item("b", "1")


def test_file_backend_persists_across_instances(tmp_path):
    FileBackend(tmp_path, namespace="alice").set_item("k", '"v"')

    reopened = FileBackend(tmp_path, namespace="alice")
    assert reopened.get_item("k") == '"v"'
    assert FileBackend(tmp_path, namespace="bob").get_item("k") is None


def test_file_backend_remove(tmp_path):
    backend = FileBackend(tmp_path)
    backend.set_item("k", "1")
    backend.remove_item("k")
    backend.remove_item("missing")

    assert FileBackend(tmp_path).get_item("k") is None
    assert not (tmp_path / "default.json.tmp").exists()


def test_file_backend_quota(tmp_path):
    backend = FileBackend(tmp_path, quota_bytes=4)

    with pytest.raises(StorageQuotaExceededError):
        backend.set_item("k", "too long")
    assert not backend.path.exists()


def test_file_backend_corrupt_file(tmp_path):
    (tmp_path / "default.json").write_text("{oops", encoding="utf-8")
    backend = FileBackend(tmp_path)

    with pytest.raises(StorageUnavailableError):
        backend.get_item("k")

    assert StorageAdapter(FileBackend(tmp_path)).get("k", "default") == "default"


def test_adapter_over_file_backend(tmp_path):
    storage = StorageAdapter(FileBackend(tmp_path / "nested"))
    storage.set(StorageKey.USER_TIER, "premium")

    assert StorageAdapter(FileBackend(tmp_path / "nested")).get(StorageKey.USER_TIER) == "premium"
