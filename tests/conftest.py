"""Global test fixtures and utilities for student_hub tests"""
import pytest
from datetime import date, timedelta
from unittest.mock import Mock

from student_hub.events.bus import EventBus, Topic
from student_hub.gamification.activity_log import ActivityLog
from student_hub.gamification.engine import ProgressionEngine
from student_hub.models.progression import ProgressionState
from student_hub.services.gamification_service import GamificationService
from student_hub.services.session_service import SessionManager
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.backends.memory import MemoryBackend
from student_hub.storage.keys import StorageKey


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def memory_backend():
    """Empty in-memory backend without quota"""
    return MemoryBackend()


@pytest.fixture
def storage(memory_backend):
    """Storage adapter over the in-memory backend"""
    return StorageAdapter(memory_backend, app_version="2.0")


# ============================================================================
# Event Bus Fixtures
# ============================================================================

@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorded_events(bus):
    """List of (topic, payload) for every core topic, in publish order"""
    events = []
    for topic in Topic:
        bus.subscribe(topic, lambda payload, topic=topic: events.append((topic, payload)))
    return events


@pytest.fixture
def subscriber():
    """Mock subscriber callback"""
    return Mock(name="subscriber")


# ============================================================================
# Gamification Fixtures
# ============================================================================

@pytest.fixture
def activity_log(storage):
    return ActivityLog(storage, limit=100)


@pytest.fixture
def engine(storage, bus, activity_log):
    return ProgressionEngine(storage, bus, activity_log, points_per_level=100, achievement_bonus=50)


@pytest.fixture
def gamification_service(storage, engine):
    return GamificationService(storage, engine)


@pytest.fixture
def session_manager(storage, bus):
    return SessionManager(storage, bus)


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def seed_state(storage):
    """Write a progression state (and its achievements) straight to storage"""
    def _seed(**fields):
        state = ProgressionState(**fields)
        storage.set(StorageKey.PROGRESSION, state.model_dump(mode="json", exclude={"achievements"}))
        storage.set(StorageKey.ACHIEVEMENTS, state.achievements)
        return state
    return _seed


@pytest.fixture
def seed_counters(storage):
    """Write completion counters straight to storage"""
    def _seed(**counters):
        for name, value in counters.items():
            storage.set(StorageKey[name.upper()], value)
    return _seed
