"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.

There is no module-level instance: the entry point builds one container per
process and passes it (or its services) to whatever needs them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from student_hub import config
from student_hub.events.bus import EventBus
from student_hub.exceptions import ConfigurationError
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.backends import FileBackend, KeyValueBackend, MemoryBackend

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (storage, bus) are injected.
    """

    # Infrastructure dependencies (injected)
    storage: StorageAdapter
    bus: EventBus = field(default_factory=EventBus)

    # Services (lazy-loaded via properties)
    _engine: Optional[object] = field(default=None, init=False, repr=False)
    _session_manager: Optional[object] = field(default=None, init=False, repr=False)
    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def engine(self):
        """Get ProgressionEngine instance (lazy-loaded)"""
        if self._engine is None:
            from student_hub.gamification.engine import ProgressionEngine
            self._engine = ProgressionEngine(self.storage, self.bus)
            logger.debug("ProgressionEngine instantiated")
        return self._engine

    @property
    def session_manager(self):
        """Get SessionManager instance (lazy-loaded)"""
        if self._session_manager is None:
            from student_hub.services.session_service import SessionManager
            self._session_manager = SessionManager(self.storage, self.bus)
            logger.debug("SessionManager instantiated")
        return self._session_manager

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from student_hub.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(self.storage, self.engine)
            logger.debug("GamificationService instantiated")
        return self._gamification_service


def create_backend(
    backend: Optional[str] = None,
    data_path: Optional[Path] = None,
    namespace: Optional[str] = None,
    quota_bytes: Optional[int] = None
) -> KeyValueBackend:
    """
    Build the raw backend named by STORAGE_BACKEND (or the argument).

    Raises:
        ConfigurationError: Unknown backend name
    """
    backend = backend or config.STORAGE_BACKEND
    quota_bytes = quota_bytes if quota_bytes is not None else config.STORAGE_QUOTA_BYTES

    if backend == "memory":
        return MemoryBackend(quota_bytes=quota_bytes)
    if backend == "file":
        return FileBackend(
            data_path=data_path or config.DATA_PATH,
            namespace=namespace or config.STORAGE_NAMESPACE,
            quota_bytes=quota_bytes,
        )

    raise ConfigurationError(f"Unknown storage backend '{backend}'", config_key="STORAGE_BACKEND")


def build_container(backend: Optional[KeyValueBackend] = None) -> ServiceContainer:
    """
    Create a container over the given backend (default: from configuration).

    Args:
        backend: Raw backend to use instead of the configured one

    Returns:
        ServiceContainer: A new container
    """
    storage = StorageAdapter(backend or create_backend())
    container = ServiceContainer(storage=storage)
    logger.info(f"Service container initialized ({type(storage.backend).__name__})")
    return container
