"""Raw key-value backend interface"""
from abc import ABC, abstractmethod
from typing import Iterator, Optional


class KeyValueBackend(ABC):
    """
    String-to-string store, the equivalent of browser localStorage.

    Values are already JSON-encoded by the adapter. Implementations raise
    StorageError subclasses on failure.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the raw value, or None if the key is absent"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store the raw value, replacing any existing one"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete the key; absent keys are ignored"""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys"""

    def size_of(self, key: str) -> int:
        """Size in bytes of the stored value (0 if absent)"""
        value = self.get_item(key)
        return len(value.encode("utf-8")) if value is not None else 0

    def total_size(self) -> int:
        return sum(self.size_of(key) for key in list(self.keys()))
