"""
Persistence layer

StorageAdapter provides JSON get/set/remove, backup export/import and
section clearing over a raw KeyValueBackend (memory or file).
"""

from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.backends import FileBackend, KeyValueBackend, MemoryBackend
from student_hub.storage.keys import CATEGORY_COUNTER_KEYS, SECTION_KEYS, StorageKey

__all__ = [
    "StorageAdapter",
    "FileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "CATEGORY_COUNTER_KEYS",
    "SECTION_KEYS",
    "StorageKey",
]
