"""Raw key-value backends"""
from student_hub.storage.backends.base import KeyValueBackend
from student_hub.storage.backends.file import FileBackend
from student_hub.storage.backends.memory import MemoryBackend

__all__ = ["KeyValueBackend", "FileBackend", "MemoryBackend"]
