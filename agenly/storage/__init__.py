"""Storage layer - Firestore and in-memory implementations."""

from agenly.storage.base import StorageBackend
from agenly.storage.firestore import FirestoreStorage
from agenly.storage.memory import InMemoryStorage

__all__ = ["StorageBackend", "FirestoreStorage", "InMemoryStorage"]
