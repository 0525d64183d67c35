"""
Persistence layer for presets, collections, themes and preferences.

PresetStore keeps user data as JSON under namespaced keys of a minimal
KeyValueStore. SQLite backs production; an in-memory store backs tests.
"""

from .errors import (
    PersistenceError,
    StorageReadError,
    StorageWriteError,
    RecoverableStorageError,
)
from .kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from .store import PresetStore, StorageStats, STORAGE_KEYS

__all__ = [
    "PersistenceError",
    "StorageReadError",
    "StorageWriteError",
    "RecoverableStorageError",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "PresetStore",
    "StorageStats",
    "STORAGE_KEYS",
]
