"""
Persistence-specific errors.
"""


class PersistenceError(Exception):
    """Base exception for persistence operations."""

    pass


class StorageReadError(PersistenceError):
    """Failed to read a value from the key-value store."""

    pass


class StorageWriteError(PersistenceError):
    """Failed to write a value to the key-value store."""

    pass


class RecoverableStorageError(PersistenceError):
    """
    A stored value could not be read or parsed.

    Never raised by PresetStore reads: the store falls back to the empty
    default for the key and records this error in storage_warnings.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not load '{key}': {reason}")
