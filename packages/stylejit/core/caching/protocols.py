"""Protocols for cache metadata stores.

Defines async-first MetadataStore protocol and sync convenience wrapper protocol.
"""

from typing import Protocol

from .models import CacheRecord


class MetadataStore(Protocol):
    """
    Protocol for metadata store backends (async-first).

    Generic get/set with last-write-wins semantics; no transactions.
    Corrupt entries read as absent (the cache fails open to recompilation).
    Storage failures on read or write raise.
    """

    async def get(self, key: str) -> CacheRecord | None:
        """
        Fetch the record stored under key.

        Returns:
            CacheRecord, or None when absent or corrupt

        Raises:
            CacheStorageError: If the backing storage cannot be read
        """
        ...

    async def set(self, key: str, record: CacheRecord) -> None:
        """
        Store a record under key, replacing any previous one.

        Raises:
            CacheStorageError: On write failure
        """
        ...


class MetadataStoreSync(Protocol):
    """Synchronous convenience wrapper protocol."""

    def get(self, key: str) -> CacheRecord | None:
        """Fetch record (blocking)."""
        ...

    def set(self, key: str, record: CacheRecord) -> None:
        """Store record (blocking)."""
        ...
