"""In-memory metadata store for tests and embedding.

Records live for the lifetime of the instance only.
"""

from stylejit.core.caching.models import CacheRecord


class MemoryMetadataStore:
    """Dict-backed async metadata store."""

    def __init__(self) -> None:
        self.records: dict[str, CacheRecord] = {}

    async def get(self, key: str) -> CacheRecord | None:
        """Return stored record or None (async, immediate)."""
        return self.records.get(key)

    async def set(self, key: str, record: CacheRecord) -> None:
        """Store record (async, immediate)."""
        self.records[key] = record
