"""Metadata store backend implementations.

Provides filesystem and in-memory backends.
"""

from .fs import FSMetadataStore, FSMetadataStoreSync
from .memory import MemoryMetadataStore

__all__ = [
    "FSMetadataStore",
    "FSMetadataStoreSync",
    "MemoryMetadataStore",
]
