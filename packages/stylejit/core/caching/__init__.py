"""Invalidation-aware compile cache for stylejit.

Key features:
- Value-only configuration fingerprints (sorted, canonical JSON, SHA256)
- Import-set modification timestamps as the change signal
- One metadata record per output location, keyed by CRC-32 of the location
- Records written only after the output file is atomically in place
- Fail open: missing or corrupt metadata means recompile
"""

from stylejit.core.caching.backends.fs import FSMetadataStore, FSMetadataStoreSync
from stylejit.core.caching.backends.memory import MemoryMetadataStore
from stylejit.core.caching.fingerprint import compute_fingerprint, record_key
from stylejit.core.caching.models import CacheRecord, StalenessResult, StaleReason
from stylejit.core.caching.oracle import StalenessOracle
from stylejit.core.caching.protocols import MetadataStore, MetadataStoreSync

__all__ = [
    # Core
    "CacheRecord",
    "MetadataStore",
    "MetadataStoreSync",
    "StalenessOracle",
    "StalenessResult",
    "StaleReason",
    # Backends
    "FSMetadataStore",
    "FSMetadataStoreSync",
    "MemoryMetadataStore",
    # Utils
    "compute_fingerprint",
    "record_key",
]
