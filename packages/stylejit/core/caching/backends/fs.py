"""Filesystem-backed metadata store using core.io for all operations.

One JSON document per key, written atomically.
"""

import asyncio
import logging

from pydantic import ValidationError

from stylejit.core.caching.models import CacheRecord
from stylejit.core.errors import CacheStorageError
from stylejit.core.io import AbsolutePath, FileSystem
from stylejit.core.io.models import absolute_path

logger = logging.getLogger(__name__)


class FSMetadataStore:
    """
    Async filesystem-backed metadata store.

    The metadata directory is created on demand before each write.

    Args:
        fs: Async filesystem implementation
        root: Absolute path to the metadata directory
        dir_mode: Permission bits for the metadata directory
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath, dir_mode: int = 0o700) -> None:
        self.fs = fs
        self.root = root
        self._dir_mode = dir_mode

    async def initialize(self) -> None:
        """
        Ensure root exists with dir_mode.

        Called before every write, so a removed directory is recreated with
        the configured mode; safe to call multiple times.

        Raises:
            CacheStorageError: If the directory cannot be created
        """
        try:
            await self.fs.mkdirs(self.root, exist_ok=True, mode=self._dir_mode)
        except OSError as e:
            raise CacheStorageError(operation="mkdir", path=str(self.root), reason=str(e)) from e

    def _record_path(self, key: str) -> AbsolutePath:
        """Compute record document path (sync)."""
        return self.fs.join(self.root, f"{key}.json")

    async def get(self, key: str) -> CacheRecord | None:
        """Load record, None on miss or corruption (async)."""
        path = self._record_path(key)
        try:
            raw = await self.fs.read_text(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheStorageError(operation="read_record", path=str(path), reason=str(e)) from e

        try:
            return CacheRecord.model_validate_json(raw)
        except (ValidationError, ValueError):
            logger.warning("Ignoring corrupt cache record %s", path)
            return None

    async def set(self, key: str, record: CacheRecord) -> None:
        """Write record atomically (async)."""
        await self.initialize()
        path = self._record_path(key)
        try:
            await self.fs.write_text(path, record.model_dump_json(indent=2))
        except OSError as e:
            raise CacheStorageError(
                operation="persist_record", path=str(path), reason=str(e)
            ) from e


class FSMetadataStoreSync:
    """
    Synchronous wrapper around FSMetadataStore.

    Uses asyncio.run() to execute async operations in blocking mode.
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath | str, dir_mode: int = 0o700) -> None:
        self._async_store = FSMetadataStore(fs, absolute_path(root), dir_mode=dir_mode)

    def get(self, key: str) -> CacheRecord | None:
        """Load record (blocking)."""
        return asyncio.run(self._async_store.get(key))

    def set(self, key: str, record: CacheRecord) -> None:
        """Store record (blocking)."""
        asyncio.run(self._async_store.set(key, record))
