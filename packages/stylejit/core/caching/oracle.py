"""Staleness oracle for compiled stylesheets.

Decides whether the output at a location is still valid for a requested
configuration, and records the evidence after a compile.

A cached output is valid if and only if:
- the output file and its record both exist
- every recorded import still exists with exactly the recorded mtime
- no import is newer than the output file (guards against clock skew)
- the configuration fingerprint matches the one recorded

Modification timestamps are the only file change signal, which assumes a
single host with a local filesystem.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import logging
import time

from stylejit.core.caching.fingerprint import compute_fingerprint, record_key
from stylejit.core.caching.models import CacheRecord, StalenessResult, StaleReason
from stylejit.core.caching.protocols import MetadataStore
from stylejit.core.compiler.models import CompilerConfiguration
from stylejit.core.io import AbsolutePath, FileSystem, absolute_path

logger = logging.getLogger(__name__)

# Recorded for an import that vanished before it could be stat'ed
MISSING_MTIME = -1


class StalenessOracle:
    """
    Staleness checks and cache record bookkeeping.

    Args:
        fs: Async filesystem implementation
        store: Metadata store holding one record per output location
        clock: Returns the current Unix time in seconds
    """

    def __init__(
        self,
        fs: FileSystem,
        store: MetadataStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.fs = fs
        self.store = store
        self._clock = clock

    async def is_stale(
        self, location: AbsolutePath, config: CompilerConfiguration
    ) -> StalenessResult:
        """
        Check whether the output at location must be recompiled.

        Args:
            location: Output file path
            config: Configuration requested now

        Returns:
            StalenessResult; when fresh, ``known_good_timestamp`` is the
            record's creation time
        """
        if not await self.fs.is_file(location):
            return StalenessResult(stale=True, reason=StaleReason.NO_OUTPUT)

        record = await self.store.get(record_key(str(location)))
        if record is None:
            return StalenessResult(stale=True, reason=StaleReason.NO_RECORD)

        try:
            output_mtime = await self.fs.mtime_ns(location)
        except FileNotFoundError:
            # Removed between the existence check and now
            return StalenessResult(stale=True, reason=StaleReason.NO_OUTPUT)

        for path, recorded_mtime in record.imports.items():
            try:
                current_mtime = await self.fs.mtime_ns(absolute_path(path))
            except FileNotFoundError:
                return StalenessResult(stale=True, reason=StaleReason.IMPORT_MISSING, detail=path)

            if current_mtime != recorded_mtime:
                return StalenessResult(stale=True, reason=StaleReason.IMPORT_CHANGED, detail=path)
            if current_mtime > output_mtime:
                return StalenessResult(
                    stale=True, reason=StaleReason.IMPORT_NEWER_THAN_OUTPUT, detail=path
                )

        if compute_fingerprint(config) != record.configuration_fingerprint:
            return StalenessResult(stale=True, reason=StaleReason.CONFIGURATION_CHANGED)

        return StalenessResult(
            stale=False,
            reason=StaleReason.FRESH,
            known_good_timestamp=record.creation_time,
        )

    async def record_compile(
        self,
        location: AbsolutePath,
        config: CompilerConfiguration,
        imports: Iterable[str],
        compile_ms: float | None = None,
    ) -> CacheRecord:
        """
        Build and persist the record for a freshly written output.

        Must be called after the output file is in place.

        Args:
            location: Output file path
            config: Configuration the output was compiled with
            imports: Every file the compiler read, source included
            compile_ms: Optional compile duration

        Returns:
            The persisted CacheRecord

        Raises:
            CacheStorageError: If the store cannot persist the record
        """
        import_mtimes: dict[str, int] = {}
        for path in imports:
            try:
                import_mtimes[path] = await self.fs.mtime_ns(absolute_path(path))
            except FileNotFoundError:
                logger.warning("Import %s vanished after compile; next check will be stale", path)
                import_mtimes[path] = MISSING_MTIME

        record = CacheRecord(
            creation_time=int(self._clock()),
            imports=import_mtimes,
            configuration_fingerprint=compute_fingerprint(config),
            output_location=str(location),
            compile_ms=compile_ms,
        )
        await self.store.set(record_key(str(location)), record)
        return record
