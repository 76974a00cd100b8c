"""Filesystem seam for the compile cache.

The cache needs only a handful of operations: stat modification times,
read sources, atomically replace outputs and records, create the cache
directory. Everything is async; ``FileSystemSync`` mirrors it for blocking
callers.
"""

from typing import Protocol

from .models import AbsolutePath, WriteResult


class FileSystem(Protocol):
    """
    Async filesystem used by the oracle, the stores and the orchestrator.

    ``write_text`` must be atomic: a concurrent reader sees the old file or
    the whole new one, never a prefix. Missing files raise
    FileNotFoundError from ``mtime_ns``, ``read_text`` and ``remove``.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join path segments onto base (no I/O)."""
        ...

    async def exists(self, path: AbsolutePath) -> bool:
        """File or directory present."""
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """Regular file present."""
        ...

    async def is_dir(self, path: AbsolutePath) -> bool:
        """Directory present."""
        ...

    async def mtime_ns(self, path: AbsolutePath) -> int:
        """
        Modification timestamp in integer nanoseconds.

        This is the only change signal the cache uses, so implementations
        must return the full-resolution value, not a rounded float.
        """
        ...

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Whole file as text."""
        ...

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """
        Replace path with content (full overwrite, atomic).

        Parent directories are created as needed.

        Raises:
            OSError: If the file cannot be written; path is left untouched
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True, mode: int = 0o777) -> None:
        """
        Create path and missing parents.

        Args:
            path: Directory to create
            exist_ok: Don't raise if it already exists
            mode: Permission bits of the leaf directory
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """Delete a file."""
        ...


class FileSystemSync(Protocol):
    """Blocking mirror of FileSystem."""

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath: ...

    def exists(self, path: AbsolutePath) -> bool: ...

    def is_file(self, path: AbsolutePath) -> bool: ...

    def is_dir(self, path: AbsolutePath) -> bool: ...

    def mtime_ns(self, path: AbsolutePath) -> int: ...

    def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str: ...

    def write_text(
        self, path: AbsolutePath, content: str, encoding: str = "utf-8"
    ) -> WriteResult: ...

    def mkdirs(self, path: AbsolutePath, exist_ok: bool = True, mode: int = 0o777) -> None: ...

    def remove(self, path: AbsolutePath) -> None: ...
