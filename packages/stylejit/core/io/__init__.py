"""Filesystem abstraction layer for stylejit.

Provides safe, testable, async-first filesystem operations with sync convenience wrappers.

Example (async):
    >>> from stylejit.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "stylejit", "theme.css")
    >>> await fs.write_text(path, "body{color:red}")
    >>> mtime = await fs.mtime_ns(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem, RealFileSystemSync
from .models import AbsolutePath, WriteResult, absolute_path
from .protocols import FileSystem, FileSystemSync

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "absolute_path",
    # Result types
    "WriteResult",
    # Protocols
    "FileSystem",
    "FileSystemSync",
    # Async implementations
    "RealFileSystem",
    "FakeFileSystem",
    # Sync wrappers
    "RealFileSystemSync",
]
