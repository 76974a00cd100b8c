"""Disk-backed filesystem on aiofiles.

Compiled stylesheets and cache records are served to other processes (the
web server, concurrent requests) while they are being replaced, so every
write goes to a sibling temp file that is renamed over the target.
"""

import asyncio
from collections.abc import Callable
import contextlib
import os
from pathlib import Path
import tempfile
import time
from typing import Any, TypeVar

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, WriteResult

T = TypeVar("T")


async def _blocking(func: Callable[..., T], *args: Any) -> T:
    """Run a blocking os call in the default executor."""
    return await asyncio.get_running_loop().run_in_executor(None, func, *args)


class RealFileSystem:
    """
    Async filesystem on the local disk.

    Args:
        file_mode: Permission bits given to every written file. Temp files
            start out 0600, so without this outputs would be unreadable to
            a web server running as another user.
    """

    def __init__(self, file_mode: int = 0o644) -> None:
        self._file_mode = file_mode

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join under base; raises ValueError if the result leaves base."""
        root = Path(base).resolve()
        joined = root.joinpath(*parts).resolve()
        if not joined.is_relative_to(root):
            raise ValueError(f"{joined} is outside {root}")
        return AbsolutePath(joined)

    async def exists(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.exists(path))

    async def is_file(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isfile(path))

    async def is_dir(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isdir(path))

    async def mtime_ns(self, path: AbsolutePath) -> int:
        """Nanosecond modification timestamp; FileNotFoundError if missing."""
        return int((await aiofiles.os.stat(path)).st_mtime_ns)

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        async with aiofiles.open(path, encoding=encoding) as f:
            content: str = await f.read()
        return content

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """
        Replace path with content atomically.

        Readers see either the previous file or the complete new one. The
        temp file is removed if anything fails before the rename.
        """
        start = time.perf_counter()
        target = Path(path)
        await aiofiles.os.makedirs(target.parent, exist_ok=True)

        fd, tmp_name = await _blocking(
            tempfile.mkstemp, ".tmp", f".{target.name}.", str(target.parent)
        )
        os.close(fd)
        try:
            async with aiofiles.open(tmp_name, mode="w", encoding=encoding) as f:
                await f.write(content)
            await _blocking(os.chmod, tmp_name, self._file_mode)
            await aiofiles.os.replace(tmp_name, target)
        except BaseException:
            with contextlib.suppress(OSError):
                await aiofiles.os.unlink(tmp_name)
            raise

        return WriteResult(
            path=str(target),
            bytes_written=len(content.encode(encoding)),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True, mode: int = 0o777) -> None:
        """Create path and its parents; mode applies to the leaf only (umask applies)."""
        await aiofiles.os.makedirs(path, mode=mode, exist_ok=exist_ok)

    async def remove(self, path: AbsolutePath) -> None:
        await aiofiles.os.unlink(path)


class RealFileSystemSync:
    """
    Blocking facade over RealFileSystem for synchronous hosts.

    Each call runs its own event loop via asyncio.run(), so it must not be
    used from inside a running loop.
    """

    def __init__(self, file_mode: int = 0o644) -> None:
        self._fs = RealFileSystem(file_mode=file_mode)

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        return self._fs.join(base, *parts)

    def exists(self, path: AbsolutePath) -> bool:
        return asyncio.run(self._fs.exists(path))

    def is_file(self, path: AbsolutePath) -> bool:
        return asyncio.run(self._fs.is_file(path))

    def is_dir(self, path: AbsolutePath) -> bool:
        return asyncio.run(self._fs.is_dir(path))

    def mtime_ns(self, path: AbsolutePath) -> int:
        return asyncio.run(self._fs.mtime_ns(path))

    def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        return asyncio.run(self._fs.read_text(path, encoding))

    def write_text(self, path: AbsolutePath, content: str, encoding: str = "utf-8") -> WriteResult:
        return asyncio.run(self._fs.write_text(path, content, encoding))

    def mkdirs(self, path: AbsolutePath, exist_ok: bool = True, mode: int = 0o777) -> None:
        asyncio.run(self._fs.mkdirs(path, exist_ok, mode))

    def remove(self, path: AbsolutePath) -> None:
        asyncio.run(self._fs.remove(path))
