"""Output addressing for compiled stylesheets.

Maps a handle to a deterministic output file and its public URL. The
location depends on the handle only, never on content, so a recompile
overwrites the previous output in place.

Handles that sanitize to the same token share one output file; callers
must keep handles distinct.
"""

from __future__ import annotations

import logging
import posixpath

from stylejit.core.addressing.handles import digest_key, sanitize_key
from stylejit.core.addressing.urls import set_url_scheme
from stylejit.core.errors import CacheStorageError
from stylejit.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".css"


class OutputAddressing:
    """
    Output path and URL derivation for handles.

    Args:
        fs: Async filesystem implementation
        cache_dir: Directory compiled files are written to
        cache_url: Public URL of cache_dir
        dir_mode: Permission bits used when creating cache_dir
    """

    def __init__(
        self,
        fs: FileSystem,
        cache_dir: AbsolutePath,
        cache_url: str,
        dir_mode: int = 0o700,
    ) -> None:
        self.fs = fs
        self.cache_dir = cache_dir
        self.cache_url = cache_url
        self._dir_mode = dir_mode

    def filename(self, handle: str) -> str:
        """Output file name for a handle (sync, no I/O)."""
        token = sanitize_key(posixpath.basename(handle))
        if not token:
            # Nothing usable survived sanitizing
            token = digest_key(handle)
        return f"{token}{OUTPUT_SUFFIX}"

    async def ensure_cache_dir(self) -> None:
        """
        Create the cache directory with dir_mode if absent.

        Checked on every call, so a directory removed while running comes
        back with the configured mode rather than the default one.

        Raises:
            CacheStorageError: If the directory cannot be created
        """
        try:
            await self.fs.mkdirs(self.cache_dir, exist_ok=True, mode=self._dir_mode)
        except OSError as e:
            raise CacheStorageError(
                operation="mkdir", path=str(self.cache_dir), reason=str(e)
            ) from e

    async def output_location(self, handle: str) -> AbsolutePath:
        """
        Output file path for a handle, creating the cache directory if needed.

        Args:
            handle: Handle (sanitized here)

        Returns:
            Absolute output path
        """
        await self.ensure_cache_dir()
        return self.fs.join(self.cache_dir, self.filename(handle))

    def external_reference(self, handle: str, scheme: str | None = None) -> str:
        """
        Public URL of a handle's output file.

        Args:
            handle: Handle (sanitized here)
            scheme: Scheme of the original request; None keeps cache_url's own

        Returns:
            URL without query string
        """
        url = f"{self.cache_url.rstrip('/')}/{self.filename(handle)}"
        if scheme is not None:
            url = set_url_scheme(url, scheme)
        return url
