"""In-memory filesystem for tests.

Modification timestamps come from a logical clock that moves forward one
second on every write or ``touch``, so "edited after compile" is always
observable without sleeping.
"""

from pathlib import Path

from .models import AbsolutePath, WriteResult

_SECOND_NS = 1_000_000_000


class FakeFileSystem:
    """
    Dict-backed async filesystem.

    Test hooks:
        writes: Every path written, in order
        fail_writes: When True, write_text raises PermissionError
        touch(), dir_mode(): Adjust mtimes, inspect directory modes
        remove_tree(): Drop a directory and everything below it

    Args:
        start_ns: Initial value of the logical mtime clock
    """

    def __init__(self, start_ns: int = 1_700_000_000 * _SECOND_NS) -> None:
        self._files: dict[str, str] = {}
        self._mtimes: dict[str, int] = {}
        self._dirs: dict[str, int] = {"/": 0o755}  # path -> mode
        self._clock_ns = start_ns
        self.writes: list[str] = []
        self.fail_writes = False

    @staticmethod
    def _key(path: AbsolutePath | str) -> str:
        return str(Path(path))

    def _tick(self) -> int:
        self._clock_ns += _SECOND_NS
        return self._clock_ns

    def _require_file(self, path: AbsolutePath | str) -> str:
        key = self._key(path)
        if key not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return key

    def _add_dirs(self, path: Path, mode: int) -> None:
        for parent in (*reversed(path.parents), path):
            self._dirs.setdefault(str(parent), mode)

    def touch(self, path: AbsolutePath | str, mtime_ns: int | None = None) -> int:
        """Set a file's mtime (next tick by default) and return it."""
        key = self._require_file(path)
        self._mtimes[key] = self._tick() if mtime_ns is None else mtime_ns
        return self._mtimes[key]

    def dir_mode(self, path: AbsolutePath | str) -> int:
        """Mode a directory was created with."""
        return self._dirs[self._key(path)]

    def remove_tree(self, path: AbsolutePath | str) -> None:
        """Delete a directory with its files and subdirectories."""
        root = self._key(path)
        prefix = root.rstrip("/") + "/"
        for table in (self._files, self._mtimes, self._dirs):
            for key in [k for k in table if k == root or k.startswith(prefix)]:
                del table[key]

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        return AbsolutePath(Path("/") / Path(base).joinpath(*parts))

    async def exists(self, path: AbsolutePath) -> bool:
        key = self._key(path)
        return key in self._files or key in self._dirs

    async def is_file(self, path: AbsolutePath) -> bool:
        return self._key(path) in self._files

    async def is_dir(self, path: AbsolutePath) -> bool:
        return self._key(path) in self._dirs

    async def mtime_ns(self, path: AbsolutePath) -> int:
        return self._mtimes[self._require_file(path)]

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        return self._files[self._require_file(path)]

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        if self.fail_writes:
            raise PermissionError(f"Permission denied: {path}")

        key = self._key(path)
        self._add_dirs(Path(key).parent, 0o755)
        self._files[key] = content
        self._mtimes[key] = self._tick()
        self.writes.append(key)

        return WriteResult(
            path=key, bytes_written=len(content.encode(encoding)), duration_ms=0.0
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True, mode: int = 0o777) -> None:
        key = self._key(path)
        if key in self._dirs and not exist_ok:
            raise FileExistsError(f"Directory exists: {path}")
        self._add_dirs(Path(key), mode)

    async def remove(self, path: AbsolutePath) -> None:
        key = self._require_file(path)
        del self._files[key]
        del self._mtimes[key]
