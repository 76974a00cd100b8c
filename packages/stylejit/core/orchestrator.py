"""Compile orchestration for stylesheet references.

Drives one request: decide staleness, compile if needed, write the output,
persist the cache record and build the public reference.

Example:
    >>> service = build_stylesheet_compiler(load_app_config(), compiler=MyScssCompiler())
    >>> await service.resolve("https://example.com/content/themes/site/main.scss", "main")
    'https://example.com/uploads/stylejit-cache/main.css?ver=1760832000'

No locking is done around check-compile-write-record. Concurrent requests
for the same stale handle each compile and write identical output; the
atomic rename keeps readers from ever seeing a truncated file.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import os
from pathlib import Path
import re
import time
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stylejit.core.addressing import (
    OutputAddressing,
    add_query_arg,
    derive_handle,
    set_url_scheme,
    split_query,
    strip_query,
    url_scheme,
)
from stylejit.core.caching import (
    FSMetadataStore,
    MetadataStore,
    StalenessOracle,
    StalenessResult,
    StaleReason,
)
from stylejit.core.compiler import (
    Compiler,
    CompilerConfiguration,
    ConfigFactory,
    ConfigurationHooks,
    run_compiler,
)
from stylejit.core.config.models import AppConfig, SourceConfig
from stylejit.core.errors import CacheStorageError, SourceResolutionError, StylesheetCompileError
from stylejit.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path
from stylejit.core.utils.logging import get_logger

logger = logging.getLogger(__name__)

VERSION_ARG = "ver"


class ResolveOptions(BaseModel):
    """
    Per-call resolve behavior.
    """

    model_config = ConfigDict(frozen=True)

    force: bool = Field(default=False, description="Recompile even if the cache is fresh")
    skip_compilation: bool = Field(
        default=False,
        description="Return compilable references untouched (development switch)",
    )


class StylesheetCompiler:
    """
    Resolves stylesheet references to compiled, cached outputs.

    Construct once at process start and share; the instance holds no
    per-request state.

    Args:
        fs: Async filesystem implementation
        compiler: Stylesheet compiler
        store: Metadata store for cache records
        addressing: Output path/URL derivation
        source: Content root and compilable pattern
        config_factory: Builds the compiler configuration per handle
            (defaults to ConfigurationHooks())
        banner: Prepend the "compiled by" comment to outputs
        clock: Returns the current Unix time in seconds
    """

    def __init__(
        self,
        fs: FileSystem,
        compiler: Compiler,
        store: MetadataStore,
        addressing: OutputAddressing,
        source: SourceConfig,
        config_factory: ConfigFactory | None = None,
        banner: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.fs = fs
        self.compiler = compiler
        self.addressing = addressing
        self.source = source
        self.oracle = StalenessOracle(fs, store, clock=clock)
        self._config_factory: ConfigFactory = config_factory or ConfigurationHooks()
        self._banner = banner
        self._pattern = re.compile(source.pattern)
        self._content_dir = AbsolutePath(Path(os.path.abspath(source.content_dir)))

    def is_compilable(self, reference: str) -> bool:
        """Whether a reference names a compilable source (query string ignored)."""
        return self._pattern.search(strip_query(reference.strip())) is not None

    async def resolve(
        self, reference: str, handle: str, options: ResolveOptions | None = None
    ) -> str:
        """
        Resolve one stylesheet reference.

        Non-compilable references are returned unchanged without touching the
        filesystem or the metadata store.

        Args:
            reference: Source stylesheet URL (query string preserved)
            handle: Logical name used for the output file
            options: Optional behavior overrides

        Returns:
            Public URL of the compiled output with a ``ver`` freshness token

        Raises:
            SourceResolutionError: Reference is outside the content root or unreadable
            StylesheetCompileError: Compiler reported an error (diagnostic verbatim)
            CacheStorageError: Output or metadata could not be written
        """
        opts = options or ResolveOptions()

        if not self.is_compilable(reference):
            return reference

        if opts.skip_compilation:
            logger.debug("Compilation skipped for %s", reference)
            return reference

        reference = reference.strip()
        source_scheme = url_scheme(reference)
        source_path, query = self._source_path(reference)

        location = await self.addressing.output_location(handle)
        try:
            config = self._config_factory(handle, source_path)
        except ValidationError as e:
            raise StylesheetCompileError(
                handle=handle, source_path=str(source_path), diagnostic=str(e)
            ) from e

        if opts.force:
            staleness = StalenessResult(stale=True, reason=StaleReason.FORCED)
        else:
            staleness = await self.oracle.is_stale(location, config)

        log = get_logger(__name__, handle=handle)
        if staleness.stale or staleness.known_good_timestamp is None:
            log.info(
                "Recompiling %s (%s%s)",
                handle,
                staleness.reason.value,
                f": {staleness.detail}" if staleness.detail else "",
            )
            token = await self._compile(handle, source_path, location, config)
        else:
            log.debug("Cache hit for %s (ver=%s)", handle, staleness.known_good_timestamp)
            token = staleness.known_good_timestamp

        scheme = source_scheme if source_scheme or reference.startswith("//") else None
        output_url = self.addressing.external_reference(handle, scheme) + query
        return add_query_arg(output_url, VERSION_ARG, token)

    async def resolve_many(self, references: str, options: ResolveOptions | None = None) -> str:
        """
        Resolve a comma-delimited list of references.

        Each compilable entry is resolved with a handle derived from its file
        name; other entries are kept verbatim. Order is preserved and the
        first failure aborts the whole batch.

        Args:
            references: Comma-delimited stylesheet URLs
            options: Optional behavior overrides

        Returns:
            Comma-delimited resolved URLs
        """
        resolved: list[str] = []
        for reference in references.split(","):
            if not self.is_compilable(reference):
                resolved.append(reference)
                continue
            handle = derive_handle(reference, self.source.pattern)
            resolved.append(await self.resolve(reference, handle, options))
        return ",".join(resolved)

    def _source_path(self, reference: str) -> tuple[AbsolutePath, str]:
        """Map a reference to its source file and preserved query suffix."""
        content_url = self.source.content_url.rstrip("/")
        content_scheme = url_scheme(content_url)
        normalized = reference
        if url_scheme(reference) != content_scheme:
            normalized = set_url_scheme(reference, content_scheme)

        base, query = split_query(normalized)
        if not base.startswith(content_url + "/"):
            raise SourceResolutionError(
                reference=reference, reason=f"not under content root {content_url}"
            )

        relative = unquote(base[len(content_url) + 1 :])
        # Lexical normalization: ".." is collapsed, symlinks inside the root are kept
        source_path = AbsolutePath(Path(os.path.normpath(Path(self._content_dir) / relative)))
        try:
            source_path.relative_to(self._content_dir)
        except ValueError as e:
            raise SourceResolutionError(
                reference=reference, reason="path escapes the content root"
            ) from e

        return source_path, query

    async def _compile(
        self,
        handle: str,
        source_path: AbsolutePath,
        location: AbsolutePath,
        config: CompilerConfiguration,
    ) -> int:
        """Compile, write the output, persist the record; return the freshness token."""
        try:
            source_text = await self.fs.read_text(source_path)
        except OSError as e:
            raise SourceResolutionError(reference=str(source_path), reason=str(e)) from e

        log = get_logger(__name__, handle=handle)
        result = await run_compiler(
            self.compiler, source_text, str(source_path), config, banner=self._banner
        )
        if not result.success:
            log.error("Compile failed for %s: %s", handle, result.error)
            raise StylesheetCompileError(
                handle=handle,
                source_path=str(source_path),
                diagnostic=result.error or "",
            )

        try:
            await self.fs.write_text(location, result.css or "")
        except OSError as e:
            raise CacheStorageError(
                operation="write_output", path=str(location), reason=str(e)
            ) from e

        record = await self.oracle.record_compile(
            location, config, result.imports, compile_ms=result.elapsed_ms
        )
        log.info(
            "Compiled %s -> %s in %.1fms (%d imports)",
            source_path,
            location,
            result.elapsed_ms,
            len(record.imports),
        )
        return record.creation_time


class StylesheetCompilerSync:
    """
    Synchronous wrapper around StylesheetCompiler.

    Uses asyncio.run() to execute async operations in blocking mode, for
    hosts that dispatch requests synchronously.
    """

    def __init__(self, service: StylesheetCompiler) -> None:
        self._async_service = service

    def is_compilable(self, reference: str) -> bool:
        """Whether a reference names a compilable source."""
        return self._async_service.is_compilable(reference)

    def resolve(self, reference: str, handle: str, options: ResolveOptions | None = None) -> str:
        """Resolve one reference (blocking)."""
        return asyncio.run(self._async_service.resolve(reference, handle, options))

    def resolve_many(self, references: str, options: ResolveOptions | None = None) -> str:
        """Resolve a comma-delimited list (blocking)."""
        return asyncio.run(self._async_service.resolve_many(references, options))


def build_stylesheet_compiler(
    app_config: AppConfig,
    compiler: Compiler,
    fs: FileSystem | None = None,
    hooks: ConfigurationHooks | None = None,
    clock: Callable[[], float] = time.time,
) -> StylesheetCompiler:
    """
    Wire a StylesheetCompiler from application configuration.

    Args:
        app_config: Loaded application configuration
        compiler: Stylesheet compiler
        fs: Filesystem (defaults to RealFileSystem)
        hooks: Configuration hooks (defaults to hooks seeded from app_config.compiler)
        clock: Returns the current Unix time in seconds

    Returns:
        Ready-to-use StylesheetCompiler
    """
    fs = fs or RealFileSystem()
    cache = app_config.cache
    defaults = app_config.compiler

    if hooks is None:
        hooks = ConfigurationHooks(
            variables=defaults.variables,
            import_dirs=defaults.import_dirs,
            formatter=defaults.formatter,
        )

    store = FSMetadataStore(
        fs, absolute_path(cache.resolved_metadata_dir()), dir_mode=cache.dir_mode
    )
    addressing = OutputAddressing(
        fs, absolute_path(cache.directory), cache.url, dir_mode=cache.dir_mode
    )

    return StylesheetCompiler(
        fs=fs,
        compiler=compiler,
        store=store,
        addressing=addressing,
        source=app_config.source,
        config_factory=hooks,
        banner=defaults.banner,
        clock=clock,
    )
