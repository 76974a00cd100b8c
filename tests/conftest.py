"""Shared pytest fixtures for stylejit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import re

import pytest

from stylejit.core.addressing import OutputAddressing
from stylejit.core.caching import MemoryMetadataStore
from stylejit.core.compiler import (
    CompileResult,
    CompilerConfiguration,
    ConfigurationHooks,
    compile_failure,
    compile_success,
)
from stylejit.core.config import SourceConfig
from stylejit.core.io import FakeFileSystem, absolute_path
from stylejit.core.orchestrator import StylesheetCompiler

CONTENT_URL = "https://example.com/content"
CONTENT_DIR = "/site/content"
CACHE_DIR = "/site/uploads/stylejit"
CACHE_URL = "https://example.com/uploads/stylejit"

_IMPORT_RE = re.compile(r'@import\s+"([^"]+)"\s*;')


# ============================================================================
# Test doubles
# ============================================================================


class FakeScssCompiler:
    """Tiny stand-in for a real SCSS compiler.

    Inlines ``@import "name";`` (looking up ``name.scss`` / ``_name.scss`` in
    the configured import paths), substitutes ``$variables`` and collapses
    whitespace for the "compressed" formatter.
    """

    def __init__(self, reader: Callable[[str], str | None]) -> None:
        self.reader = reader
        self.calls = 0
        self.fail_with: str | None = None

    def compile(
        self, source_text: str, source_path: str, config: CompilerConfiguration
    ) -> CompileResult:
        self.calls += 1
        if self.fail_with is not None:
            return compile_failure(self.fail_with)

        imports = [source_path]
        css = self._expand(source_text, config, imports)
        for name, value in config.variables.items():
            css = css.replace(f"${name}", str(value))
        if config.formatter == "compressed":
            css = " ".join(css.split())
        return compile_success(css, imports)

    def _expand(self, text: str, config: CompilerConfiguration, imports: list[str]) -> str:
        def inline(match: re.Match[str]) -> str:
            name = match.group(1)
            for directory in config.import_paths:
                for candidate in (f"{name}.scss", f"_{name}.scss"):
                    path = str(Path(directory) / candidate)
                    content = self.reader(path)
                    if content is not None:
                        if path not in imports:
                            imports.append(path)
                        return self._expand(content, config, imports)
            raise LookupError(f'File to import not found or unreadable: "{name}"')

        return _IMPORT_RE.sub(inline, text)


class FakeClock:
    """Manually advanced Unix clock (seconds)."""

    def __init__(self, start: float = 1_760_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1) -> None:
        self.now += seconds


# ============================================================================
# Wiring fixtures
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def compiler(fs: FakeFileSystem) -> FakeScssCompiler:
    """Provide a fake compiler reading from the fake filesystem."""
    return FakeScssCompiler(reader=fs._files.get)


@pytest.fixture
def store() -> MemoryMetadataStore:
    """Provide an empty in-memory metadata store."""
    return MemoryMetadataStore()


@pytest.fixture
def source_config() -> SourceConfig:
    """Provide source settings rooted at the fake content dir."""
    return SourceConfig(content_url=CONTENT_URL, content_dir=CONTENT_DIR)


@pytest.fixture
def addressing(fs: FakeFileSystem) -> OutputAddressing:
    """Provide output addressing under the fake uploads dir."""
    return OutputAddressing(fs, absolute_path(CACHE_DIR), CACHE_URL)


@pytest.fixture
def hooks() -> ConfigurationHooks:
    """Provide default configuration hooks."""
    return ConfigurationHooks()


@pytest.fixture
def service(
    fs: FakeFileSystem,
    compiler: FakeScssCompiler,
    store: MemoryMetadataStore,
    addressing: OutputAddressing,
    source_config: SourceConfig,
    hooks: ConfigurationHooks,
    clock: FakeClock,
) -> StylesheetCompiler:
    """Provide a StylesheetCompiler wired to fakes (no banner)."""
    return StylesheetCompiler(
        fs=fs,
        compiler=compiler,
        store=store,
        addressing=addressing,
        source=source_config,
        config_factory=hooks,
        banner=False,
        clock=clock,
    )


@pytest.fixture
def write_source(fs: FakeFileSystem) -> Callable[..., object]:
    """Write a file below the fake content dir; returns its absolute path string."""

    async def _write(relative: str, content: str) -> str:
        path = fs.join(absolute_path(CONTENT_DIR), relative)
        await fs.write_text(path, content)
        return str(path)

    return _write


@pytest.fixture
def compiler_cls() -> type[FakeScssCompiler]:
    """Provide the fake compiler class for tests that wire their own reader."""
    return FakeScssCompiler
