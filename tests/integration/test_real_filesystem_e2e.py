"""End-to-end tests on the real filesystem.

Wires the service through build_stylesheet_compiler and the blocking
wrapper, the way a synchronous host would.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import stat
import time

import pytest

from stylejit.core.compiler import ConfigurationHooks
from stylejit.core.config import AppConfig, CacheConfig, CompilerDefaults, SourceConfig
from stylejit.core.errors import SourceResolutionError, StylesheetCompileError
from stylejit.core.orchestrator import StylesheetCompilerSync, build_stylesheet_compiler

CONTENT_URL = "https://example.com/content"
CACHE_URL = "https://example.com/uploads/stylejit"


def _read_or_none(path: str) -> str | None:
    p = Path(path)
    return p.read_text(encoding="utf-8") if p.is_file() else None


def _set_mtime(path: Path, seconds_ago: int) -> None:
    """Pin a file's mtime in the past so edits are always observable."""
    ns = time.time_ns() - seconds_ago * 1_000_000_000
    os.utime(path, ns=(ns, ns))


class CounterClock:
    """Clock that advances one second per call."""

    def __init__(self, start: int = 1_760_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1
        return self.now


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Lay out a content dir with a theme and a partial."""
    theme_dir = tmp_path / "content" / "themes" / "site"
    theme_dir.mkdir(parents=True)
    (theme_dir / "_colors.scss").write_text("/* colors */", encoding="utf-8")
    (theme_dir / "theme.scss").write_text(
        '@import "colors";\nbody { color: $brand; }', encoding="utf-8"
    )
    _set_mtime(theme_dir / "_colors.scss", 300)
    _set_mtime(theme_dir / "theme.scss", 300)
    return tmp_path


@pytest.fixture
def app_config(site: Path) -> AppConfig:
    """Build an AppConfig rooted in tmp_path."""
    return AppConfig(
        source=SourceConfig(content_url=CONTENT_URL, content_dir=str(site / "content")),
        cache=CacheConfig(directory=str(site / "uploads" / "stylejit"), url=CACHE_URL),
        compiler=CompilerDefaults(variables={"brand": "#c00"}, banner=False),
    )


@pytest.fixture
def scss(compiler_cls):
    """Fake compiler reading straight from disk."""
    return compiler_cls(reader=_read_or_none)


@pytest.fixture
def service(app_config: AppConfig, scss) -> StylesheetCompilerSync:
    """Blocking service wired from app_config."""
    return StylesheetCompilerSync(
        build_stylesheet_compiler(app_config, compiler=scss, clock=CounterClock())
    )


THEME_URL = f"{CONTENT_URL}/themes/site/theme.scss"


class TestRealFilesystem:
    """End-to-end resolve against tmp_path."""

    def test_compile_writes_output_and_record(
        self, service: StylesheetCompilerSync, site: Path
    ):
        """Test output, metadata document and permissions after a first compile."""
        url = service.resolve(THEME_URL, "theme")

        assert url == f"{CACHE_URL}/theme.css?ver=1760000001"
        cache_dir = site / "uploads" / "stylejit"
        output = cache_dir / "theme.css"
        assert output.read_text(encoding="utf-8") == "/* colors */ body { color: #c00; }"
        assert stat.S_IMODE(cache_dir.stat().st_mode) == 0o700
        assert stat.S_IMODE(output.stat().st_mode) == 0o644

        documents = list((cache_dir / ".meta").glob("*.json"))
        assert len(documents) == 1
        record = json.loads(documents[0].read_text(encoding="utf-8"))
        assert record["creation_time"] == 1760000001
        assert set(record["imports"]) == {
            str(site / "content" / "themes" / "site" / "theme.scss"),
            str(site / "content" / "themes" / "site" / "_colors.scss"),
        }

    def test_cache_hit_then_partial_edit(self, service: StylesheetCompilerSync, site: Path, scss):
        """Test a second request hits the cache and an edited partial recompiles."""
        first = service.resolve(THEME_URL, "theme")
        assert service.resolve(THEME_URL, "theme") == first
        assert scss.calls == 1

        partial = site / "content" / "themes" / "site" / "_colors.scss"
        partial.write_text("/* colors v2 */", encoding="utf-8")
        _set_mtime(partial, 200)

        second = service.resolve(THEME_URL, "theme")

        assert scss.calls == 2
        assert second != first
        output = site / "uploads" / "stylejit" / "theme.css"
        assert output.read_text(encoding="utf-8").startswith("/* colors v2 */")

    def test_record_survives_new_service(
        self, app_config: AppConfig, scss, service: StylesheetCompilerSync
    ):
        """Test a fresh service instance reuses the persisted record."""
        first = service.resolve(THEME_URL, "theme")

        restarted = StylesheetCompilerSync(
            build_stylesheet_compiler(app_config, compiler=scss, clock=CounterClock(2_000_000_000))
        )

        assert restarted.resolve(THEME_URL, "theme") == first
        assert scss.calls == 1

    def test_hook_change_recompiles(self, app_config: AppConfig, scss, site: Path):
        """Test a variables hook changing its answer invalidates the output."""
        palette = {"brand": "#c00"}
        hooks = ConfigurationHooks()
        hooks.add_variables(lambda variables, handle: {**variables, **palette})
        service = StylesheetCompilerSync(
            build_stylesheet_compiler(app_config, compiler=scss, hooks=hooks, clock=CounterClock())
        )

        service.resolve(THEME_URL, "theme")
        palette["brand"] = "#0c0"
        service.resolve(THEME_URL, "theme")

        output = site / "uploads" / "stylejit" / "theme.css"
        assert output.read_text(encoding="utf-8") == "/* colors */ body { color: #0c0; }"
        assert scss.calls == 2

    def test_failure_keeps_previous_output(
        self, service: StylesheetCompilerSync, site: Path, scss
    ):
        """Test a broken edit leaves the last good output in place."""
        service.resolve(THEME_URL, "theme")
        output = site / "uploads" / "stylejit" / "theme.css"
        before = output.read_bytes()

        source = site / "content" / "themes" / "site" / "theme.scss"
        source.write_text('@import "nope";', encoding="utf-8")
        _set_mtime(source, 100)

        with pytest.raises(StylesheetCompileError, match='"nope"'):
            service.resolve(THEME_URL, "theme")

        assert output.read_bytes() == before
        assert not list(output.parent.glob(".theme.css.*"))

    def test_editor_batch(self, service: StylesheetCompilerSync, site: Path):
        """Test the comma-delimited batch keeps order and plain entries."""
        editor = site / "content" / "themes" / "site" / "editor.scss"
        editor.write_text("p { margin: 0; }", encoding="utf-8")
        plain = f"{CONTENT_URL}/themes/site/plain.css"

        result = service.resolve_many(f"{THEME_URL},{plain},{CONTENT_URL}/themes/site/editor.scss")

        parts = result.split(",")
        assert parts[0].startswith(f"{CACHE_URL}/theme.css?ver=")
        assert parts[1] == plain
        assert parts[2].startswith(f"{CACHE_URL}/editor.css?ver=")
        assert (site / "uploads" / "stylejit" / "editor.css").read_text(encoding="utf-8") == (
            "p { margin: 0; }"
        )

    def test_symlinked_theme_directory(self, service: StylesheetCompilerSync, site: Path):
        """Test a theme linked into the content dir from elsewhere is served."""
        shared = site / "shared-theme"
        shared.mkdir()
        (shared / "main.scss").write_text("h1 { color: $brand; }", encoding="utf-8")
        (site / "content" / "themes" / "shared").symlink_to(shared, target_is_directory=True)

        url = service.resolve(f"{CONTENT_URL}/themes/shared/main.scss", "main")

        assert url.startswith(f"{CACHE_URL}/main.css?ver=")
        output = site / "uploads" / "stylejit" / "main.css"
        assert output.read_text(encoding="utf-8") == "h1 { color: #c00; }"

    def test_parent_segments_still_rejected(self, service: StylesheetCompilerSync, site: Path):
        """Test '..' cannot climb out of the content dir."""
        (site / "secret.scss").write_text("a { b: c; }", encoding="utf-8")

        with pytest.raises(SourceResolutionError, match="escapes the content root"):
            service.resolve(f"{CONTENT_URL}/themes/../../secret.scss", "secret")
