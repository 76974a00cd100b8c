"""Tests for ConfigurationHooks (default configuration factory)."""

import pytest

from stylejit.core.compiler import CompilerConfiguration, ConfigurationHooks
from stylejit.core.io import absolute_path

SOURCE = absolute_path("/site/content/themes/main/theme.scss")


class TestDefaults:
    """Tests for configuration built without hooks."""

    def test_source_directory_is_first_import_path(self):
        """Test the source's directory is searched first."""
        hooks = ConfigurationHooks(import_dirs=["/site/shared"])

        config = hooks.build("theme", SOURCE)

        assert config.import_paths == ["/site/content/themes/main", "/site/shared"]

    def test_defaults_applied(self):
        """Test default variables and formatter are used."""
        hooks = ConfigurationHooks(variables={"brand": "#c00"}, formatter="expanded")

        config = hooks.build("theme", SOURCE)

        assert config.variables == {"brand": "#c00"}
        assert config.formatter == "expanded"

    def test_callable_as_factory(self):
        """Test the hooks object is itself a ConfigFactory."""
        hooks = ConfigurationHooks()

        assert hooks("theme", SOURCE) == hooks.build("theme", SOURCE)


class TestHooks:
    """Tests for registered hooks."""

    def test_hooks_run_in_order_per_handle(self):
        """Test hooks chain in registration order and see the handle."""
        hooks = ConfigurationHooks()
        hooks.add_variables(lambda variables, handle: {**variables, "handle": handle})
        hooks.add_variables(
            lambda variables, handle: {**variables, "handle": variables["handle"].upper()}
        )

        assert hooks.build("editor", SOURCE).variables == {"handle": "EDITOR"}

    def test_import_dir_and_formatter_hooks(self):
        """Test import and formatter filters apply."""
        hooks = ConfigurationHooks()
        hooks.add_import_dirs(lambda dirs, handle: [*dirs, "/vendor/bootstrap"])
        hooks.add_formatter(
            lambda formatter, handle: "expanded" if handle == "editor" else formatter
        )

        assert hooks.build("editor", SOURCE).import_paths[-1] == "/vendor/bootstrap"
        assert hooks.build("editor", SOURCE).formatter == "expanded"
        assert hooks.build("theme", SOURCE).formatter == "compressed"

    def test_configuration_hook_can_attach_extensions(self):
        """Test a configuration hook can replace the configuration."""
        hooks = ConfigurationHooks()
        hooks.add_configuration(
            lambda config, handle: config.with_updates(extensions={"source_map": "inline"})
        )

        assert hooks.build("theme", SOURCE).extensions == {"source_map": "inline"}


class TestCompilerConfiguration:
    """Tests for configuration validation."""

    def test_rejects_live_objects_in_extensions(self):
        """Test extension state must be plain values."""
        with pytest.raises(ValueError):
            CompilerConfiguration(extensions={"hook": object()})

    def test_is_frozen(self):
        """Test configurations are immutable."""
        config = CompilerConfiguration()

        with pytest.raises(ValueError):
            config.formatter = "expanded"  # type: ignore[misc]
