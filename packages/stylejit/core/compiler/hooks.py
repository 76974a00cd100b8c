"""Per-handle configuration hooks.

Integrations register callables that contribute to the compiler
configuration for a handle. Hooks run in registration order and each one
receives the value produced by the previous hook.

Example:
    >>> hooks = ConfigurationHooks(formatter="expanded")
    >>> hooks.add_variables(lambda variables, handle: {**variables, "brand": "#c00"})
    >>> hooks.add_import_dirs(lambda dirs, handle: [*dirs, "/srv/shared/scss"])
    >>> config = hooks.build("theme", absolute_path("/srv/site/theme.scss"))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import logging
from pathlib import Path
from typing import Any

from stylejit.core.compiler.models import CompilerConfiguration
from stylejit.core.io import AbsolutePath

logger = logging.getLogger(__name__)

VariablesHook = Callable[[dict[str, Any], str], dict[str, Any]]
ImportDirsHook = Callable[[list[str], str], list[str]]
FormatterHook = Callable[[str, str], str]
ConfigurationHook = Callable[[CompilerConfiguration, str], CompilerConfiguration]


class ConfigurationHooks:
    """
    Default configuration factory with filter-style hooks.

    Args:
        variables: Default variable bindings
        import_dirs: Extra import directories appended after the source directory
        formatter: Default formatter selector
    """

    def __init__(
        self,
        variables: Mapping[str, Any] | None = None,
        import_dirs: Sequence[str] = (),
        formatter: str = "compressed",
    ) -> None:
        self._variables = dict(variables or {})
        self._import_dirs = list(import_dirs)
        self._formatter = formatter
        self._variable_hooks: list[VariablesHook] = []
        self._import_dir_hooks: list[ImportDirsHook] = []
        self._formatter_hooks: list[FormatterHook] = []
        self._configuration_hooks: list[ConfigurationHook] = []

    def add_variables(self, hook: VariablesHook) -> None:
        """Register a hook that filters the variable bindings."""
        self._variable_hooks.append(hook)

    def add_import_dirs(self, hook: ImportDirsHook) -> None:
        """Register a hook that filters the import directory list."""
        self._import_dir_hooks.append(hook)

    def add_formatter(self, hook: FormatterHook) -> None:
        """Register a hook that filters the formatter selector."""
        self._formatter_hooks.append(hook)

    def add_configuration(self, hook: ConfigurationHook) -> None:
        """Register a hook that may replace the whole configuration.

        Runs after the variable, import and formatter hooks. Whatever it
        returns is what gets fingerprinted and compiled.
        """
        self._configuration_hooks.append(hook)

    def build(self, handle: str, source_path: AbsolutePath) -> CompilerConfiguration:
        """Build the configuration for a handle (usable as a ConfigFactory)."""
        variables: dict[str, Any] = dict(self._variables)
        for variables_hook in self._variable_hooks:
            variables = variables_hook(variables, handle)

        import_dirs = [str(Path(source_path).parent), *self._import_dirs]
        for import_hook in self._import_dir_hooks:
            import_dirs = import_hook(import_dirs, handle)

        formatter = self._formatter
        for formatter_hook in self._formatter_hooks:
            formatter = formatter_hook(formatter, handle)

        config = CompilerConfiguration(
            variables=variables,
            import_paths=import_dirs,
            formatter=formatter,
        )
        for configuration_hook in self._configuration_hooks:
            config = configuration_hook(config, handle)

        logger.debug(
            "Built configuration for %s: %d variables, %d import paths, formatter=%s",
            handle,
            len(config.variables),
            len(config.import_paths),
            config.formatter,
        )
        return config

    __call__ = build
