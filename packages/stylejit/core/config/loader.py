"""Reading stylejit.yaml / stylejit.json into AppConfig.

Precedence, lowest first: model defaults, the config file, ``STYLEJIT_*``
environment variables. The file is picked from the explicit argument, else
``$STYLEJIT_CONFIG``, else ``./stylejit.yaml`` when it exists.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from stylejit.core.config.models import AppConfig
from stylejit.core.utils.json import read_json

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "STYLEJIT_CONFIG"

# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "STYLEJIT_CACHE_DIR": ("cache", "directory"),
    "STYLEJIT_CACHE_URL": ("cache", "url"),
    "STYLEJIT_LOG_LEVEL": ("logging", "level"),
}

_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def detect_format(file_path: Path | str) -> str:
    """Map a config file extension to "json" or "yaml".

    Example:
        >>> detect_format("stylejit.YML")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    try:
        return _FORMATS[suffix]
    except KeyError:
        raise ValueError(f"Unsupported config format: {suffix}") from None


def _parse_json(path: Path) -> Any:
    try:
        return read_json(path)
    except ValueError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


_PARSERS: dict[str, Callable[[Path], Any]] = {"json": _parse_json, "yaml": _parse_yaml}


def load_config(path: str | Path) -> dict[str, Any]:
    """Parse a config file into a raw dict (empty file -> {}).

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: Unsupported extension, unparsable content, or a top
            level that is not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    raw = _PARSERS[detect_format(path)](path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config in {path} must be a mapping, got {type(raw).__name__}")
    return raw


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.debug("%s overrides %s.%s", env_name, section, field)
            raw.setdefault(section, {})[field] = value
    return raw


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load, override from the environment and validate the app config.

    Args:
        path: Config file; an explicit path (or ``$STYLEJIT_CONFIG``) must
            exist, the implicit ``stylejit.yaml`` may be absent

    Raises:
        FileNotFoundError: If an explicitly named file is missing
        ValidationError: If the merged config is invalid
    """
    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV) or None

    if path is not None:
        raw = load_config(path)
    elif AppConfig.default_path().is_file():
        raw = load_config(AppConfig.default_path())
    else:
        logger.debug("No %s found, using defaults", AppConfig.default_path())
        raw = {}

    return AppConfig.model_validate(_apply_env_overrides(raw))
