"""Configuration management for stylejit."""

from stylejit.core.config.loader import detect_format, load_app_config, load_config
from stylejit.core.config.models import (
    AppConfig,
    CacheConfig,
    CompilerDefaults,
    ConfigBase,
    LoggingConfig,
    SourceConfig,
)

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_app_config",
    # Models
    "AppConfig",
    "CacheConfig",
    "CompilerDefaults",
    "ConfigBase",
    "LoggingConfig",
    "SourceConfig",
]
