"""Shared utilities for stylejit."""

from stylejit.core.utils.json import read_json
from stylejit.core.utils.logging import (
    configure_logging,
    configure_logging_from_config,
    get_logger,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
    "read_json",
]
