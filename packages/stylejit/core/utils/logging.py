"""Logging setup for stylejit.

Everything logs through the stdlib ``logging`` module under the
``stylejit`` namespace. Hosts call ``configure_logging`` (or
``configure_logging_from_config`` with the ``logging`` section of
AppConfig) once at startup; library code never configures handlers.

Per-request context such as the stylesheet handle is attached with
``get_logger(__name__, handle=...)`` and ends up as top-level keys of the
JSON lines written by ``StructuredJSONFormatter``.
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stylejit.core.config.models import LoggingConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per line.

    Shape::

        {"timestamp": "...+00:00", "level": "INFO", "logger": "stylejit.core.orchestrator",
         "message": "...", "handle": "theme", "error": {"type": ..., "message": ..., "trace": ...}}

    ``error`` is only present when the record carries exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "trace": record.exc_text or self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single root handler (stdout or file).

    Safe to call again; the previous configuration is replaced.

    Args:
        level: Level name, case-insensitive
        format_string: Text format; ignored when structured=True
        filename: Log file path, None for stdout
        structured: Emit JSON lines instead of text

    Example:
        >>> configure_logging(level="DEBUG", structured=True, filename="stylejit.jsonl")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    )
    handler.setFormatter(
        StructuredJSONFormatter()
        if structured
        else logging.Formatter(format_string or DEFAULT_FORMAT)
    )

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
    logging.getLogger("asyncio").setLevel(logging.ERROR)


def configure_logging_from_config(config: LoggingConfig) -> None:
    """Configure logging from the ``logging`` section of AppConfig."""
    configure_logging(
        level=config.level,
        format_string=config.format,
        filename=config.filename,
        structured=config.structured,
    )


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Module logger, wrapped in a LoggerAdapter when context is given.

    Example:
        >>> log = get_logger(__name__, handle="theme")
        >>> log.info("Cache hit")  # JSON output gets "handle": "theme"
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, context) if context else logger
