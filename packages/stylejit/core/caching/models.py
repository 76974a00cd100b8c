"""Models for the compile cache.

Provides the persisted cache record and the staleness decision.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CacheRecord(BaseModel):
    """
    Metadata persisted for one output location after a successful compile.

    Written once per compile (after the output file is in place), never
    partially updated. A record without its output file is not a valid cache.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    creation_time: int = Field(description="Unix timestamp (seconds) of the compile")
    imports: dict[str, int] = Field(
        default_factory=dict,
        description="Absolute import path -> modification timestamp (ns) at compile time",
    )
    configuration_fingerprint: str = Field(
        description="SHA256 hex digest of the compiler configuration"
    )
    output_location: str | None = Field(default=None, description="Output file this record covers")
    compile_ms: float | None = Field(default=None, description="Compile duration in milliseconds")


class StaleReason(str, Enum):
    """Why a cached output was (or was not) considered stale."""

    FRESH = "fresh"
    NO_OUTPUT = "no_output"
    NO_RECORD = "no_record"
    IMPORT_MISSING = "import_missing"
    IMPORT_CHANGED = "import_changed"
    IMPORT_NEWER_THAN_OUTPUT = "import_newer_than_output"
    CONFIGURATION_CHANGED = "configuration_changed"
    FORCED = "forced"


class StalenessResult(BaseModel):
    """
    Outcome of a staleness check.

    ``known_good_timestamp`` is only set when ``stale`` is False; it is the
    creation time of the record and doubles as the freshness token.
    """

    model_config = ConfigDict(frozen=True)

    stale: bool
    reason: StaleReason
    known_good_timestamp: int | None = None
    detail: str | None = Field(default=None, description="Offending import path, if any")
