"""Configuration models for stylejit."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stylejit.core.addressing.handles import DEFAULT_SOURCE_PATTERN


class ConfigBase(BaseModel):
    """Top-level config document; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Validate the file at path (default_path() when None)."""
        from stylejit.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class SourceConfig(BaseModel):
    """Where source stylesheets live and which references are compilable."""

    content_url: str = Field(
        default="http://localhost/content",
        description="Public URL prefix of the content root",
    )
    content_dir: str = Field(default="content", description="Filesystem path of the content root")
    pattern: str = Field(
        default=DEFAULT_SOURCE_PATTERN,
        description="Regex matching compilable references (query string ignored)",
    )


class CacheConfig(BaseModel):
    """Where compiled output and cache metadata are stored."""

    directory: str = Field(default="uploads/stylejit-cache", description="Output directory")
    url: str = Field(
        default="http://localhost/uploads/stylejit-cache",
        description="Public URL of the output directory",
    )
    dir_mode: int = Field(
        default=0o700, ge=0, le=0o7777, description="Permission bits for created directories"
    )
    metadata_dir: str | None = Field(
        default=None, description="Metadata directory (defaults to <directory>/.meta)"
    )

    def resolved_metadata_dir(self) -> str:
        """Metadata directory with the default applied."""
        return self.metadata_dir or str(Path(self.directory) / ".meta")


class CompilerDefaults(BaseModel):
    """Defaults fed to the configuration hooks for every handle."""

    variables: dict[str, str | int | float | bool] = Field(default_factory=dict)
    import_dirs: list[str] = Field(
        default_factory=list, description="Import dirs searched after the source's own directory"
    )
    formatter: str = Field(default="compressed")
    banner: bool = Field(default=True, description="Prepend a 'compiled by' comment to output")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class AppConfig(ConfigBase):
    """Everything a stylejit deployment configures."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    compiler: CompilerDefaults = Field(default_factory=CompilerDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("stylejit.yaml")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> AppConfig:
        """Load with environment overrides; see load_app_config()."""
        from stylejit.core.config.loader import load_app_config

        return load_app_config(path)
