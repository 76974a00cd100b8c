"""Path and result types shared by the filesystem implementations."""

from pathlib import Path
from typing import NewType

from pydantic import BaseModel, Field

# Normalized absolute path; build with absolute_path()
AbsolutePath = NewType("AbsolutePath", Path)


def absolute_path(path: str | Path) -> AbsolutePath:
    """
    Normalize a path to an absolute one.

    Relative paths are taken from the working directory and ``..`` segments
    are collapsed, so the result can be compared with ``relative_to`` to
    check containment.

    Example:
        >>> str(absolute_path("/srv/site/content/themes/../uploads"))
        '/srv/site/content/uploads'
    """
    return AbsolutePath(Path(path).resolve())


class WriteResult(BaseModel):
    """Outcome of one atomic write."""

    path: str = Field(description="File that was replaced")
    bytes_written: int = Field(ge=0, description="Encoded size of the content")
    duration_ms: float = Field(ge=0.0, description="Wall time including the rename")
