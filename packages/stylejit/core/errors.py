"""Exceptions raised while resolving stylesheet references.

Every error here is fatal to the current request. Nothing retries and
nothing falls back to a stale output; the caller sees the failure.
"""

from __future__ import annotations


class StyleJitError(Exception):
    """Base class for stylejit failures."""

    pass


class StylesheetCompileError(StyleJitError):
    """Raised when the compiler rejects a stylesheet.

    ``str(err)`` is the compiler diagnostic, unmodified.

    Attributes:
        handle: Handle of the stylesheet being compiled.
        source_path: Absolute path of the source file.
        diagnostic: Compiler message (syntax error, missing import, ...).
    """

    def __init__(self, *, handle: str, source_path: str, diagnostic: str) -> None:
        self.handle = handle
        self.source_path = source_path
        self.diagnostic = diagnostic
        super().__init__(diagnostic)


class SourceResolutionError(StyleJitError):
    """Raised when a compilable reference cannot be mapped to a readable source file."""

    def __init__(self, *, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot resolve stylesheet {reference!r}: {reason}")


class CacheStorageError(StyleJitError):
    """Raised when the cache directory, output file or metadata cannot be written.

    Attributes:
        operation: What was being attempted ("mkdir", "write_output", "persist_record", ...).
        path: Path (or store key) involved.
        reason: Underlying OS error message.
    """

    def __init__(self, *, operation: str, path: str, reason: str) -> None:
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(f"Cache {operation} failed for {path}: {reason}")
