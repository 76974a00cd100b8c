"""Models for the compiler capability.

Provides the compiler configuration and the explicit compile result type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class CompilerConfiguration(BaseModel):
    """
    Full set of options passed to the compiler for one compile.

    Only plain values are accepted: ``extensions`` must be JSON-compatible so
    that the configuration fingerprint captures everything hooks attach.

    Attributes:
        variables: Variable bindings injected before compilation
        import_paths: Ordered import search directories
        formatter: Output formatter selector (e.g. "compressed", "expanded")
        extensions: Value-only state attached by integration hooks
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    variables: dict[str, str | int | float | bool] = Field(
        default_factory=dict, description="Variable bindings"
    )
    import_paths: list[str] = Field(
        default_factory=list, description="Ordered import search directories"
    )
    formatter: str = Field(default="compressed", description="Output formatter selector")
    extensions: dict[str, JsonValue] = Field(
        default_factory=dict, description="Value-only extension state from hooks"
    )

    def with_updates(self, **changes: Any) -> CompilerConfiguration:
        """Return a validated copy with the given fields replaced."""
        return CompilerConfiguration.model_validate({**self.model_dump(), **changes})


class CompileResult(BaseModel):
    """Result of a single compile.

    Never raised: failures are carried in the result.

    Attributes:
        success: Whether the compile succeeded
        css: Compiled output text (if success=True)
        imports: Absolute paths of every file read, source included (if success=True)
        error: Compiler diagnostic, verbatim (if success=False)
        elapsed_ms: Compile duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    css: str | None = None
    imports: list[str] = Field(default_factory=list)
    error: str | None = None
    elapsed_ms: float = Field(default=0.0, ge=0.0)


def compile_success(css: str, imports: list[str], elapsed_ms: float = 0.0) -> CompileResult:
    """Build a successful compile result."""
    return CompileResult(success=True, css=css, imports=list(imports), elapsed_ms=elapsed_ms)


def compile_failure(error: str, elapsed_ms: float = 0.0) -> CompileResult:
    """Build a failed compile result."""
    return CompileResult(success=False, error=error, elapsed_ms=elapsed_ms)
