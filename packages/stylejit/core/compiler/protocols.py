"""Protocols for the compiler capability.

The stylesheet compiler itself is pluggable; anything with a matching
``compile`` method can be used.
"""

from typing import Protocol

from stylejit.core.compiler.models import CompileResult, CompilerConfiguration
from stylejit.core.io import AbsolutePath


class Compiler(Protocol):
    """
    Protocol for stylesheet compilers.

    Implementations should report failures as ``compile_failure(...)``.
    Raising is tolerated: ``run_compiler`` converts any exception into a
    failure result.
    """

    def compile(
        self, source_text: str, source_path: str, config: CompilerConfiguration
    ) -> CompileResult:
        """
        Compile stylesheet source text.

        Args:
            source_text: Contents of the source file
            source_path: Absolute path of the source file
            config: Compiler configuration for this compile

        Returns:
            CompileResult with output text and every file read (source included)
        """
        ...


class ConfigFactory(Protocol):
    """Builds the compiler configuration for one handle."""

    def __call__(self, handle: str, source_path: AbsolutePath) -> CompilerConfiguration:
        """
        Args:
            handle: Handle of the stylesheet, as passed to resolve
            source_path: Absolute path of the source file

        Returns:
            Configuration to fingerprint and compile with
        """
        ...
