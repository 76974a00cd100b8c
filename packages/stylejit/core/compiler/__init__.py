"""Compiler capability: configuration, result type, hooks and runner."""

from stylejit.core.compiler.hooks import ConfigurationHooks
from stylejit.core.compiler.models import (
    CompileResult,
    CompilerConfiguration,
    compile_failure,
    compile_success,
)
from stylejit.core.compiler.protocols import Compiler, ConfigFactory
from stylejit.core.compiler.runner import compile_banner, run_compiler

__all__ = [
    "Compiler",
    "ConfigFactory",
    "CompilerConfiguration",
    "CompileResult",
    "ConfigurationHooks",
    "compile_banner",
    "compile_failure",
    "compile_success",
    "run_compiler",
]
