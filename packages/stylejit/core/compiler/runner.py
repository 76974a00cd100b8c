"""Runs a compiler and normalizes its result."""

from __future__ import annotations

import asyncio
from email.utils import formatdate
import logging
import time

from stylejit import __version__
from stylejit.core.compiler.models import (
    CompileResult,
    CompilerConfiguration,
    compile_failure,
    compile_success,
)
from stylejit.core.compiler.protocols import Compiler

logger = logging.getLogger(__name__)


def compile_banner(elapsed_ms: float, now: float | None = None) -> str:
    """Header comment prepended to compiled output.

    Example:
        >>> compile_banner(12.5, now=0)
        '/* compiled by stylejit ... on Thu, 01 Jan 1970 00:00:00 -0000 (0.0125s) */\\n\\n'
    """
    stamp = formatdate(now)
    return f"/* compiled by stylejit {__version__} on {stamp} ({elapsed_ms / 1000:.4f}s) */\n\n"


async def run_compiler(
    compiler: Compiler,
    source_text: str,
    source_path: str,
    config: CompilerConfiguration,
    *,
    banner: bool = True,
) -> CompileResult:
    """Run a (blocking) compiler off the event loop and normalize the result.

    - Exceptions raised by the compiler become failure results, message verbatim
    - The source path is always part of the import set
    - The banner comment is prepended when enabled

    Args:
        compiler: Compiler implementation
        source_text: Source file contents
        source_path: Absolute source file path
        config: Compiler configuration
        banner: Prepend the "compiled by" comment

    Returns:
        Normalized CompileResult
    """
    loop = asyncio.get_running_loop()
    start = time.perf_counter()
    try:
        result = await loop.run_in_executor(
            None, compiler.compile, source_text, source_path, config
        )
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("Compiler raised %s for %s", type(e).__name__, source_path)
        return compile_failure(str(e), elapsed_ms=elapsed_ms)
    elapsed_ms = (time.perf_counter() - start) * 1000

    if not result.success:
        return compile_failure(result.error or "unknown compile error", elapsed_ms=elapsed_ms)

    imports = list(result.imports)
    if source_path not in imports:
        imports.insert(0, source_path)

    css = result.css or ""
    if banner:
        css = compile_banner(elapsed_ms) + css

    return compile_success(css, imports, elapsed_ms=elapsed_ms)
