"""Fingerprinting utilities for the compile cache.

Provides a stable configuration hash and the metadata store key.
"""

import hashlib
import json
import zlib

from stylejit.core.compiler.models import CompilerConfiguration

# Bump when the projection below changes shape
FINGERPRINT_VERSION = "1"


def compute_fingerprint(config: CompilerConfiguration) -> str:
    """
    Compute stable fingerprint of a compiler configuration.

    Hashes an explicit value-only projection rather than a structural dump:
    variable and extension keys are sorted, import paths keep their order
    (search order matters), the formatter is an explicit tag. Canonical JSON
    (sorted keys, compact separators) keeps it stable across processes.

    Args:
        config: Compiler configuration

    Returns:
        SHA256 hex digest (64 chars)

    Example:
        >>> a = CompilerConfiguration(variables={"a": "1", "b": "2"})
        >>> b = CompilerConfiguration(variables={"b": "2", "a": "1"})
        >>> compute_fingerprint(a) == compute_fingerprint(b)
        True
    """
    payload = {
        "version": FINGERPRINT_VERSION,
        "variables": config.variables,
        "import_paths": list(config.import_paths),
        "formatter": config.formatter,
        "extensions": config.extensions,
    }

    canonical = json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def record_key(location: str) -> str:
    """
    Metadata store key for an output location.

    CRC-32 of the location string as 8 hex chars. Collisions are possible
    but unlikely for the number of stylesheets a site compiles.

    Example:
        >>> len(record_key("/srv/uploads/stylejit/theme.css"))
        8
    """
    return f"{zlib.crc32(location.encode('utf-8')) & 0xFFFFFFFF:08x}"
