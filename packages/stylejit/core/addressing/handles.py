"""Handle derivation and sanitization.

Handles name the output file of a stylesheet. They are derived data, so
malformed input is sanitized rather than rejected.
"""

import posixpath
import re
from urllib.parse import unquote, urlsplit
import zlib

_UNSAFE_RE = re.compile(r"[^a-z0-9_-]")

DEFAULT_SOURCE_PATTERN = r"\.scss(\.php)?$"


def sanitize_key(value: str) -> str:
    """
    Reduce a string to the safe-token alphabet (lowercase, digits, "_" and "-").

    Example:
        >>> sanitize_key("My Theme.Main")
        'mythememain'
    """
    return _UNSAFE_RE.sub("", value.lower())


def digest_key(value: str) -> str:
    """Stable safe token for a value with no usable characters (h + CRC-32 hex)."""
    return f"h{zlib.crc32(value.encode('utf-8')) & 0xFFFFFFFF:08x}"


def derive_handle(reference: str, pattern: str = DEFAULT_SOURCE_PATTERN) -> str:
    """
    Derive a handle from a stylesheet reference.

    Takes the URL path, strips the source suffix, keeps the final segment,
    percent-decodes it, turns encoded separators into hyphens and sanitizes
    the result.

    Args:
        reference: Source stylesheet URL
        pattern: Regex matching the compilable source suffix

    Returns:
        Sanitized handle; a digest of the decoded name when nothing
        survives sanitizing, so distinct non-ASCII names stay distinct

    Example:
        >>> derive_handle("https://example.com/themes/My Folder/Theme.scss?ver=3")
        'theme'
    """
    path = re.sub(pattern, "", urlsplit(reference.strip()).path)
    name = unquote(posixpath.basename(path.rstrip("/")))
    name = name.replace("/", "-").replace("\\", "-")
    return sanitize_key(name) or (digest_key(name) if name else "")

