"""URL helpers for stylesheet references.

Small string-level helpers; references are rewritten as little as possible
so that anything not touched here round-trips byte-for-byte.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_QUERY_RE = re.compile(r"\?.*$", re.DOTALL)


def strip_query(url: str) -> str:
    """Drop the query string (and anything after it)."""
    return _QUERY_RE.sub("", url)


def split_query(url: str) -> tuple[str, str]:
    """
    Split a URL into its base and query suffix.

    The suffix keeps its leading "?" so it can be appended back verbatim.

    Example:
        >>> split_query("https://example.com/a.scss?v=2")
        ('https://example.com/a.scss', '?v=2')
        >>> split_query("https://example.com/a.scss")
        ('https://example.com/a.scss', '')
    """
    base, sep, query = url.partition("?")
    return base, f"{sep}{query}" if sep else ""


def url_scheme(url: str) -> str:
    """Scheme of a URL, or "" for scheme-relative and path-only references."""
    return urlsplit(url).scheme


def set_url_scheme(url: str, scheme: str) -> str:
    """
    Replace the scheme of a URL.

    An empty scheme produces a scheme-relative URL ("//host/path").

    Example:
        >>> set_url_scheme("http://example.com/a.css", "https")
        'https://example.com/a.css'
        >>> set_url_scheme("//example.com/a.css", "http")
        'http://example.com/a.css'
    """
    if url.startswith("//"):
        rest = url
    else:
        match = re.match(r"^[A-Za-z][A-Za-z0-9+.-]*:(//.*)$", url, re.DOTALL)
        if match is None:
            # Path-only reference, nothing to rewrite
            return url
        rest = match.group(1)
    return f"{scheme}:{rest}" if scheme else rest


def add_query_arg(url: str, name: str, value: str | int) -> str:
    """
    Set a query parameter, preserving the rest of the query verbatim.

    An existing parameter of the same name is replaced in place; otherwise
    the parameter is appended with "&" (or "?" when there is no query).

    Example:
        >>> add_query_arg("https://example.com/a.css", "ver", 10)
        'https://example.com/a.css?ver=10'
        >>> add_query_arg("https://example.com/a.css?x=1", "ver", 10)
        'https://example.com/a.css?x=1&ver=10'
    """
    base, fragment_sep, fragment = url.partition("#")
    path, query = split_query(base)
    pair = f"{name}={value}"

    if not query or query == "?":
        result = f"{path}?{pair}"
    else:
        pattern = re.compile(rf"(?<=[?&]){re.escape(name)}=[^&]*")
        if pattern.search(query):
            result = path + pattern.sub(pair.replace("\\", "\\\\"), query, count=1)
        else:
            result = f"{path}{query}&{pair}"

    return f"{result}{fragment_sep}{fragment}"
