"""Output addressing: handles, output locations and URL helpers."""

from stylejit.core.addressing.handles import (
    DEFAULT_SOURCE_PATTERN,
    derive_handle,
    digest_key,
    sanitize_key,
)
from stylejit.core.addressing.output import OUTPUT_SUFFIX, OutputAddressing
from stylejit.core.addressing.urls import (
    add_query_arg,
    set_url_scheme,
    split_query,
    strip_query,
    url_scheme,
)

__all__ = [
    "DEFAULT_SOURCE_PATTERN",
    "OUTPUT_SUFFIX",
    "OutputAddressing",
    "add_query_arg",
    "derive_handle",
    "digest_key",
    "sanitize_key",
    "set_url_scheme",
    "split_query",
    "strip_query",
    "url_scheme",
]
