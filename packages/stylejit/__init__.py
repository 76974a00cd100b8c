"""stylejit: just-in-time stylesheet compilation with an invalidation-aware cache."""

__version__ = "0.1.0"
