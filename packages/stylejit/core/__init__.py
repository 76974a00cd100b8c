"""Core services for stylejit."""
