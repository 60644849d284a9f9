"""Cached GitHub user directory client with paginated relationship lists and debounced search."""

__version__ = "0.1.0"
