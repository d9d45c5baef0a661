"""Custom exception hierarchy for docchunk."""

__all__ = [
    "ConfigError",
    "DocchunkError",
    "FetchError",
    "ParseError",
    "UnsupportedGranularityError",
]


class DocchunkError(Exception):
    """Base exception for all docchunk errors."""


class ConfigError(DocchunkError):
    """Raised when configuration or call arguments are invalid."""


class UnsupportedGranularityError(ConfigError):
    """Raised when a granularity is unknown or not supported by a reader."""


class ParseError(DocchunkError):
    """Raised when a document cannot be read or parsed."""


class FetchError(DocchunkError):
    """Raised when a document cannot be retrieved from a URL."""
