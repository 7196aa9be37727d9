"""
Exception types raised by the duplicate search.
"""


class ConfigurationError(ValueError):
    """Raised when search options are invalid, before any file is touched."""


class FileChangedError(OSError):
    """Raised when a file ends earlier than the size recorded at discovery."""


class SearchCancelled(Exception):
    """Raised when a running search is cancelled between refinement passes."""
