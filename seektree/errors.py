"""Exception taxonomy for seektree.

Per-peer failures (``EmptyResultError``, ``MalformedPathError``) are isolated
by the consumer loop; ``ConfigurationError`` is the only fatal startup error.
"""

from __future__ import annotations


class SeekTreeError(Exception):
    """Base class for all seektree errors."""


class ConfigurationError(SeekTreeError):
    """Required configuration (credentials) is missing or unusable."""


class EmptyResultError(SeekTreeError):
    """A peer advertised a search result without any files."""


class MalformedPathError(SeekTreeError):
    """A remote path could not be split into directory and file segments."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"malformed remote path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class TransferError(SeekTreeError):
    """A download could not be started or failed."""
