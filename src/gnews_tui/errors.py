from __future__ import annotations


class GNewsError(Exception):
    """Base class for errors raised by the reader core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchFailed(GNewsError):
    """A headline or search request failed: transport, HTTP status or payload."""


class StorageDecodeFailed(GNewsError):
    """Persisted bookmark data is present but cannot be decoded."""
