from __future__ import annotations


class PublishError(Exception):
    """Base class for release publishing errors."""


class PreconditionError(PublishError):
    """Raised when a local input required before any network call is missing or invalid."""


class ConfigError(PreconditionError):
    """Raised when the YAML config file fails validation."""


class ApiError(PublishError):
    """Raised when the hosting API returns an unexpected response or cannot be reached."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = int(status)


class SyncError(PublishError):
    """Raised when asset synchronization cannot converge."""
