"""
Error types raised by the cloud storage client.
"""
from typing import Optional


class CloudStoreError(Exception):
    """Base class for all cloud storage client errors."""


class NetworkFailure(CloudStoreError):
    """The request never completed (no HTTP response was received)."""

    def __init__(self, message: str, reason: Optional[object] = None):
        super().__init__(message)
        self.reason = reason


class ApiError(CloudStoreError):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class InvalidFormat(CloudStoreError):
    """A project payload could not be decoded into a known project shape."""


class InstallationFailure(CloudStoreError):
    """The workspace store rejected a project installation."""


class ConfigurationError(CloudStoreError):
    """A configuration value could not be parsed."""
