"""Exception hierarchy shared by the transform engine and the edit history."""

from __future__ import annotations


class IRetouchError(Exception):
    """Base class for every error raised by iRetouch."""


class InvalidArgumentError(IRetouchError, ValueError):
    """Raised when a caller passes a buffer or request the engine cannot accept.

    The check always happens before any state is touched, so catching it never
    requires a rollback on the caller's side.
    """


class TransformError(IRetouchError):
    """Raised when a pixel operation fails internally."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class CorruptEntryError(IRetouchError):
    """Raised when a stored snapshot cannot be decompressed or decoded."""


class OperationCancelled(IRetouchError):
    """Raised when a transform observes its cancellation flag between stages."""


class SettingsError(IRetouchError):
    """Raised when an engine settings file is missing or malformed."""
