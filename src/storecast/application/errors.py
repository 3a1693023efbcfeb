"""Errors raised by the playlist reconciliation use cases."""

from __future__ import annotations


class InvalidTargetError(ValueError):
    """Raised when a clean is requested without a resolvable playlist id."""


class TransportFailureError(RuntimeError):
    """Raised when the clean request fails or returns a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CleanupInProgressError(RuntimeError):
    """Raised when a clean is triggered while a previous one is outstanding."""
