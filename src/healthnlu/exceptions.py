"""Custom exception hierarchy for healthnlu."""

from __future__ import annotations


class HealthNLUError(Exception):
    """Base exception for all healthnlu errors."""


class ContextKeyError(HealthNLUError):
    """Raised when the identifiers needed to build a context key are missing."""


class FallbackError(HealthNLUError):
    """Raised when the external fallback returns an unusable answer."""


class StoreUnavailableError(HealthNLUError):
    """Raised when the persistent store is not available."""

    def __init__(self, message: str, operation: str = "") -> None:
        super().__init__(message)
        self.operation = operation
