"""Exceptions raised by the dynamization engine."""

from __future__ import annotations


class DynamizationError(Exception):
    """Base class for all engine errors."""


class BuildFailure(DynamizationError):
    """Raised when the capability fails to build a block for a merge step."""

    def __init__(self, message: str, level: int | None = None) -> None:
        super().__init__(message)
        self.level = level


class QueryFailure(DynamizationError):
    """Raised when a per-block query fails; no partial result is returned."""

    def __init__(self, message: str, level: int | None = None) -> None:
        super().__init__(message)
        self.level = level


class CapacityOverflow(DynamizationError):
    """Raised when a digit vector would need more levels than configured."""


class DeletionUnsupported(DynamizationError):
    """Raised when delete is called on a capability without logical marking."""


class InvariantViolation(BuildFailure):
    """Raised when a built structure does not hold the expected element count."""
