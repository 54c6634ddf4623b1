"""Exceptions raised by the transfinite surface core."""

from __future__ import annotations


class TransfiniteError(ValueError):
    """Base class for surface evaluation failures."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class IncompleteLoopError(TransfiniteError):
    """Raised when the boundary loop has fewer than three sides or gaps."""


class DegenerateGeometryError(TransfiniteError):
    """Raised when degenerate input produces non-finite geometry."""


__all__ = [
    "TransfiniteError",
    "IncompleteLoopError",
    "DegenerateGeometryError",
]
