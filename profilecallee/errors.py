"""Exceptions raised to administrative callers of the registry."""
from __future__ import annotations


class ProfileCalleeError(Exception):
    """Base class for registry administration errors."""


class InvalidProfileError(ProfileCalleeError, ValueError):
    """Raised when a handler describes itself without a usable operation id."""

    def __init__(self, handler: object, operation_id: object) -> None:
        super().__init__(
            f"Handler {handler!r} described an invalid operation id: {operation_id!r}"
        )
        self.handler = handler
        self.operation_id = operation_id
