"""Pagination exceptions.

Every error raised by this package derives from :class:`PaginationError`.
Errors raised by store drivers or search clients are never wrapped; they
propagate to the caller unchanged.
"""
from __future__ import annotations

from typing import Any


class PaginationError(Exception):
    """Base exception for pagination operations.

    Attributes:
        message: Error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize pagination error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidInputError(PaginationError):
    """A page request was malformed.

    Raised at construction time; invalid input is never silently defaulted.
    """

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, details=details)
        self.field = field


class InvalidCursorError(InvalidInputError):
    """An ``after`` cursor could not be decoded."""

    def __init__(self, cursor: str, reason: str):
        super().__init__(f"Invalid cursor: {reason}", field="after")
        self.cursor = cursor
        self.details["cursor"] = cursor


class NotFoundError(PaginationError):
    """The entity referenced by an ``after`` cursor no longer exists.

    A stale cursor is distinct from "no results" and is surfaced to the
    caller instead of producing an empty page.

    Attributes:
        store_name: Name of the store that was queried
        identifier: The key/value that was searched for
    """

    def __init__(self, store_name: str, identifier: dict[str, Any]):
        self.store_name = store_name
        self.identifier = identifier

        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        message = f"No {store_name} record found with {id_str}"

        super().__init__(message, details={"store": store_name, **identifier})

    def __repr__(self) -> str:
        return f"NotFoundError(store={self.store_name!r}, identifier={self.identifier!r})"


__all__ = [
    "InvalidCursorError",
    "InvalidInputError",
    "NotFoundError",
    "PaginationError",
]
