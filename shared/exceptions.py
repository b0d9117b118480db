"""Error kinds raised by the inventory and order services.

Routers translate these into HTTP responses; nothing in the core
retries on its own.
"""
from typing import Optional


class BookingError(Exception):
    """Base class for every error the booking core raises."""


class ValidationError(BookingError):
    """Malformed or missing request fields."""


class NotFound(BookingError):
    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class InsufficientSpaces(BookingError):
    def __init__(self, lesson_id: str, requested: int, available: Optional[int] = None):
        if available is None:
            message = f"Not enough spaces left for lesson {lesson_id} (requested {requested})"
        else:
            message = (
                f"Not enough spaces left for lesson {lesson_id}: "
                f"requested {requested}, available {available}"
            )
        super().__init__(message)
        self.lesson_id = lesson_id
        self.requested = requested
        self.available = available


class BackendUnavailable(BookingError):
    """The persistent store could not be reached at startup."""


class RetrievalFailure(BookingError):
    """A live backend I/O error while serving a single request."""

    def __init__(self, action: str):
        super().__init__(f"Failed to {action}")
        self.action = action
