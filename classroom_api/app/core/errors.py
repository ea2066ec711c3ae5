"""
Error kinds raised by the service and validation layers.

These exceptions carry no HTTP knowledge.  The request boundary maps
each kind to a status code in ``api.errors``.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    """A single problem with one field of an inbound payload."""

    field: str
    message: str


class ClassroomError(Exception):
    """Base class for all expected, recoverable errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ClassroomError):
    """Malformed or missing input that the caller can fix."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors else []

    @classmethod
    def from_field_errors(cls, errors: Sequence[FieldError]) -> "ValidationError":
        """Build an error whose message is the first field error's message."""
        if not errors:
            raise ValueError("from_field_errors needs at least one field error")
        return cls(errors[0].message, list(errors))


class NotFoundError(ClassroomError):
    """A referenced teacher or student does not exist."""


class ConflictError(ClassroomError):
    """A record with the same unique key already exists."""
