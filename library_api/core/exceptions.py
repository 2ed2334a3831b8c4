"""
Error kinds raised by the library core.

Every failure the services surface carries an ``ErrorKind`` so the HTTP layer
can map it to a status code without inspecting the message text.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal_error"


class LibraryException(Exception):
    """Base exception class for the library core."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An error occurred",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        self.message = message
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to response dict."""
        return {"kind": self.code, "message": self.message}


class ValidationException(LibraryException):
    """One or more field rules were violated; ``errors`` lists every one."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        errors: List[str],
        message: str = "Validation failed",
        resource_type: Optional[str] = None,
    ):
        super().__init__(message, resource_type=resource_type)
        self.errors = list(errors)

    def __str__(self) -> str:
        return f"{self.message}: {', '.join(self.errors)}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class NotFoundException(LibraryException):
    """Identifier is malformed or resolves to no record."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        super().__init__(message, resource_type=resource_type, resource_id=resource_id)


class ConflictException(LibraryException):
    """Uniqueness or integrity violation."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        super().__init__(message, resource_type=resource_type, resource_id=resource_id)


class InternalException(LibraryException):
    """Unexpected failure from the backing store."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
