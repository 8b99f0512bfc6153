"""
Fault types raised by the member service.

Each fault carries the HTTP status code it maps to and a short message
that is safe to return to clients.  Raw store errors never end up in
``message``; they are logged where they occur.
"""

from typing import Optional

from fastapi import status


class MemberServiceError(Exception):
    """Base class for classified failures of a member operation."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MemberServiceError):
    """Required input is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(MemberServiceError):
    """No member matches the requested id."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Member not found"


class ConflictError(MemberServiceError):
    """The email is already used by another member."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already exists"


class StorageFault(MemberServiceError):
    """Any other failure reported by the store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage error"
