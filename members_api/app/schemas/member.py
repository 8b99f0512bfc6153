"""
Pydantic schemas for members.

Request bodies keep every field optional: presence is checked by the
service so that a missing field produces the API's own 400 response
instead of a framework-level validation error.  Email format is not
validated.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class MemberCreate(BaseModel):
    """Body of ``POST /api/members``."""

    name: Optional[str] = Field(None, description="Member's display name (required)")
    email: Optional[str] = Field(None, description="Member's email, unique across members (required)")


class MemberUpdate(BaseModel):
    """Body of ``PUT /api/members/{id}``.

    Both fields are optional but at least one must be supplied.
    """

    name: Optional[str] = None
    email: Optional[str] = None


class MemberRead(BaseModel):
    """A stored member."""

    id: int
    name: str
    email: str
    joined_date: str


class MemberListResponse(BaseModel):
    success: bool = True
    members: List[MemberRead]


class MemberResponse(BaseModel):
    success: bool = True
    member: MemberRead


class MemberCreatedResponse(BaseModel):
    success: bool = True
    message: str
    id: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Envelope of every failed request."""

    success: bool = False
    error: str
