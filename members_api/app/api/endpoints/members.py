"""
Member endpoints.

CRUD routes for the ``members`` resource.  Handlers delegate to
``MemberService``; faults it raises are turned into
``{"success": false, "error": ...}`` responses by the exception
handlers installed in ``main.create_app``.

The ``member_id`` path parameter is declared as ``str`` so that ids
which are not numbers reach the service and yield 404 rather than a
validation error.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status

from members_api.app.schemas.member import (
    ErrorResponse,
    MemberCreate,
    MemberCreatedResponse,
    MemberListResponse,
    MemberResponse,
    MemberUpdate,
    MessageResponse,
)
from members_api.app.services.member_service import MemberService

router = APIRouter()


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI entries documenting the error envelope for ``codes``."""
    return {code: {"model": ErrorResponse} for code in codes}


def get_member_service(request: Request) -> MemberService:
    """Return the service wired into the application by ``create_app``."""
    return request.app.state.member_service


@router.get("", response_model=MemberListResponse, responses=error_responses(500))
async def list_members(
    service: MemberService = Depends(get_member_service),
) -> MemberListResponse:
    """List all members, most recently joined first."""
    members = await service.list_members()
    return MemberListResponse(members=members)


@router.get("/{member_id}", response_model=MemberResponse, responses=error_responses(404, 500))
async def get_member(
    member_id: str,
    service: MemberService = Depends(get_member_service),
) -> MemberResponse:
    """Retrieve a single member by ID.  Returns 404 if it does not exist."""
    member = await service.get_member(member_id)
    return MemberResponse(member=member)


@router.post(
    "",
    response_model=MemberCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409, 500),
)
async def create_member(
    member_in: Optional[MemberCreate] = None,
    service: MemberService = Depends(get_member_service),
) -> MemberCreatedResponse:
    """Create a member.  ``name`` and ``email`` are both required."""
    member_id = await service.create_member(member_in or MemberCreate())
    return MemberCreatedResponse(message="Member created successfully", id=member_id)


@router.put(
    "/{member_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 404, 409, 500),
)
async def update_member(
    member_id: str,
    member_in: Optional[MemberUpdate] = None,
    service: MemberService = Depends(get_member_service),
) -> MessageResponse:
    """Update ``name`` and/or ``email`` of an existing member."""
    await service.update_member(member_id, member_in or MemberUpdate())
    return MessageResponse(message="Member updated successfully")


@router.delete("/{member_id}", response_model=MessageResponse, responses=error_responses(404, 500))
async def delete_member(
    member_id: str,
    service: MemberService = Depends(get_member_service),
) -> MessageResponse:
    """Delete a member."""
    await service.delete_member(member_id)
    return MessageResponse(message="Member deleted successfully")
