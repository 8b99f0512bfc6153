"""
Service layer for members.

``MemberService`` implements list, get, create, update and delete on
the ``members`` table.  Each operation validates its input before
touching the store, runs exactly one parameterized statement through
the ``StorageGateway`` and turns the classified outcome into either a
result or a ``MemberServiceError`` subclass.

All values are bound as parameters.  The only text interpolated into
SQL is column names taken from ``UPDATABLE_FIELDS``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional, Tuple, Union

from members_api.app.core.db import Outcome, StorageGateway
from members_api.app.core.errors import (
    ConflictError,
    NotFoundError,
    StorageFault,
    ValidationError,
)
from members_api.app.schemas.member import MemberCreate, MemberRead, MemberUpdate

logger = logging.getLogger(__name__)

MemberId = Union[int, str]

# Columns an update may touch, in the order they appear in the statement.
UPDATABLE_FIELDS: Tuple[str, ...] = ("name", "email")

_SELECT_COLUMNS = "id, name, email, joined_date"


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(timezone.utc).date()


def _is_present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def build_update_statement(member_id: MemberId, data: MemberUpdate) -> Tuple[str, List[Any]]:
    """Build the ``UPDATE`` statement for the fields supplied in ``data``.

    Each present field adds one ``column = ?`` assignment and one bound
    value, in ``UPDATABLE_FIELDS`` order; the id is bound last for the
    ``WHERE`` clause.  Raises ``ValidationError`` when no field is present.
    """
    assignments: List[str] = []
    params: List[Any] = []
    for column in UPDATABLE_FIELDS:
        value = getattr(data, column)
        if _is_present(value):
            assignments.append(f"{column} = ?")
            params.append(value)
    if not assignments:
        raise ValidationError("At least one field (name or email) is required")
    params.append(member_id)
    query = f"UPDATE members SET {', '.join(assignments)} WHERE id = ?"
    return query, params


class MemberService:
    """Member CRUD on top of a ``StorageGateway``.

    The service holds no per-request state.  ``clock`` supplies the
    date recorded as ``joined_date`` on creation.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self.gateway = gateway
        self.clock = clock

    async def list_members(self) -> List[MemberRead]:
        """Return all members, most recently joined first."""
        result = await self.gateway.execute(
            f"SELECT {_SELECT_COLUMNS} FROM members ORDER BY joined_date DESC"
        )
        if not result.succeeded:
            logger.error("Failed to fetch members: %s", result.error)
            raise StorageFault("Failed to fetch members")
        return [MemberRead(**row) for row in result.rows]

    async def get_member(self, member_id: MemberId) -> MemberRead:
        """Return the member with ``member_id``.

        The id is compared by the store as given, so an id that is not
        a number simply matches nothing.
        """
        result = await self.gateway.execute(
            f"SELECT {_SELECT_COLUMNS} FROM members WHERE id = ?",
            (member_id,),
        )
        if not result.succeeded:
            logger.error("Failed to fetch member %s: %s", member_id, result.error)
            raise StorageFault("Failed to fetch member")
        if not result.rows:
            raise NotFoundError("Member not found")
        return MemberRead(**result.rows[0])

    async def create_member(self, data: MemberCreate) -> int:
        """Insert a new member and return its id.

        ``joined_date`` is taken from the clock.  A duplicate email
        raises ``ConflictError``.
        """
        if not (_is_present(data.name) and _is_present(data.email)):
            raise ValidationError("Name and email are required")
        joined_date = self.clock().isoformat()
        result = await self.gateway.execute(
            "INSERT INTO members (name, email, joined_date) VALUES (?, ?, ?)",
            (data.name, data.email, joined_date),
        )
        if result.outcome is Outcome.UNIQUE_VIOLATION:
            raise ConflictError("Email already exists")
        if not result.succeeded:
            logger.error("Failed to create member: %s", result.error)
            raise StorageFault("Failed to create member")
        logger.info("Created member %s", result.inserted_id)
        return result.inserted_id

    async def update_member(self, member_id: MemberId, data: MemberUpdate) -> None:
        """Update the supplied fields of a member.

        Only ``name`` and ``email`` can change; ``joined_date`` never
        does.
        """
        query, params = build_update_statement(member_id, data)
        result = await self.gateway.execute(query, params)
        if result.outcome is Outcome.UNIQUE_VIOLATION:
            raise ConflictError("Email already exists")
        if not result.succeeded:
            logger.error("Failed to update member %s: %s", member_id, result.error)
            raise StorageFault("Failed to update member")
        if result.rows_affected == 0:
            raise NotFoundError("Member not found")
        logger.info("Updated member %s", member_id)

    async def delete_member(self, member_id: MemberId) -> None:
        """Delete a member.  Ids of deleted members are never reused."""
        result = await self.gateway.execute(
            "DELETE FROM members WHERE id = ?",
            (member_id,),
        )
        if not result.succeeded:
            logger.error("Failed to delete member %s: %s", member_id, result.error)
            raise StorageFault("Failed to delete member")
        if result.rows_affected == 0:
            raise NotFoundError("Member not found")
        logger.info("Deleted member %s", member_id)
