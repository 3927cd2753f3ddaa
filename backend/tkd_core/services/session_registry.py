"""Group & Session Registry: groups, memberships and class sessions.

Invariants:
    - Session window and group list validated before any lookup or write
    - A person has at most one active membership per group
    - active_members is evaluated at query time (removed_at IS NULL)
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.domain_types import GroupId, PersonId, SessionId
from tkd_core.core.enforce_schedule import check_removal, check_session_window
from tkd_core.core.errors import (
    ConflictError, NotFoundError, StateError, ValidationError,
)
from tkd_core.models.class_session import ClassSession
from tkd_core.models.class_session_group import ClassSessionGroup
from tkd_core.models.group import Group
from tkd_core.models.person_group import PersonGroup
from tkd_core.services.lookups import require_group, require_person, require_session
from tkd_core.services.transaction import atomic

logger = logging.getLogger(__name__)


class GroupSessionRegistry:
    """Owns groups, person-group memberships, class sessions and their groups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Groups ──────────────────────────────────────────────────

    async def create_group(self, name: str) -> GroupId:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name cannot be empty", "name")
        async with atomic(self.db, "create_group"):
            group = Group(name=name)
            self.db.add(group)
            await self.db.flush()
        logger.info(f"Group '{name}' created", extra={"group_id": group.id})
        return GroupId(group.id)

    async def add_member(
        self, group_id: int, person_id: int, joined_at: datetime | None = None,
    ) -> int:
        """Start an active membership. Returns the membership id."""
        async with atomic(self.db, "add_member"):
            await require_group(self.db, group_id)
            await require_person(self.db, person_id)
            if await self._active_membership(group_id, person_id) is not None:
                raise ConflictError(
                    f"Person {person_id} is already an active member of group {group_id}",
                )
            membership = PersonGroup(
                group_id=group_id, person_id=person_id,
                created_at=joined_at or datetime.now(timezone.utc),
            )
            self.db.add(membership)
            await self.db.flush()
        logger.info(
            f"Person joined group {group_id}",
            extra={"person_id": person_id, "group_id": group_id},
        )
        return membership.id

    async def remove_member(
        self, group_id: int, person_id: int, removed_at: datetime | None = None,
    ) -> None:
        """End the person's active membership in the group."""
        async with atomic(self.db, "remove_member"):
            await require_group(self.db, group_id)
            await require_person(self.db, person_id)
            membership = await self._active_membership(group_id, person_id)
            if membership is None:
                raise StateError(
                    f"Person {person_id} is not an active member of group {group_id}",
                )
            removed_at = removed_at or datetime.now(timezone.utc)
            check_removal(membership.created_at, removed_at)
            membership.removed_at = removed_at
            await self.db.flush()
        logger.info(
            f"Person left group {group_id}",
            extra={"person_id": person_id, "group_id": group_id},
        )

    async def group_members(self, group_id: int) -> set[PersonId]:
        await require_group(self.db, group_id)
        result = await self.db.execute(
            select(PersonGroup.person_id)
            .where(PersonGroup.group_id == group_id)
            .where(PersonGroup.removed_at.is_(None)),
        )
        return {PersonId(pid) for pid in result.scalars().all()}

    # ─── Class sessions ──────────────────────────────────────────

    async def create_session(
        self,
        coach_id: int,
        start: datetime,
        end: datetime,
        group_ids: Iterable[int],
    ) -> SessionId:
        groups = check_session_window(start, end, [GroupId(g) for g in group_ids])
        async with atomic(self.db, "create_session"):
            coach = await require_person(self.db, coach_id)
            if not coach.is_coach:
                raise StateError(f"Person {coach_id} is not a coach")
            found = set((await self.db.execute(
                select(Group.id).where(Group.id.in_(groups)),
            )).scalars().all())
            missing = [g for g in groups if g not in found]
            if missing:
                raise NotFoundError("Group", missing[0])
            session = ClassSession(
                start_time=start, end_time=end, coach_id=coach_id,
                group_links=[ClassSessionGroup(group_id=g) for g in groups],
            )
            self.db.add(session)
            await self.db.flush()
        logger.info(
            f"Class session scheduled for groups {groups}",
            extra={"session_id": session.id, "person_id": coach_id},
        )
        return SessionId(session.id)

    async def get_session(self, session_id: int) -> ClassSession:
        return await require_session(self.db, session_id)

    async def active_members(self, session_id: int) -> set[PersonId]:
        """Union of active members of every group attached to the session."""
        await require_session(self.db, session_id)
        result = await self.db.execute(
            select(PersonGroup.person_id)
            .join(ClassSessionGroup, ClassSessionGroup.group_id == PersonGroup.group_id)
            .where(ClassSessionGroup.session_id == session_id)
            .where(PersonGroup.removed_at.is_(None))
            .distinct(),
        )
        return {PersonId(pid) for pid in result.scalars().all()}

    # ─── Helpers ─────────────────────────────────────────────────

    async def _active_membership(
        self, group_id: int, person_id: int,
    ) -> PersonGroup | None:
        result = await self.db.execute(
            select(PersonGroup)
            .where(PersonGroup.group_id == group_id)
            .where(PersonGroup.person_id == person_id)
            .where(PersonGroup.removed_at.is_(None))
            .execution_options(populate_existing=True)
            .with_for_update(),
        )
        return result.scalars().first()
