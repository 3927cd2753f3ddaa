"""Attendance Ledger: per-session, per-person attendance records.

Invariants:
    - At most one record per (session, person); a second record_attendance is a
      ConflictError (checked, and mapped from the unique constraint on a race)
    - Recording for a non-member logs a warning and still writes the record
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.domain_types import AttendanceId, AttendanceStatus
from tkd_core.core.errors import ConflictError, NotFoundError, ValidationError
from tkd_core.models.attendance import Attendance
from tkd_core.services.lookups import require_person, require_session
from tkd_core.services.session_registry import GroupSessionRegistry
from tkd_core.services.transaction import atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedAttendance:
    attendance_id: AttendanceId
    warnings: tuple[str, ...] = ()


def _coerce_status(status: AttendanceStatus | str) -> AttendanceStatus:
    try:
        return AttendanceStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(
            f"Unknown attendance status '{status}' (expected one of: {allowed})",
            "status",
        )


class AttendanceLedger:
    """Records and amends attendance for class sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.registry = GroupSessionRegistry(db)

    async def record_attendance(
        self,
        session_id: int,
        person_id: int,
        status: AttendanceStatus | str,
        description: str | None = None,
    ) -> RecordedAttendance:
        status = _coerce_status(status)
        warnings: list[str] = []
        async with atomic(self.db, "record_attendance"):
            await require_session(self.db, session_id)
            await require_person(self.db, person_id)
            if await self._find(session_id, person_id) is not None:
                raise ConflictError(
                    f"Attendance for person {person_id} at session {session_id} "
                    "already recorded; use update_attendance",
                )
            if person_id not in await self.registry.active_members(session_id):
                warnings.append(
                    f"Person {person_id} is not an active member of any group "
                    f"attached to session {session_id}",
                )
                logger.warning(
                    warnings[-1],
                    extra={"session_id": session_id, "person_id": person_id},
                )
            record = Attendance(
                session_id=session_id, person_id=person_id,
                status=status, description=description,
            )
            self.db.add(record)
            await self.db.flush()
        return RecordedAttendance(AttendanceId(record.id), tuple(warnings))

    async def update_attendance(
        self,
        session_id: int,
        person_id: int,
        status: AttendanceStatus | str,
        description: str | None = None,
    ) -> Attendance:
        status = _coerce_status(status)
        async with atomic(self.db, "update_attendance"):
            record = await self._find(session_id, person_id, lock=True)
            if record is None:
                raise NotFoundError("Attendance", f"{session_id}/{person_id}")
            record.status = status
            record.description = description
            await self.db.flush()
        logger.info(
            f"Attendance changed to {status.value}",
            extra={"session_id": session_id, "person_id": person_id},
        )
        return record

    async def session_attendance(self, session_id: int) -> list[Attendance]:
        await require_session(self.db, session_id)
        result = await self.db.execute(
            select(Attendance)
            .where(Attendance.session_id == session_id)
            .order_by(Attendance.id),
        )
        return list(result.scalars().all())

    async def _find(
        self, session_id: int, person_id: int, lock: bool = False,
    ) -> Attendance | None:
        query = (
            select(Attendance)
            .where(Attendance.session_id == session_id)
            .where(Attendance.person_id == person_id)
            .execution_options(populate_existing=True)
        )
        if lock:
            query = query.with_for_update()
        return (await self.db.execute(query)).scalar_one_or_none()
