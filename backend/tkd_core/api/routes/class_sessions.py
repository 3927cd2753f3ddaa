"""Class Session Routes: scheduling, active members and attendance."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.api.deps import require_user
from tkd_core.infrastructure.database import get_db
from tkd_core.schemas.class_session import (
    AttendanceCreate, AttendanceRecordedResponse, AttendanceResponse,
    AttendanceUpdate, ClassSessionCreate, ClassSessionResponse, MembersResponse,
)
from tkd_core.services.attendance_ledger import AttendanceLedger
from tkd_core.services.session_registry import GroupSessionRegistry

router = APIRouter(
    prefix="/api/v1/class-sessions", tags=["class-sessions"],
    dependencies=[Depends(require_user)],
)


@router.post(
    "", response_model=ClassSessionResponse, status_code=status.HTTP_201_CREATED,
)
async def create_session(body: ClassSessionCreate, db: AsyncSession = Depends(get_db)):
    registry = GroupSessionRegistry(db)
    session_id = await registry.create_session(
        body.coach_id, body.start_time, body.end_time, body.group_ids,
    )
    return ClassSessionResponse.model_validate(await registry.get_session(session_id))


@router.get("/{session_id}", response_model=ClassSessionResponse)
async def get_session(session_id: int, db: AsyncSession = Depends(get_db)):
    session = await GroupSessionRegistry(db).get_session(session_id)
    return ClassSessionResponse.model_validate(session)


@router.get("/{session_id}/members", response_model=MembersResponse)
async def active_members(session_id: int, db: AsyncSession = Depends(get_db)):
    members = await GroupSessionRegistry(db).active_members(session_id)
    return MembersResponse(person_ids=sorted(members))


@router.post(
    "/{session_id}/attendance", response_model=AttendanceRecordedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_attendance(
    session_id: int, body: AttendanceCreate, db: AsyncSession = Depends(get_db),
):
    recorded = await AttendanceLedger(db).record_attendance(
        session_id, body.person_id, body.status, body.description,
    )
    return AttendanceRecordedResponse(
        id=recorded.attendance_id, warnings=list(recorded.warnings),
    )


@router.put("/{session_id}/attendance/{person_id}", response_model=AttendanceResponse)
async def update_attendance(
    session_id: int,
    person_id: int,
    body: AttendanceUpdate,
    db: AsyncSession = Depends(get_db),
):
    record = await AttendanceLedger(db).update_attendance(
        session_id, person_id, body.status, body.description,
    )
    return AttendanceResponse.model_validate(record)


@router.get("/{session_id}/attendance", response_model=list[AttendanceResponse])
async def list_attendance(session_id: int, db: AsyncSession = Depends(get_db)):
    records = await AttendanceLedger(db).session_attendance(session_id)
    return [AttendanceResponse.model_validate(r) for r in records]
