"""Attendance Ledger: recording and amending attendance.

Invariants:
    - One record per (session, person); a second record is a ConflictError
    - Non-members are recorded with a warning
    - update_attendance only changes an existing record
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from tkd_core.core.domain_types import AttendanceStatus
from tkd_core.core.errors import ConflictError, NotFoundError, ValidationError
from tkd_core.services.attendance_ledger import AttendanceLedger
from tkd_core.services.session_registry import GroupSessionRegistry

START = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
async def class_session(test_db, coach, student):
    """Adults class with the student as its only member."""
    registry = GroupSessionRegistry(test_db)
    group = await registry.create_group("Adults")
    await registry.add_member(group, student)
    return await registry.create_session(coach, START, START + timedelta(hours=1), [group])


async def test_record_member_attendance(test_db, class_session, student):
    ledger = AttendanceLedger(test_db)
    recorded = await ledger.record_attendance(class_session, student, AttendanceStatus.PRESENT)
    assert recorded.warnings == ()
    [record] = await ledger.session_attendance(class_session)
    assert record.id == recorded.attendance_id
    assert record.person_id == student
    assert record.status == AttendanceStatus.PRESENT
    assert record.description is None


async def test_status_accepted_as_string(test_db, class_session, student):
    ledger = AttendanceLedger(test_db)
    await ledger.record_attendance(class_session, student, "excused", "Injured knee")
    [record] = await ledger.session_attendance(class_session)
    assert record.status == AttendanceStatus.EXCUSED
    assert record.description == "Injured knee"


async def test_unknown_status_is_rejected(test_db, class_session, student):
    with pytest.raises(ValidationError) as exc:
        await AttendanceLedger(test_db).record_attendance(class_session, student, "late")
    assert exc.value.field == "status"


async def test_second_record_conflicts(test_db, class_session, student):
    ledger = AttendanceLedger(test_db)
    await ledger.record_attendance(class_session, student, AttendanceStatus.PRESENT)
    with pytest.raises(ConflictError, match="already recorded"):
        await ledger.record_attendance(class_session, student, AttendanceStatus.ABSENT)
    [record] = await ledger.session_attendance(class_session)
    assert record.status == AttendanceStatus.PRESENT


async def test_non_member_recorded_with_warning(test_db, class_session, coach, caplog):
    ledger = AttendanceLedger(test_db)
    with caplog.at_level(logging.WARNING, logger="tkd_core.services.attendance_ledger"):
        recorded = await ledger.record_attendance(class_session, coach, AttendanceStatus.PRESENT)

    assert len(recorded.warnings) == 1
    assert "not an active member" in recorded.warnings[0]
    assert any("not an active member" in r.getMessage() for r in caplog.records)
    assert [r.person_id for r in await ledger.session_attendance(class_session)] == [coach]


async def test_removed_member_gets_warning(test_db, class_session, student):
    registry = GroupSessionRegistry(test_db)
    [group] = (await registry.get_session(class_session)).group_ids
    await registry.remove_member(group, student)
    recorded = await AttendanceLedger(test_db).record_attendance(
        class_session, student, AttendanceStatus.ABSENT,
    )
    assert recorded.warnings


async def test_record_for_unknown_session(test_db, student):
    with pytest.raises(NotFoundError) as exc:
        await AttendanceLedger(test_db).record_attendance(77, student, "present")
    assert exc.value.resource_type == "ClassSession"


async def test_record_for_unknown_person(test_db, class_session):
    with pytest.raises(NotFoundError) as exc:
        await AttendanceLedger(test_db).record_attendance(class_session, 77, "present")
    assert exc.value.resource_type == "Person"


# ─── update_attendance ───────────────────────────────────────────

async def test_update_changes_status_and_description(test_db, class_session, student):
    ledger = AttendanceLedger(test_db)
    await ledger.record_attendance(class_session, student, AttendanceStatus.ABSENT)
    updated = await ledger.update_attendance(
        class_session, student, AttendanceStatus.EXCUSED, "Medical note",
    )
    assert updated.status == AttendanceStatus.EXCUSED
    assert updated.description == "Medical note"
    [record] = await ledger.session_attendance(class_session)
    assert record.status == AttendanceStatus.EXCUSED


async def test_update_without_record_is_not_found(test_db, class_session, student):
    with pytest.raises(NotFoundError) as exc:
        await AttendanceLedger(test_db).update_attendance(
            class_session, student, AttendanceStatus.PRESENT,
        )
    assert exc.value.resource_type == "Attendance"
    assert exc.value.resource_id == f"{class_session}/{student}"
