"""Attendance ORM: status of one person at one class session.

Invariants:
    - At most one record per (session, person)
    - status is one of the attendance_status enum values

Design Decisions:
    - Enum stores member values ("present"), matching the attendance_status type
"""

from sqlalchemy import Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.core.domain_types import AttendanceStatus
from tkd_core.db.base import Base, table_name


attendance_status_enum = Enum(
    AttendanceStatus,
    name="attendance_status",
    values_callable=lambda members: [m.value for m in members],
)


class Attendance(Base):
    """Attendance record for a (session, person) pair."""
    __tablename__ = table_name("attendance")
    __table_args__ = (
        UniqueConstraint("session_id", "person_id", name="attendance_session_person_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('classSession')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    person_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[AttendanceStatus] = mapped_column(
        attendance_status_enum, nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
