"""ClassSession ORM: a class taught by a coach to one or more groups.

Invariants:
    - end_time > start_time
    - Attached to >= 1 group through ClassSessionGroup
    - Deleting the coach cascades to the session, its group links and attendance
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tkd_core.db.base import Base, table_name


class ClassSession(Base):
    """Class session entity."""
    __tablename__ = table_name("classSession")
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="class_session_window_check"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    end_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    coach_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False,
    )

    group_links: Mapped[list["ClassSessionGroup"]] = relationship(
        "ClassSessionGroup", cascade="all, delete-orphan",
        passive_deletes=True, lazy="selectin",
    )

    @property
    def group_ids(self) -> list[int]:
        return [link.group_id for link in self.group_links]
