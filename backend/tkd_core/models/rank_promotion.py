"""RankPromotion ORM: one promotion attempt of a student by a coach.

Invariants:
    - fromRank is the student's current rank when the attempt is recorded
    - toRank is the ladder successor of fromRank
    - success: None = pending, True/False = decided; set at most once
    - decided_at is set exactly when success is set

Design Decisions:
    - id, created_at and decided_at added to the persisted columns: promotions are
      addressed by id and decided_at dates the start of time in grade
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class RankPromotion(Base):
    """Promotion attempt between two adjacent ranks."""
    __tablename__ = table_name("rankPromotion")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_rank_id: Mapped[int] = mapped_column(
        "fromRank", Integer,
        ForeignKey(f"{table_name('ranks')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    to_rank_id: Mapped[int] = mapped_column(
        "toRank", Integer,
        ForeignKey(f"{table_name('ranks')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    success: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    observations: Mapped[str | None] = mapped_column(Text, nullable=True)
    coach_id: Mapped[int] = mapped_column(
        "coachId", Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[int] = mapped_column(
        "studentId", Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    decided_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def is_pending(self) -> bool:
        return self.success is None
