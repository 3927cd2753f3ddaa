"""RankRequirement ORM: a named, leveled criterion to pass out of a rank.

Invariants:
    - Belongs to exactly one Rank (rankId FK, cascade on delete)
    - name unique within its rank
    - levelNeeded >= 0
"""

from sqlalchemy import (
    Boolean, CheckConstraint, ForeignKey, Integer, SmallInteger, String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tkd_core.db.base import Base, table_name


class RankRequirement(Base):
    """Requirement a person must meet to be promoted out of a rank."""
    __tablename__ = table_name("rankRequirement")
    __table_args__ = (
        UniqueConstraint("rankId", "name", name="rank_requirement_rank_name_key"),
        CheckConstraint('"levelNeeded" >= 0', name="rank_requirement_level_check"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rank_id: Mapped[int] = mapped_column(
        "rankId", Integer,
        ForeignKey(f"{table_name('ranks')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    level_needed: Mapped[int] = mapped_column(
        "levelNeeded", SmallInteger, nullable=False,
    )
    is_time_required: Mapped[bool | None] = mapped_column(
        "isTimeRequired", Boolean, default=False,
    )

    rank: Mapped["Rank"] = relationship("Rank", back_populates="requirements")
