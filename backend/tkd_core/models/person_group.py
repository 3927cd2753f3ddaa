"""PersonGroup ORM: membership period of a person in a group.

Invariants:
    - created_at is the join time; removed_at, if set, is >= created_at
    - A membership is active iff removed_at is null
    - At most one active membership per (person, group), enforced by the registry
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class PersonGroup(Base):
    """Person-to-group association with join and removal times."""
    __tablename__ = table_name("personGroup")
    __table_args__ = (
        CheckConstraint(
            "removed_at IS NULL OR removed_at >= created_at",
            name="person_group_removed_after_joined",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        "personId", Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    group_id: Mapped[int] = mapped_column(
        "groupId", Integer,
        ForeignKey(f"{table_name('groups')}.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    removed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
