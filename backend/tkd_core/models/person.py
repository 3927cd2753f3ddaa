"""Person ORM: a coach or student known to the academy.

Invariants:
    - currentRank always references an existing Rank (FK, cascade on delete)
    - user_id is the identity provider's opaque user id; one user may own many persons
    - A coach (isCoach) may also be promoted as a student

Design Decisions:
    - user_id carries no FK: the user table belongs to the identity provider
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class Person(Base):
    """Person entity: profile, owning user and current rank."""
    __tablename__ = table_name("persons")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column("firstName", String(200), nullable=False)
    last_name: Mapped[str] = mapped_column("lastName", String(200), nullable=False)
    height: Mapped[int] = mapped_column(BigInteger, nullable=False)
    weight: Mapped[int] = mapped_column(BigInteger, nullable=False)
    current_rank_id: Mapped[int] = mapped_column(
        "currentRank", Integer,
        ForeignKey(f"{table_name('ranks')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        "created_at", DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    user_id: Mapped[str] = mapped_column("user_id", Text, nullable=False, index=True)
    is_coach: Mapped[bool] = mapped_column(
        "isCoach", Boolean, nullable=False, default=False,
    )
    birth_date: Mapped[datetime] = mapped_column(
        "birthDate", DateTime(timezone=True), nullable=False,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
