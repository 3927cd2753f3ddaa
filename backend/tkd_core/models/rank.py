"""Rank ORM: one grade in the progression ladder.

Invariants:
    - name is unique across the ladder
    - prevRank/nextRank hold a neighbor's name or "none" at the ladder ends
    - Deleting a rank cascades to its requirements, promotions and the persons holding it

Design Decisions:
    - Neighbor names (not ids) stored, as in the persisted schema; consistency is
      checked on write by core/enforce_ladder.py
"""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tkd_core.core.domain_types import NO_RANK
from tkd_core.db.base import Base, table_name


class Rank(Base):
    """Rank entity: a named grade with a predecessor and a successor."""
    __tablename__ = table_name("ranks")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False, unique=True)
    prev_rank: Mapped[str] = mapped_column(
        "prevRank", String(250), nullable=False, default=NO_RANK,
    )
    next_rank: Mapped[str] = mapped_column(
        "nextRank", String(250), nullable=False, default=NO_RANK,
    )

    requirements: Mapped[list["RankRequirement"]] = relationship(
        "RankRequirement", back_populates="rank",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="RankRequirement.id", lazy="selectin",
    )
