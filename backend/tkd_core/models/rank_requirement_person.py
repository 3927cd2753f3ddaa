"""RankRequirementPerson ORM: a person's recorded level against one requirement.

Invariants:
    - At most one row per (requirement, person)
    - level never decreases (enforced by core/enforce_levels.py on write)
"""

from sqlalchemy import ForeignKey, Integer, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class RankRequirementPerson(Base):
    """Progress record of a person against a rank requirement."""
    __tablename__ = table_name("rankRequirementPerson")
    __table_args__ = (
        UniqueConstraint(
            "requirement_id", "person_id",
            name="rank_requirement_person_key",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    requirement_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('rankRequirement')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    person_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('persons')}.id", ondelete="CASCADE"),
        nullable=False,
    )
    level: Mapped[int] = mapped_column(SmallInteger, nullable=False)
