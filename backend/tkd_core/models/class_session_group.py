"""ClassSessionGroup ORM: attaches a group to a class session."""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class ClassSessionGroup(Base):
    __tablename__ = table_name("classSessionGroup")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('classSession')}.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{table_name('groups')}.id", ondelete="CASCADE"),
        nullable=False,
    )
