"""Group ORM: a named training group (e.g. "Kids", "Adults Advanced")."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tkd_core.db.base import Base, table_name


class Group(Base):
    __tablename__ = table_name("groups")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
