"""SQLAlchemy Declarative Base: shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Every table name carries the TABLE_PREFIX of the multi-project schema
"""

from sqlalchemy.orm import DeclarativeBase


TABLE_PREFIX: str = "tkd-core_"


def table_name(name: str) -> str:
    """Physical table name for a logical table (e.g. "ranks" -> "tkd-core_ranks")."""
    return f"{TABLE_PREFIX}{name}"


class Base(DeclarativeBase):
    """Base class for all tkd-core ORM models."""
    pass
