"""Entity Lookups: fetch-or-raise helpers shared by the services.

Invariants:
    - Missing entities raise NotFoundError (never return None)
    - Rows are re-read from the store (populate_existing), not served stale from
      the identity map
    - lock=True takes a row lock (SELECT ... FOR UPDATE) where the dialect supports it
"""

from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.errors import NotFoundError
from tkd_core.db.base import Base
from tkd_core.models.class_session import ClassSession
from tkd_core.models.group import Group
from tkd_core.models.person import Person
from tkd_core.models.rank import Rank
from tkd_core.models.rank_promotion import RankPromotion
from tkd_core.models.rank_requirement import RankRequirement

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_raise(
    db: AsyncSession, model: type[ModelT], entity_id: int,
    label: str, lock: bool = False,
) -> ModelT:
    """Fetch `model` by primary key or raise NotFoundError(label, entity_id)."""
    query = (
        select(model)
        .where(model.id == entity_id)
        .execution_options(populate_existing=True)
    )
    if lock:
        query = query.with_for_update()
    entity = (await db.execute(query)).scalar_one_or_none()
    if entity is None:
        raise NotFoundError(label, entity_id)
    return entity


async def require_rank(db: AsyncSession, rank_id: int, lock: bool = False) -> Rank:
    return await get_or_raise(db, Rank, rank_id, "Rank", lock)


async def require_requirement(db: AsyncSession, requirement_id: int) -> RankRequirement:
    return await get_or_raise(db, RankRequirement, requirement_id, "RankRequirement")


async def require_person(db: AsyncSession, person_id: int, lock: bool = False) -> Person:
    return await get_or_raise(db, Person, person_id, "Person", lock)


async def require_promotion(
    db: AsyncSession, promotion_id: int, lock: bool = False,
) -> RankPromotion:
    return await get_or_raise(db, RankPromotion, promotion_id, "RankPromotion", lock)


async def require_group(db: AsyncSession, group_id: int) -> Group:
    return await get_or_raise(db, Group, group_id, "Group")


async def require_session(db: AsyncSession, session_id: int) -> ClassSession:
    return await get_or_raise(db, ClassSession, session_id, "ClassSession")
