"""Rank Ladder Service: ranks, their ladder links and their requirements.

Invariants:
    - Every write runs in one transaction (services/transaction.atomic)
    - Ladder links validated before write by core/enforce_ladder.py; neighbors
      relinked in the same transaction as the insert/delete
    - requirements_for returns requirements in insertion order
    - delete_rank relies on ON DELETE CASCADE for requirements, progress,
      promotions and persons at that rank
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.domain_types import NO_RANK, RankId, RequirementId
from tkd_core.core.enforce_ladder import (
    RankLink, ladder_order, plan_insertion, plan_removal,
)
from tkd_core.core.enforce_levels import check_level_range
from tkd_core.core.errors import ValidationError
from tkd_core.models.rank import Rank
from tkd_core.models.rank_requirement import RankRequirement
from tkd_core.services.lookups import require_rank
from tkd_core.services.transaction import atomic

logger = logging.getLogger(__name__)


class RankLadder:
    """Maintains the ordered set of ranks and their requirements."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Writes ──────────────────────────────────────────────────

    async def add_rank(
        self, name: str, predecessor: str | None = None, successor: str | None = None,
    ) -> RankId:
        """Splice a new rank between two adjacent ranks (or at a ladder end)."""
        name = (name or "").strip()
        async with atomic(self.db, "add_rank"):
            links = await self._links(lock=True)
            new_link, *neighbors = plan_insertion(links, name, predecessor, successor)
            rank = Rank(
                name=new_link.name,
                prev_rank=new_link.prev_rank,
                next_rank=new_link.next_rank,
            )
            self.db.add(rank)
            await self.db.flush()
            await self._write_links(neighbors)
        logger.info(
            f"Rank '{rank.name}' added between '{rank.prev_rank}' and '{rank.next_rank}'",
            extra={"rank_id": rank.id},
        )
        return RankId(rank.id)

    async def add_requirement(
        self, rank_id: int, name: str, level_needed: int, time_required: bool = False,
    ) -> RequirementId:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Requirement name cannot be empty", "name")
        check_level_range(level_needed, "level_needed")
        async with atomic(self.db, "add_requirement"):
            await require_rank(self.db, rank_id, lock=True)
            duplicate = await self.db.scalar(
                select(RankRequirement.id)
                .where(RankRequirement.rank_id == rank_id)
                .where(RankRequirement.name == name),
            )
            if duplicate is not None:
                raise ValidationError(
                    f"Rank {rank_id} already has a requirement named '{name}'", "name",
                )
            requirement = RankRequirement(
                rank_id=rank_id, name=name,
                level_needed=level_needed, is_time_required=time_required,
            )
            self.db.add(requirement)
            await self.db.flush()
        logger.info(
            f"Requirement '{name}' (level {level_needed}) added",
            extra={"rank_id": rank_id},
        )
        return RequirementId(requirement.id)

    async def delete_rank(self, rank_id: int) -> None:
        """Delete a rank, close the ladder over it and cascade its dependents."""
        async with atomic(self.db, "delete_rank"):
            rank = await require_rank(self.db, rank_id, lock=True)
            links = await self._links(lock=True)
            neighbors = plan_removal(links, rank.name)
            await self.db.execute(delete(Rank).where(Rank.id == rank_id))
            await self._write_links(neighbors)
        # cascaded rows are gone from the store; drop them from the identity map
        self.db.expunge_all()
        logger.info(f"Rank '{rank.name}' deleted", extra={"rank_id": rank_id})

    # ─── Reads ───────────────────────────────────────────────────

    async def get_rank(self, rank_id: int) -> Rank:
        return await require_rank(self.db, rank_id)

    async def next_rank(self, rank_id: int) -> RankId | None:
        """Id of the ladder successor, or None at the top of the ladder."""
        rank = await require_rank(self.db, rank_id)
        if rank.next_rank == NO_RANK:
            return None
        successor_id = await self.db.scalar(
            select(Rank.id).where(Rank.name == rank.next_rank),
        )
        return RankId(successor_id) if successor_id is not None else None

    async def requirements_for(self, rank_id: int) -> list[RankRequirement]:
        await require_rank(self.db, rank_id)
        result = await self.db.execute(
            select(RankRequirement)
            .where(RankRequirement.rank_id == rank_id)
            .order_by(RankRequirement.id),
        )
        return list(result.scalars().all())

    async def ladder(self) -> list[Rank]:
        """All ranks, first to last."""
        result = await self.db.execute(select(Rank))
        by_name = {rank.name: rank for rank in result.scalars().all()}
        links = {
            name: RankLink(name, rank.prev_rank, rank.next_rank)
            for name, rank in by_name.items()
        }
        return [by_name[name] for name in ladder_order(links)]

    # ─── Helpers ─────────────────────────────────────────────────

    async def _links(self, lock: bool = False) -> dict[str, RankLink]:
        query = select(Rank.name, Rank.prev_rank, Rank.next_rank)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return {
            row.name: RankLink(row.name, row.prev_rank, row.next_rank)
            for row in result
        }

    async def _write_links(self, links: list[RankLink]) -> None:
        for link in links:
            await self.db.execute(
                update(Rank)
                .where(Rank.name == link.name)
                .values(prev_rank=link.prev_rank, next_rank=link.next_rank),
            )
