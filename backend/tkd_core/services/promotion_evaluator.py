"""Promotion Evaluator: eligibility, promotion attempts and promotion decisions.

Invariants:
    - evaluate_promotion reads only; eligibility math lives in core/eligibility.py
    - A promotion is created from the student's current rank to its ladder successor
    - success is claimed with a compare-and-swap on `success IS NULL`: a promotion
      is decided, and advances its student, at most once
    - Rank advancement is a compare-and-swap on currentRank (expected = fromRank),
      retried once when the re-read still shows fromRank, else ConflictError

Design Decisions:
    - PromotionPolicy injected by the caller (api/deps.py builds it from settings)
    - Rank reached-at = decided_at of the latest successful promotion into the
      current rank, falling back to the person's created_at
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.domain_types import PersonId, PromotionId, RankId
from tkd_core.core.eligibility import (
    Eligibility, PromotionPolicy, RequirementSnapshot, evaluate_eligibility,
)
from tkd_core.core.enforce_promotion import (
    annotate_observations, check_promotion_allowed, needs_decision_write,
)
from tkd_core.core.errors import ConflictError
from tkd_core.models.person import Person
from tkd_core.models.rank_promotion import RankPromotion
from tkd_core.services.lookups import require_person, require_promotion
from tkd_core.services.person_registry import PersonRegistry
from tkd_core.services.rank_ladder import RankLadder
from tkd_core.services.transaction import atomic

logger = logging.getLogger(__name__)

RANK_CAS_ATTEMPTS: int = 2


class PromotionEvaluator:
    """Evaluates readiness and records promotions for (coach, student) pairs."""

    def __init__(self, db: AsyncSession, policy: PromotionPolicy):
        self.db = db
        self.policy = policy
        self.ladder = RankLadder(db)
        self.registry = PersonRegistry(db)

    async def evaluate_promotion(
        self, person_id: int, now: datetime | None = None,
    ) -> Eligibility:
        """Which requirements of the person's current rank are still unmet."""
        person = await require_person(self.db, person_id)
        rank_id = await self.registry.current_rank(person_id)
        requirements = await self.ladder.requirements_for(rank_id)
        return evaluate_eligibility(
            person_id=PersonId(person.id),
            from_rank_id=rank_id,
            to_rank_id=await self.ladder.next_rank(rank_id),
            requirements=[
                RequirementSnapshot(
                    id=req.id, name=req.name, level_needed=req.level_needed,
                    time_required=bool(req.is_time_required),
                )
                for req in requirements
            ],
            levels=await self.registry.requirement_levels(person_id),
            rank_reached_at=await self._rank_reached_at(person, rank_id),
            now=now or datetime.now(timezone.utc),
            policy=self.policy,
        )

    async def attempt_promotion(
        self,
        coach_id: int,
        student_id: int,
        observations: str | None = None,
        override: bool = False,
        decision: bool | None = None,
        now: datetime | None = None,
    ) -> PromotionId:
        """Record a promotion attempt; decide it immediately when `decision` is given."""
        async with atomic(self.db, "attempt_promotion"):
            coach = await require_person(self.db, coach_id)
            eligibility = await self.evaluate_promotion(student_id, now)
            check_promotion_allowed(eligibility, coach.is_coach, override)
            promotion = RankPromotion(
                from_rank_id=eligibility.from_rank_id,
                to_rank_id=eligibility.to_rank_id,
                coach_id=coach_id,
                student_id=student_id,
                observations=annotate_observations(observations, eligibility, override),
            )
            self.db.add(promotion)
            await self.db.flush()
            if decision is not None:
                await self._decide(promotion, decision, now)
        logger.info(
            f"Promotion {eligibility.from_rank_id} -> {eligibility.to_rank_id} recorded "
            f"(override={override}, decision={decision})",
            extra={"promotion_id": promotion.id, "person_id": student_id},
        )
        return PromotionId(promotion.id)

    async def decide_promotion(
        self, promotion_id: int, success: bool, now: datetime | None = None,
    ) -> RankPromotion:
        """Decide a pending promotion. Repeating the same decision is a no-op."""
        async with atomic(self.db, "decide_promotion"):
            promotion = await require_promotion(self.db, promotion_id, lock=True)
            if needs_decision_write(promotion.success, success):
                await self._decide(promotion, success, now)
        return promotion

    async def promotion_history(self, student_id: int) -> list[RankPromotion]:
        await require_person(self.db, student_id)
        result = await self.db.execute(
            select(RankPromotion)
            .where(RankPromotion.student_id == student_id)
            .order_by(RankPromotion.id),
        )
        return list(result.scalars().all())

    # ─── Helpers ─────────────────────────────────────────────────

    async def _decide(
        self, promotion: RankPromotion, success: bool, now: datetime | None,
    ) -> None:
        claimed = await self.db.execute(
            update(RankPromotion)
            .where(RankPromotion.id == promotion.id)
            .where(RankPromotion.success.is_(None))
            .values(success=success, decided_at=now or datetime.now(timezone.utc)),
        )
        if claimed.rowcount == 0:
            current = await self.db.scalar(
                select(RankPromotion.success).where(RankPromotion.id == promotion.id),
            )
            needs_decision_write(current, success)
            return
        if success:
            await self._advance_rank(promotion)
        await self.db.refresh(promotion)

    async def _advance_rank(self, promotion: RankPromotion) -> None:
        """Compare-and-swap the student's currentRank from fromRank to toRank."""
        observed: int | None = promotion.from_rank_id
        for attempt in range(1, RANK_CAS_ATTEMPTS + 1):
            swapped = await self.db.execute(
                update(Person)
                .where(Person.id == promotion.student_id)
                .where(Person.current_rank_id == promotion.from_rank_id)
                .values(current_rank_id=promotion.to_rank_id),
            )
            if swapped.rowcount == 1:
                logger.info(
                    f"Person advanced to rank {promotion.to_rank_id}",
                    extra={
                        "person_id": promotion.student_id,
                        "promotion_id": promotion.id,
                        "attempt": attempt,
                    },
                )
                return
            observed = await self.db.scalar(
                select(Person.current_rank_id).where(Person.id == promotion.student_id),
            )
            logger.warning(
                f"Rank compare-and-swap missed: expected {promotion.from_rank_id}, "
                f"found {observed}",
                extra={
                    "person_id": promotion.student_id,
                    "promotion_id": promotion.id,
                    "attempt": attempt,
                },
            )
            if observed != promotion.from_rank_id:
                break
        raise ConflictError(
            f"Person {promotion.student_id} is no longer at rank "
            f"{promotion.from_rank_id} (found {observed}); promotion not applied",
        )

    async def _rank_reached_at(self, person: Person, rank_id: RankId) -> datetime:
        decided_at = await self.db.scalar(
            select(func.max(RankPromotion.decided_at))
            .where(RankPromotion.student_id == person.id)
            .where(RankPromotion.to_rank_id == rank_id)
            .where(RankPromotion.success.is_(True)),
        )
        return decided_at or person.created_at
