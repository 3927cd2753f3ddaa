"""Promotion Eligibility: pure readiness computation for a person's current rank.

Invariants:
    - evaluate_eligibility is PURE: same inputs, same Eligibility, no IO
    - A requirement is met when recorded level >= level_needed (unrecorded counts as 0)
    - Time-required requirements also need time in grade >= policy.min_time_in_grade
    - ready iff no requirement is missing
    - missing_requirements keeps the requirement insertion order

Design Decisions:
    - PromotionPolicy passed in explicitly instead of read from settings
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from tkd_core.core.domain_types import (
    PersonId, RankId, RequirementId, as_utc,
)


DEFAULT_MIN_TIME_IN_GRADE: timedelta = timedelta(days=90)


@dataclass(frozen=True)
class PromotionPolicy:
    """Tunable thresholds for promotion evaluation."""
    min_time_in_grade: timedelta = DEFAULT_MIN_TIME_IN_GRADE


@dataclass(frozen=True)
class RequirementSnapshot:
    """The fields of a rank requirement that eligibility depends on."""
    id: RequirementId
    name: str
    level_needed: int
    time_required: bool = False


@dataclass(frozen=True)
class Eligibility:
    """Readiness of a person for promotion out of their current rank."""
    person_id: PersonId
    from_rank_id: RankId
    to_rank_id: RankId | None
    missing_requirements: tuple[RequirementId, ...] = ()
    missing_names: tuple[str, ...] = ()

    @property
    def ready(self) -> bool:
        return not self.missing_requirements


def time_in_grade_met(
    rank_reached_at: datetime, now: datetime, policy: PromotionPolicy,
) -> bool:
    return as_utc(now) - as_utc(rank_reached_at) >= policy.min_time_in_grade


def evaluate_eligibility(
    person_id: PersonId,
    from_rank_id: RankId,
    to_rank_id: RankId | None,
    requirements: Sequence[RequirementSnapshot],
    levels: dict[RequirementId, int],
    rank_reached_at: datetime,
    now: datetime,
    policy: PromotionPolicy,
) -> Eligibility:
    """Compare recorded levels (and time in grade) against every requirement."""
    time_ok = time_in_grade_met(rank_reached_at, now, policy)
    missing = [
        req for req in requirements
        if levels.get(req.id, 0) < req.level_needed
        or (req.time_required and not time_ok)
    ]
    return Eligibility(
        person_id=person_id,
        from_rank_id=from_rank_id,
        to_rank_id=to_rank_id,
        missing_requirements=tuple(req.id for req in missing),
        missing_names=tuple(req.name for req in missing),
    )
