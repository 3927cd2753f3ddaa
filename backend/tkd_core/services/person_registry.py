"""Person Registry: persons, their identity users, and requirement progress.

Invariants:
    - One identity user may own any number of persons (e.g. coach and student)
    - A person's initial rank must exist; after registration only the promotion
      evaluator writes currentRank
    - Requirement levels never decrease (core/enforce_levels.py)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.domain_types import PersonId, RankId, RequirementId
from tkd_core.core.enforce_levels import check_level_range, check_level_update
from tkd_core.core.errors import ValidationError
from tkd_core.core.person_profile import PersonProfile, normalize_profile
from tkd_core.models.person import Person
from tkd_core.models.rank_requirement_person import RankRequirementPerson
from tkd_core.services.lookups import (
    require_person, require_rank, require_requirement,
)
from tkd_core.services.transaction import atomic

logger = logging.getLogger(__name__)


class PersonRegistry:
    """Maps identity users to person records and tracks requirement levels."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_person(
        self,
        identity_user_id: str,
        profile: PersonProfile,
        initial_rank_id: int,
        is_coach: bool = False,
    ) -> PersonId:
        identity_user_id = (identity_user_id or "").strip()
        if not identity_user_id:
            raise ValidationError("Identity user id cannot be empty", "user_id")
        profile = normalize_profile(profile)
        async with atomic(self.db, "register_person"):
            await require_rank(self.db, initial_rank_id)
            person = Person(
                user_id=identity_user_id,
                first_name=profile.first_name,
                last_name=profile.last_name,
                birth_date=profile.birth_date,
                height=profile.height,
                weight=profile.weight,
                current_rank_id=initial_rank_id,
                is_coach=is_coach,
            )
            self.db.add(person)
            await self.db.flush()
        logger.info(
            f"Registered {'coach' if is_coach else 'student'} {person.full_name}",
            extra={"person_id": person.id, "rank_id": initial_rank_id},
        )
        return PersonId(person.id)

    async def record_requirement_level(
        self, person_id: int, requirement_id: int, level: int,
    ) -> None:
        """Record a new level for a requirement. Lowering a level is rejected."""
        check_level_range(level)
        async with atomic(self.db, "record_requirement_level"):
            await require_person(self.db, person_id)
            await require_requirement(self.db, requirement_id)
            progress = (await self.db.execute(
                select(RankRequirementPerson)
                .where(RankRequirementPerson.person_id == person_id)
                .where(RankRequirementPerson.requirement_id == requirement_id)
                .execution_options(populate_existing=True)
                .with_for_update(),
            )).scalar_one_or_none()
            current = progress.level if progress else None
            if not check_level_update(current, level):
                return
            if progress is None:
                self.db.add(RankRequirementPerson(
                    person_id=person_id, requirement_id=requirement_id, level=level,
                ))
            else:
                progress.level = level
            await self.db.flush()
        logger.info(
            f"Requirement {requirement_id} level {current} -> {level}",
            extra={"person_id": person_id},
        )

    async def current_rank(self, person_id: int) -> RankId:
        rank_id = await self.db.scalar(
            select(Person.current_rank_id).where(Person.id == person_id),
        )
        if rank_id is None:
            await require_person(self.db, person_id)
        return RankId(rank_id)

    async def get_person(self, person_id: int) -> Person:
        return await require_person(self.db, person_id)

    async def persons_for_user(self, identity_user_id: str) -> list[Person]:
        result = await self.db.execute(
            select(Person).where(Person.user_id == identity_user_id).order_by(Person.id),
        )
        return list(result.scalars().all())

    async def requirement_levels(self, person_id: int) -> dict[RequirementId, int]:
        await require_person(self.db, person_id)
        result = await self.db.execute(
            select(RankRequirementPerson.requirement_id, RankRequirementPerson.level)
            .where(RankRequirementPerson.person_id == person_id),
        )
        return {RequirementId(row.requirement_id): row.level for row in result}
