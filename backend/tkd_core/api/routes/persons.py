"""Person Routes: registration, current rank, requirement levels, eligibility.

Invariants:
    - A person registered without user_id is owned by the authenticated user
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.api.deps import get_promotion_policy, require_user
from tkd_core.core.domain_types import UserId
from tkd_core.core.eligibility import PromotionPolicy
from tkd_core.infrastructure.database import get_db
from tkd_core.schemas.person import (
    PersonCreate, PersonResponse, RequirementLevelUpdate, RequirementLevelsResponse,
)
from tkd_core.schemas.promotion import EligibilityResponse, PromotionResponse
from tkd_core.services.person_registry import PersonRegistry
from tkd_core.services.promotion_evaluator import PromotionEvaluator

router = APIRouter(prefix="/api/v1/persons", tags=["persons"])


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def register_person(
    body: PersonCreate,
    user_id: UserId = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    registry = PersonRegistry(db)
    person_id = await registry.register_person(
        body.user_id or user_id, body.to_profile(), body.rank_id, body.is_coach,
    )
    return PersonResponse.model_validate(await registry.get_person(person_id))


@router.get("/me", response_model=list[PersonResponse])
async def my_persons(
    user_id: UserId = Depends(require_user), db: AsyncSession = Depends(get_db),
):
    """Persons owned by the authenticated user (e.g. a coach and a student record)."""
    persons = await PersonRegistry(db).persons_for_user(user_id)
    return [PersonResponse.model_validate(p) for p in persons]


@router.get(
    "/{person_id}", response_model=PersonResponse,
    dependencies=[Depends(require_user)],
)
async def get_person(person_id: int, db: AsyncSession = Depends(get_db)):
    return PersonResponse.model_validate(await PersonRegistry(db).get_person(person_id))


@router.put(
    "/{person_id}/requirements/{requirement_id}",
    response_model=RequirementLevelsResponse,
    dependencies=[Depends(require_user)],
)
async def record_requirement_level(
    person_id: int,
    requirement_id: int,
    body: RequirementLevelUpdate,
    db: AsyncSession = Depends(get_db),
):
    registry = PersonRegistry(db)
    await registry.record_requirement_level(person_id, requirement_id, body.level)
    return RequirementLevelsResponse(
        person_id=person_id, levels=await registry.requirement_levels(person_id),
    )


@router.get(
    "/{person_id}/eligibility", response_model=EligibilityResponse,
    dependencies=[Depends(require_user)],
)
async def get_eligibility(
    person_id: int,
    db: AsyncSession = Depends(get_db),
    policy: PromotionPolicy = Depends(get_promotion_policy),
):
    eligibility = await PromotionEvaluator(db, policy).evaluate_promotion(person_id)
    return EligibilityResponse.from_eligibility(eligibility)


@router.get(
    "/{person_id}/promotions", response_model=list[PromotionResponse],
    dependencies=[Depends(require_user)],
)
async def promotion_history(
    person_id: int,
    db: AsyncSession = Depends(get_db),
    policy: PromotionPolicy = Depends(get_promotion_policy),
):
    promotions = await PromotionEvaluator(db, policy).promotion_history(person_id)
    return [PromotionResponse.model_validate(p) for p in promotions]
