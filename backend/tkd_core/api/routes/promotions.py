"""Promotion Routes: attempt a promotion, decide a pending one."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.api.deps import get_promotion_policy, require_user
from tkd_core.core.eligibility import PromotionPolicy
from tkd_core.infrastructure.database import get_db
from tkd_core.schemas.promotion import (
    PromotionAttempt, PromotionDecision, PromotionResponse,
)
from tkd_core.services.lookups import require_promotion
from tkd_core.services.promotion_evaluator import PromotionEvaluator

router = APIRouter(
    prefix="/api/v1/promotions", tags=["promotions"],
    dependencies=[Depends(require_user)],
)


@router.post("", response_model=PromotionResponse, status_code=status.HTTP_201_CREATED)
async def attempt_promotion(
    body: PromotionAttempt,
    db: AsyncSession = Depends(get_db),
    policy: PromotionPolicy = Depends(get_promotion_policy),
):
    promotion_id = await PromotionEvaluator(db, policy).attempt_promotion(
        body.coach_id, body.student_id, body.observations,
        override=body.override, decision=body.decision,
    )
    return PromotionResponse.model_validate(await require_promotion(db, promotion_id))


@router.post("/{promotion_id}/decision", response_model=PromotionResponse)
async def decide_promotion(
    promotion_id: int,
    body: PromotionDecision,
    db: AsyncSession = Depends(get_db),
    policy: PromotionPolicy = Depends(get_promotion_policy),
):
    promotion = await PromotionEvaluator(db, policy).decide_promotion(
        promotion_id, body.success,
    )
    return PromotionResponse.model_validate(promotion)
