"""Promotion Schemas: eligibility, attempt and decision payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tkd_core.core.eligibility import Eligibility


class EligibilityResponse(BaseModel):
    person_id: int
    from_rank_id: int
    to_rank_id: int | None
    ready: bool
    missing_requirements: list[int]
    missing_names: list[str]

    @classmethod
    def from_eligibility(cls, eligibility: Eligibility) -> "EligibilityResponse":
        return cls(
            person_id=eligibility.person_id,
            from_rank_id=eligibility.from_rank_id,
            to_rank_id=eligibility.to_rank_id,
            ready=eligibility.ready,
            missing_requirements=list(eligibility.missing_requirements),
            missing_names=list(eligibility.missing_names),
        )


class PromotionAttempt(BaseModel):
    """A coach's promotion attempt. decision=None records it as pending."""
    coach_id: int = Field(ge=1)
    student_id: int = Field(ge=1)
    observations: str | None = Field(None, max_length=5000)
    override: bool = False
    decision: bool | None = None


class PromotionDecision(BaseModel):
    success: bool


class PromotionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    from_rank_id: int
    to_rank_id: int
    coach_id: int
    student_id: int
    success: bool | None
    observations: str | None
    created_at: datetime
    decided_at: datetime | None
