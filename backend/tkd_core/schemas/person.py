"""Person Schemas: registration, profile and requirement-progress payloads.

Invariants:
    - PersonCreate names are stripped and non-empty
    - height/weight strictly positive, birth_date not in the future
    - user_id omitted => the authenticated user owns the new person
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tkd_core.core.domain_types import MAX_LEVEL, as_utc
from tkd_core.core.person_profile import PersonProfile


class PersonCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=200)
    last_name: str = Field(min_length=1, max_length=200)
    birth_date: datetime
    height: int = Field(gt=0)
    weight: int = Field(gt=0)
    rank_id: int = Field(ge=1)
    is_coach: bool = False
    user_id: str | None = Field(None, min_length=1)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("birth_date")
    @classmethod
    def not_in_future(cls, v: datetime) -> datetime:
        if as_utc(v) > datetime.now(timezone.utc):
            raise ValueError("birth_date cannot be in the future")
        return v

    def to_profile(self) -> PersonProfile:
        return PersonProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            birth_date=self.birth_date,
            height=self.height,
            weight=self.weight,
        )


class PersonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    birth_date: datetime
    height: int
    weight: int
    current_rank_id: int
    is_coach: bool
    user_id: str
    created_at: datetime


class RequirementLevelUpdate(BaseModel):
    level: int = Field(ge=0, le=MAX_LEVEL)


class RequirementLevelsResponse(BaseModel):
    person_id: int
    levels: dict[int, int]
