"""Rank Schemas: request/response models for the rank ladder endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RankCreate(BaseModel):
    """New rank, spliced after `predecessor` and/or before `successor`."""
    name: str = Field(min_length=1, max_length=250)
    predecessor: str | None = Field(None, max_length=250)
    successor: str | None = Field(None, max_length=250)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class RankResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    prev_rank: str
    next_rank: str


class NextRankResponse(BaseModel):
    rank_id: int
    next_rank_id: int | None


class RequirementCreate(BaseModel):
    name: str = Field(min_length=1, max_length=250)
    level_needed: int = Field(ge=0, le=32767)
    time_required: bool = False


class RequirementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rank_id: int
    name: str
    level_needed: int
    is_time_required: bool | None = False
