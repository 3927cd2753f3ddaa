"""Group, Class Session & Attendance Schemas.

Invariants:
    - ClassSessionCreate: end > start and >= 1 group (also enforced by the registry)
    - AttendanceStatus values only: present, absent, excused
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tkd_core.core.domain_types import AttendanceStatus, as_utc


class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class MembershipCreate(BaseModel):
    person_id: int = Field(ge=1)
    joined_at: datetime | None = None


class MembersResponse(BaseModel):
    person_ids: list[int]


class ClassSessionCreate(BaseModel):
    coach_id: int = Field(ge=1)
    start_time: datetime
    end_time: datetime
    group_ids: list[int] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_window(self):
        if as_utc(self.end_time) <= as_utc(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class ClassSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    coach_id: int
    start_time: datetime
    end_time: datetime
    group_ids: list[int]


class AttendanceCreate(BaseModel):
    person_id: int = Field(ge=1)
    status: AttendanceStatus
    description: str | None = Field(None, max_length=2000)


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus
    description: str | None = Field(None, max_length=2000)


class AttendanceRecordedResponse(BaseModel):
    id: int
    warnings: list[str] = []


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    person_id: int
    status: AttendanceStatus
    description: str | None
