"""Domain Types: identity types and enums shared across the codebase.

Invariants:
    - Entity ids are integer identities assigned by the store
    - UserId is an opaque string issued by the identity provider
    - NO_RANK is the ladder-end sentinel stored in prevRank/nextRank
    - Level values fit in a smallint column
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RankId = NewType("RankId", int)
RequirementId = NewType("RequirementId", int)
PersonId = NewType("PersonId", int)
PromotionId = NewType("PromotionId", int)
GroupId = NewType("GroupId", int)
SessionId = NewType("SessionId", int)
AttendanceId = NewType("AttendanceId", int)
UserId = NewType("UserId", str)


# ─── Constants ───────────────────────────────────────────────────

NO_RANK: str = "none"
MAX_LEVEL: int = 32767


# ─── Enums ───────────────────────────────────────────────────────

class AttendanceStatus(str, Enum):
    """Attendance outcome, persisted as the attendance_status enum."""
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


def as_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
