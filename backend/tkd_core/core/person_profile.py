"""Person Profile: the biometric/profile attributes supplied at registration.

Invariants:
    - Names are non-empty after stripping
    - Height and weight are positive integers
    - Birth date is not in the future
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from tkd_core.core.domain_types import as_utc
from tkd_core.core.errors import ValidationError


@dataclass(frozen=True)
class PersonProfile:
    first_name: str
    last_name: str
    birth_date: datetime
    height: int
    weight: int


def normalize_profile(profile: PersonProfile, now: datetime | None = None) -> PersonProfile:
    """Validate a profile and return it with names stripped."""
    first_name = (profile.first_name or "").strip()
    last_name = (profile.last_name or "").strip()
    if not first_name:
        raise ValidationError("First name cannot be empty", "first_name")
    if not last_name:
        raise ValidationError("Last name cannot be empty", "last_name")
    for field in ("height", "weight"):
        value = getattr(profile, field)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(f"{field} must be a positive integer", field)
    if as_utc(profile.birth_date) > as_utc(now or datetime.now(timezone.utc)):
        raise ValidationError("Birth date cannot be in the future", "birth_date")
    return replace(profile, first_name=first_name, last_name=last_name)
