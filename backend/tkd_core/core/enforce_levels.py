"""Requirement Level Enforcement: pure checks for leveled requirements.

Invariants:
    - Levels are integers in [0, MAX_LEVEL]
    - A recorded level never decreases for a (person, requirement) pair
"""

from tkd_core.core.domain_types import MAX_LEVEL
from tkd_core.core.errors import ValidationError


def check_level_range(level: int, field: str = "level") -> None:
    """Reject levels outside the smallint range the schema stores."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise ValidationError(f"{field} must be an integer", field)
    if level < 0:
        raise ValidationError(f"{field} cannot be negative (got {level})", field)
    if level > MAX_LEVEL:
        raise ValidationError(f"{field} cannot exceed {MAX_LEVEL} (got {level})", field)


def check_level_update(current: int | None, new: int) -> bool:
    """Validate a level update. Returns False when nothing needs writing."""
    check_level_range(new)
    if current is None:
        return True
    if new < current:
        raise ValidationError(
            f"Requirement level cannot decrease (recorded {current}, got {new})",
            "level",
        )
    return new != current
