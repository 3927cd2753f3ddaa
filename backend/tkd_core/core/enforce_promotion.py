"""Promotion Enforcement: preconditions and decision transitions for rank promotions.

Invariants:
    - Only a person with the coach flag may promote
    - A promotion always targets the ladder successor of the student's current rank
    - An unready student is promoted only with override, and the override is noted
    - success moves None -> True/False once; repeating the same decision is a no-op
"""

from tkd_core.core.eligibility import Eligibility
from tkd_core.core.errors import StateError


OVERRIDE_TAG: str = "[override]"


def check_promotion_allowed(
    eligibility: Eligibility, coach_is_coach: bool, override: bool = False,
) -> None:
    """Raise StateError unless this promotion attempt may be recorded."""
    if not coach_is_coach:
        raise StateError("Only coaches can record promotions")
    if eligibility.to_rank_id is None:
        raise StateError(
            f"Person {eligibility.person_id} holds the highest rank; nothing to promote to",
        )
    if not eligibility.ready and not override:
        raise StateError(
            f"Person {eligibility.person_id} is not ready for promotion. "
            f"Missing requirements: {', '.join(eligibility.missing_names)}",
        )


def annotate_observations(
    observations: str | None, eligibility: Eligibility, override: bool,
) -> str | None:
    """Prefix the coach's observations with an override note when override is set."""
    if not override:
        return observations
    if eligibility.missing_names:
        note = (
            f"{OVERRIDE_TAG} promoted with missing requirements: "
            f"{', '.join(eligibility.missing_names)}"
        )
    else:
        note = f"{OVERRIDE_TAG} requested; all requirements met"
    return f"{note}\n{observations}" if observations else note


def needs_decision_write(current: bool | None, requested: bool) -> bool:
    """Return whether `requested` must be written over `current`."""
    if current is None:
        return True
    if current != requested:
        raise StateError(
            f"Promotion already decided as {'successful' if current else 'failed'}",
        )
    return False
