"""Schedule Enforcement: class-session windows and group membership periods.

Invariants:
    - A class session ends strictly after it starts
    - A class session is attached to at least one group
    - A membership is removed no earlier than it was joined
"""

from datetime import datetime
from typing import Iterable

from tkd_core.core.domain_types import GroupId, as_utc
from tkd_core.core.errors import ValidationError


def check_session_window(
    start: datetime, end: datetime, group_ids: Iterable[GroupId],
) -> list[GroupId]:
    """Validate a session request. Returns the distinct group ids in given order."""
    if as_utc(end) <= as_utc(start):
        raise ValidationError("Session end time must be after its start time", "end")
    distinct = list(dict.fromkeys(group_ids))
    if not distinct:
        raise ValidationError("A session needs at least one group", "group_ids")
    return distinct


def check_removal(joined_at: datetime, removed_at: datetime) -> None:
    if as_utc(removed_at) < as_utc(joined_at):
        raise ValidationError(
            "Membership cannot be removed before it was joined", "removed_at",
        )
