"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every foreign key cascades on delete of its referent

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references resolve
      before any query runs
"""

from tkd_core.models.rank import Rank  # noqa: F401
from tkd_core.models.rank_requirement import RankRequirement  # noqa: F401
from tkd_core.models.person import Person  # noqa: F401
from tkd_core.models.rank_requirement_person import RankRequirementPerson  # noqa: F401
from tkd_core.models.rank_promotion import RankPromotion  # noqa: F401
from tkd_core.models.group import Group  # noqa: F401
from tkd_core.models.person_group import PersonGroup  # noqa: F401
from tkd_core.models.class_session import ClassSession  # noqa: F401
from tkd_core.models.class_session_group import ClassSessionGroup  # noqa: F401
from tkd_core.models.attendance import Attendance  # noqa: F401
