"""Person Registry: registration, current rank and requirement progress.

Invariants:
    - A registered person starts at the given rank
    - One identity user may own several persons
    - Levels never decrease; re-recording the same level is a no-op
"""

import pytest

from tkd_core.core.errors import NotFoundError, ValidationError
from tkd_core.services.person_registry import PersonRegistry


async def test_register_sets_initial_rank(test_db, ladder, student):
    assert await PersonRegistry(test_db).current_rank(student) == ladder["white"]


async def test_register_persists_profile(test_db, student):
    person = await PersonRegistry(test_db).get_person(student)
    assert person.full_name == "Ana Silva"
    assert person.user_id == "student-user"
    assert person.is_coach is False
    assert person.created_at is not None


async def test_register_strips_names(test_db, ladder, profile_factory):
    registry = PersonRegistry(test_db)
    person_id = await registry.register_person(
        "user-9", profile_factory("  Bruno ", " Costa "), ladder["white"],
    )
    assert (await registry.get_person(person_id)).full_name == "Bruno Costa"


async def test_register_with_unknown_rank(test_db, profile_factory):
    with pytest.raises(NotFoundError) as exc:
        await PersonRegistry(test_db).register_person("user-1", profile_factory(), 77)
    assert exc.value.resource_type == "Rank"


async def test_register_requires_identity_user(test_db, ladder, profile_factory):
    with pytest.raises(ValidationError) as exc:
        await PersonRegistry(test_db).register_person(
            "  ", profile_factory(), ladder["white"],
        )
    assert exc.value.field == "user_id"


async def test_one_user_owns_coach_and_student(test_db, ladder, profile_factory):
    registry = PersonRegistry(test_db)
    as_coach = await registry.register_person(
        "user-5", profile_factory(), ladder["yellow"], is_coach=True,
    )
    as_student = await registry.register_person(
        "user-5", profile_factory(), ladder["white"],
    )
    persons = await registry.persons_for_user("user-5")
    assert [p.id for p in persons] == [as_coach, as_student]
    assert [p.is_coach for p in persons] == [True, False]


async def test_current_rank_of_unknown_person(test_db):
    with pytest.raises(NotFoundError) as exc:
        await PersonRegistry(test_db).current_rank(123)
    assert exc.value.resource_type == "Person"


# ─── Requirement levels ──────────────────────────────────────────

async def test_record_first_level(test_db, ladder, student):
    registry = PersonRegistry(test_db)
    await registry.record_requirement_level(student, ladder["kicks"], 2)
    assert await registry.requirement_levels(student) == {ladder["kicks"]: 2}


async def test_record_higher_level(test_db, ladder, student):
    registry = PersonRegistry(test_db)
    await registry.record_requirement_level(student, ladder["kicks"], 1)
    await registry.record_requirement_level(student, ladder["kicks"], 3)
    assert await registry.requirement_levels(student) == {ladder["kicks"]: 3}


async def test_same_level_is_noop(test_db, ladder, student):
    registry = PersonRegistry(test_db)
    await registry.record_requirement_level(student, ladder["kicks"], 2)
    await registry.record_requirement_level(student, ladder["kicks"], 2)
    assert await registry.requirement_levels(student) == {ladder["kicks"]: 2}


async def test_lower_level_is_rejected(test_db, ladder, student):
    registry = PersonRegistry(test_db)
    await registry.record_requirement_level(student, ladder["kicks"], 3)
    with pytest.raises(ValidationError, match="cannot decrease"):
        await registry.record_requirement_level(student, ladder["kicks"], 1)
    assert await registry.requirement_levels(student) == {ladder["kicks"]: 3}


async def test_negative_level_is_rejected(test_db, ladder, student):
    with pytest.raises(ValidationError):
        await PersonRegistry(test_db).record_requirement_level(
            student, ladder["kicks"], -1,
        )


async def test_level_for_unknown_requirement(test_db, student):
    with pytest.raises(NotFoundError) as exc:
        await PersonRegistry(test_db).record_requirement_level(student, 999, 1)
    assert exc.value.resource_type == "RankRequirement"


async def test_level_for_unknown_person(test_db, ladder):
    with pytest.raises(NotFoundError) as exc:
        await PersonRegistry(test_db).record_requirement_level(999, ladder["kicks"], 1)
    assert exc.value.resource_type == "Person"
