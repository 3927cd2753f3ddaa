"""Rank Ladder Service: persisted ranks, ladder links and requirements.

Invariants:
    - Inserting a rank relinks its neighbors in the same transaction
    - Invalid links leave the ladder untouched
    - next_rank is None at the top of the ladder
    - requirements_for keeps insertion order
"""

import pytest
from sqlalchemy import select

from tkd_core.core.domain_types import NO_RANK
from tkd_core.core.errors import NotFoundError, ValidationError
from tkd_core.models.rank import Rank
from tkd_core.services.rank_ladder import RankLadder


async def _names(db) -> list[str]:
    return [rank.name for rank in await RankLadder(db).ladder()]


async def test_first_rank_has_sentinel_links(test_db):
    ladder = RankLadder(test_db)
    rank_id = await ladder.add_rank("White")
    rank = await ladder.get_rank(rank_id)
    assert rank.prev_rank == NO_RANK
    assert rank.next_rank == NO_RANK


async def test_append_relinks_predecessor(test_db, ladder):
    white = await RankLadder(test_db).get_rank(ladder["white"])
    yellow = await RankLadder(test_db).get_rank(ladder["yellow"])
    assert white.next_rank == "Yellow"
    assert yellow.prev_rank == "White"
    assert yellow.next_rank == NO_RANK


async def test_splice_between_adjacent_ranks(test_db, ladder):
    ranks = RankLadder(test_db)
    await ranks.add_rank("Orange", predecessor="White", successor="Yellow")
    assert await _names(test_db) == ["White", "Orange", "Yellow"]


async def test_prepend_before_first_rank(test_db, ladder):
    await RankLadder(test_db).add_rank("Beginner", successor="White")
    assert await _names(test_db) == ["Beginner", "White", "Yellow"]


async def test_name_is_stripped(test_db, ladder):
    rank_id = await RankLadder(test_db).add_rank("  Green ", predecessor="Yellow")
    assert (await RankLadder(test_db).get_rank(rank_id)).name == "Green"


async def test_duplicate_name_is_rejected(test_db, ladder):
    with pytest.raises(ValidationError, match="already exists"):
        await RankLadder(test_db).add_rank("Yellow", predecessor="Yellow")


async def test_sentinel_name_is_rejected(test_db):
    with pytest.raises(ValidationError):
        await RankLadder(test_db).add_rank(NO_RANK)


async def test_unknown_neighbor_is_rejected(test_db, ladder):
    with pytest.raises(ValidationError, match="does not exist"):
        await RankLadder(test_db).add_rank("Green", predecessor="Purple")


async def test_non_adjacent_insert_leaves_ladder_untouched(test_db, ladder):
    ranks = RankLadder(test_db)
    await ranks.add_rank("Green", predecessor="Yellow")
    with pytest.raises(ValidationError):
        await ranks.add_rank("Orange", predecessor="White", successor="Green")
    assert await _names(test_db) == ["White", "Yellow", "Green"]
    count = len((await test_db.execute(select(Rank))).scalars().all())
    assert count == 3


async def test_next_rank(test_db, ladder):
    ranks = RankLadder(test_db)
    assert await ranks.next_rank(ladder["white"]) == ladder["yellow"]
    assert await ranks.next_rank(ladder["yellow"]) is None


async def test_next_rank_of_unknown_rank_raises(test_db):
    with pytest.raises(NotFoundError):
        await RankLadder(test_db).next_rank(999)


# ─── Requirements ────────────────────────────────────────────────

async def test_requirements_in_insertion_order(test_db, ladder):
    ranks = RankLadder(test_db)
    await ranks.add_requirement(ladder["white"], "Forms", 2)
    await ranks.add_requirement(ladder["white"], "Attendance", 0, time_required=True)
    requirements = await ranks.requirements_for(ladder["white"])
    assert [r.name for r in requirements] == ["Kicks", "Forms", "Attendance"]
    assert requirements[0].id == ladder["kicks"]
    assert requirements[0].level_needed == 3
    assert requirements[2].is_time_required is True


async def test_requirements_of_rank_without_any(test_db, ladder):
    assert await RankLadder(test_db).requirements_for(ladder["yellow"]) == []


async def test_duplicate_requirement_name_is_rejected(test_db, ladder):
    with pytest.raises(ValidationError, match="already has a requirement"):
        await RankLadder(test_db).add_requirement(ladder["white"], "Kicks", 5)


async def test_same_requirement_name_on_other_rank_is_allowed(test_db, ladder):
    await RankLadder(test_db).add_requirement(ladder["yellow"], "Kicks", 5)


@pytest.mark.parametrize("level", [-1, 32768])
async def test_requirement_level_out_of_range(test_db, ladder, level):
    with pytest.raises(ValidationError) as exc:
        await RankLadder(test_db).add_requirement(ladder["white"], "Forms", level)
    assert exc.value.field == "level_needed"


async def test_requirement_on_unknown_rank(test_db):
    with pytest.raises(NotFoundError) as exc:
        await RankLadder(test_db).add_requirement(404, "Kicks", 1)
    assert exc.value.resource_type == "Rank"

