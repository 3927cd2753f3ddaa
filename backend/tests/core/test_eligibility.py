"""Promotion Eligibility: tests for the pure readiness computation.

Tests cover:
    - Levels at or above level_needed satisfy a requirement
    - Unrecorded requirements count as level 0
    - Time-required requirements also need time in grade
    - missing_requirements keeps insertion order
    - person and rank ids are carried into the result unchanged
"""

from datetime import datetime, timedelta, timezone

from tkd_core.core.eligibility import (
    DEFAULT_MIN_TIME_IN_GRADE,
    PromotionPolicy,
    RequirementSnapshot,
    evaluate_eligibility,
    time_in_grade_met,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
POLICY = PromotionPolicy(min_time_in_grade=timedelta(days=90))

KICKS = RequirementSnapshot(id=1, name="Kicks", level_needed=3)
FORMS = RequirementSnapshot(id=2, name="Forms", level_needed=2)
TIME = RequirementSnapshot(id=3, name="Time in grade", level_needed=0, time_required=True)


def _evaluate(requirements, levels, reached=NOW - timedelta(days=365), to_rank=2):
    return evaluate_eligibility(
        person_id=10,
        from_rank_id=1,
        to_rank_id=to_rank,
        requirements=requirements,
        levels=levels,
        rank_reached_at=reached,
        now=NOW,
        policy=POLICY,
    )


def test_no_requirements_is_ready():
    result = _evaluate([], {})
    assert result.ready
    assert result.missing_requirements == ()


def test_level_below_needed_is_missing():
    result = _evaluate([KICKS], {1: 2})
    assert not result.ready
    assert result.missing_requirements == (1,)
    assert result.missing_names == ("Kicks",)


def test_level_equal_to_needed_is_met():
    assert _evaluate([KICKS], {1: 3}).ready


def test_level_above_needed_is_met():
    assert _evaluate([KICKS], {1: 7}).ready


def test_unrecorded_requirement_counts_as_zero():
    result = _evaluate([KICKS, FORMS], {})
    assert result.missing_requirements == (1, 2)


def test_level_zero_requirement_met_without_record():
    zero = RequirementSnapshot(id=4, name="Etiquette", level_needed=0)
    assert _evaluate([zero], {}).ready


def test_missing_keeps_insertion_order():
    result = _evaluate([FORMS, KICKS], {})
    assert result.missing_names == ("Forms", "Kicks")


def test_time_required_not_met_when_rank_is_recent():
    result = _evaluate([TIME], {}, reached=NOW - timedelta(days=30))
    assert result.missing_requirements == (3,)


def test_time_required_met_after_min_time_in_grade():
    assert _evaluate([TIME], {}, reached=NOW - timedelta(days=90)).ready


def test_rank_and_ids_carried_through():
    result = _evaluate([KICKS], {1: 3}, to_rank=None)
    assert result.person_id == 10
    assert result.from_rank_id == 1
    assert result.to_rank_id is None


def test_time_in_grade_accepts_naive_datetimes():
    reached = datetime(2026, 1, 1, 12, 0)
    assert time_in_grade_met(reached, NOW, POLICY)


def test_default_policy_uses_ninety_days():
    assert PromotionPolicy().min_time_in_grade == DEFAULT_MIN_TIME_IN_GRADE
    assert DEFAULT_MIN_TIME_IN_GRADE == timedelta(days=90)
