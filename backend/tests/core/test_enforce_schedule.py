"""Schedule Enforcement: session windows and membership removal."""

from datetime import datetime, timedelta, timezone

import pytest

from tkd_core.core.enforce_schedule import (
    check_removal, check_session_window,
)
from tkd_core.core.errors import ValidationError

START = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


def test_valid_window_returns_groups():
    assert check_session_window(START, START + timedelta(hours=1), [1, 2]) == [1, 2]


def test_duplicate_groups_collapse_in_order():
    assert check_session_window(START, START + timedelta(hours=1), [2, 1, 2]) == [2, 1]


def test_end_equal_to_start_is_rejected():
    with pytest.raises(ValidationError) as exc:
        check_session_window(START, START, [1])
    assert exc.value.field == "end"


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        check_session_window(START, START - timedelta(minutes=1), [1])


def test_no_groups_is_rejected():
    with pytest.raises(ValidationError) as exc:
        check_session_window(START, START + timedelta(hours=1), [])
    assert exc.value.field == "group_ids"


def test_window_compares_naive_as_utc():
    naive_end = datetime(2026, 3, 2, 19, 0)
    assert check_session_window(START, naive_end, [3]) == [3]


def test_removal_after_join_is_allowed():
    check_removal(START, START)
    check_removal(START, START + timedelta(days=1))


def test_removal_before_join_is_rejected():
    with pytest.raises(ValidationError, match="before it was joined"):
        check_removal(START, START - timedelta(seconds=1))
