"""Person Profile: registration profile normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from tkd_core.core.errors import ValidationError
from tkd_core.core.person_profile import PersonProfile, normalize_profile

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def _profile(**overrides) -> PersonProfile:
    fields = dict(
        first_name="Ana", last_name="Silva",
        birth_date=datetime(2001, 2, 3, tzinfo=timezone.utc),
        height=165, weight=58,
    )
    fields.update(overrides)
    return PersonProfile(**fields)


def test_names_are_stripped():
    profile = normalize_profile(_profile(first_name="  Ana ", last_name=" Silva"), NOW)
    assert (profile.first_name, profile.last_name) == ("Ana", "Silva")


@pytest.mark.parametrize("field", ["first_name", "last_name"])
def test_blank_name_is_rejected(field):
    with pytest.raises(ValidationError) as exc:
        normalize_profile(_profile(**{field: "   "}), NOW)
    assert exc.value.field == field


@pytest.mark.parametrize("field,value", [
    ("height", 0), ("height", -5), ("weight", 0), ("weight", True),
])
def test_non_positive_measurements_are_rejected(field, value):
    with pytest.raises(ValidationError) as exc:
        normalize_profile(_profile(**{field: value}), NOW)
    assert exc.value.field == field


def test_future_birth_date_is_rejected():
    with pytest.raises(ValidationError) as exc:
        normalize_profile(_profile(birth_date=NOW + timedelta(days=1)), NOW)
    assert exc.value.field == "birth_date"


def test_birth_date_today_is_accepted():
    assert normalize_profile(_profile(birth_date=NOW), NOW).birth_date == NOW
