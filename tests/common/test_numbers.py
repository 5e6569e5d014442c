from __future__ import annotations

import pytest

from school_attendance.common.numbers import percentage, round_half_up
from school_attendance.common.validators import require_non_empty, require_percentage
from school_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "value,digits,expected",
    [
        (66.65, 1, 66.7),
        (6.25, 1, 6.3),
        (6.665, 2, 6.67),
        (70.0, 1, 70.0),
    ],
)
def test_round_half_up(value, digits, expected):
    assert round_half_up(value, digits) == expected


def test_percentage():
    assert percentage(2, 3) == 66.7
    assert percentage(8, 10) == 80.0
    assert percentage(0, 0) == 0.0


def test_require_percentage_bounds():
    assert require_percentage("75", "Threshold") == 75.0
    assert require_percentage(0, "Threshold") == 0.0
    with pytest.raises(ValidationError):
        require_percentage(100.5, "Threshold")
    with pytest.raises(ValidationError):
        require_percentage(None, "Threshold")


@pytest.mark.parametrize("value", [5, ["a"], {"a": 1}])
def test_require_non_empty_rejects_non_text(value):
    with pytest.raises(ValidationError, match="must be text"):
        require_non_empty(value, "Name")


def test_require_non_empty_strips_and_requires():
    assert require_non_empty("  Eid ", "Name") == "Eid"
    with pytest.raises(ValidationError, match="is required"):
        require_non_empty(None, "Name")
    with pytest.raises(ValidationError, match="is required"):
        require_non_empty("   ", "Name")
