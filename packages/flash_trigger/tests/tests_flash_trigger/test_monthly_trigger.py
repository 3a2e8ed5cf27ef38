from datetime import datetime, timezone

import pytest

from flash_trigger.config import trigger_settings
from flash_trigger.exceptions import ScheduleComputationError
from flash_trigger.schemas import MonthlyScheduledConfig
from flash_trigger.triggers import MonthlyTrigger


def _at(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def _monthly(day_of_month, fallback=None):
    return MonthlyTrigger(
        MonthlyScheduledConfig(
            time="09:30", day_of_month=day_of_month, monthly_fallback=fallback
        )
    )


@pytest.mark.parametrize("day", [0, 32])
def test_validation_error(day):
    with pytest.raises(ValueError, match="day_of_month must be between 1 and 31"):
        _monthly(day)


def test_last_day_fallback_clamps_in_leap_february():
    trigger = _monthly(31, "last-day")

    assert trigger.next_fire_time(_at(2024, 2, 1)) == _at(2024, 2, 29, 9, 30)


def test_skip_fallback_in_a_long_month():
    trigger = _monthly(31, "skip")

    assert trigger.next_fire_time(_at(2024, 3, 1)) == _at(2024, 3, 31, 9, 30)


@pytest.mark.parametrize(
    "now, expected",
    [
        # February has no 31st
        (_at(2024, 2, 1), _at(2024, 3, 31, 9, 30)),
        # Nor does April
        (_at(2024, 4, 1), _at(2024, 5, 31, 9, 30)),
    ],
)
def test_skip_fallback_skips_short_months(now, expected):
    trigger = _monthly(31, "skip")

    assert trigger.next_fire_time(now) == expected


def test_missing_fallback_clamps_like_last_day():
    trigger = _monthly(31)

    assert trigger.next_fire_time(_at(2024, 4, 1)) == _at(2024, 4, 30, 9, 30)


def test_plain_day_already_passed_moves_to_next_month():
    trigger = _monthly(15)

    assert trigger.next_fire_time(_at(2024, 1, 20)) == _at(2024, 2, 15, 9, 30)
    assert trigger.next_fire_time(_at(2024, 1, 15, 9, 30)) == _at(2024, 2, 15, 9, 30)


def test_year_rollover():
    trigger = _monthly(5)

    assert trigger.next_fire_time(_at(2024, 12, 10)) == _at(2025, 1, 5, 9, 30)


def test_first_day():
    trigger = _monthly("first")

    assert trigger.next_fire_time(_at(2024, 1, 1)) == _at(2024, 1, 1, 9, 30)
    assert trigger.next_fire_time(_at(2024, 1, 1, 10)) == _at(2024, 2, 1, 9, 30)


def test_last_day_is_recomputed_per_month():
    trigger = _monthly("last")

    assert trigger.next_fire_time(_at(2024, 1, 2)) == _at(2024, 1, 31, 9, 30)
    assert trigger.next_fire_time(_at(2024, 1, 31, 10)) == _at(2024, 2, 29, 9, 30)
    assert trigger.next_fire_time(_at(2023, 2, 1)) == _at(2023, 2, 28, 9, 30)


def test_exhausted_lookahead_raises(monkeypatch):
    monkeypatch.setattr(trigger_settings, "MAX_MONTHLY_LOOKAHEAD", 1)
    trigger = _monthly(31, "skip")

    with pytest.raises(ScheduleComputationError, match="within 1 months"):
        trigger.next_fire_time(_at(2024, 2, 1))
