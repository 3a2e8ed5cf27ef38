from datetime import datetime, timedelta, timezone

import pytest

from flash_trigger.schedule import create_trigger, next_fire_time, upcoming_fire_times
from flash_trigger.schemas import (
    ConditionTriggerConfig,
    DailyScheduledConfig,
    HourlyScheduledConfig,
    IntervalTimerConfig,
    MonthlyScheduledConfig,
    WeeklyScheduledConfig,
    parse_timer_config,
)
from flash_trigger.triggers import (
    DailyTrigger,
    HourlyTrigger,
    IntervalTrigger,
    MonthlyTrigger,
    WeeklyTrigger,
)

CONFIGS = [
    IntervalTimerConfig(amount=90, unit="second"),
    HourlyScheduledConfig(hourly_interval=5, minute_of_hour=45),
    DailyScheduledConfig(time="06:15", days_of_week=[2, 4]),
    WeeklyScheduledConfig(time="23:59", day_of_week=7),
    MonthlyScheduledConfig(time="00:00", day_of_month=30, monthly_fallback="skip"),
    MonthlyScheduledConfig(time="12:00", day_of_month="last"),
]

NOWS = [
    datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
    datetime(2024, 2, 28, 23, 59, 59, tzinfo=timezone.utc),
    datetime(2024, 12, 31, 12, 0, tzinfo=timezone.utc),
]


@pytest.mark.parametrize(
    "config, trigger_cls",
    [
        (IntervalTimerConfig(amount=5, unit="minute"), IntervalTrigger),
        (HourlyScheduledConfig(), HourlyTrigger),
        (DailyScheduledConfig(time="09:00"), DailyTrigger),
        (WeeklyScheduledConfig(time="09:00"), WeeklyTrigger),
        (MonthlyScheduledConfig(time="09:00"), MonthlyTrigger),
    ],
)
def test_create_trigger(config, trigger_cls):
    assert isinstance(create_trigger(config), trigger_cls)


def test_create_trigger_unsupported():
    config = ConditionTriggerConfig.model_validate(
        {"config": {"triggerType": "else", "fromNodeId": "node-1"}}
    )

    with pytest.raises(TypeError, match="Unsupported timer config"):
        create_trigger(config)


def test_next_fire_time_from_document(monday):
    config = parse_timer_config({"mode": "interval", "amount": 5, "unit": "minute"})

    assert next_fire_time(config, monday) == monday + timedelta(minutes=5)


@pytest.mark.parametrize("config", CONFIGS)
@pytest.mark.parametrize("now", NOWS)
def test_strictly_after_now_and_deterministic(config, now):
    first = next_fire_time(config, now)

    assert first > now
    assert first.tzinfo == timezone.utc
    assert next_fire_time(config, now) == first


@pytest.mark.parametrize("config", CONFIGS)
def test_monotonic_in_now(config):
    earlier = datetime(2024, 3, 10, 8, 0, tzinfo=timezone.utc)
    later = earlier + timedelta(hours=7)

    assert next_fire_time(config, earlier) <= next_fire_time(config, later)


def test_upcoming_fire_times_weekends(monday):
    config = DailyScheduledConfig(time="09:00", days_of_week=[6, 7])

    fire_times = upcoming_fire_times(config, monday, 4)

    assert fire_times == [
        datetime(2024, 1, 6, 9, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 7, 9, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 13, 9, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 14, 9, 0, tzinfo=timezone.utc),
    ]


def test_upcoming_fire_times_are_increasing(monday):
    config = MonthlyScheduledConfig(time="09:30", day_of_month=31, monthly_fallback="skip")

    fire_times = upcoming_fire_times(config, monday, 6)

    assert all(a < b for a, b in zip(fire_times, fire_times[1:]))
    assert [t.month for t in fire_times] == [1, 3, 5, 7, 8, 10]


def test_upcoming_fire_times_count(monday):
    config = IntervalTimerConfig(amount=1, unit="hour")

    assert upcoming_fire_times(config, monday, 0) == []
    with pytest.raises(ValueError, match="count must not be negative"):
        upcoming_fire_times(config, monday, -1)
