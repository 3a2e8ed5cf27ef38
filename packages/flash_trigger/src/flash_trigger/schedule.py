"""Next-fire-time computation for timer trigger configurations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Type

from pydantic import BaseModel

from .schemas import (
    DailyScheduledConfig,
    HourlyScheduledConfig,
    IntervalTimerConfig,
    MonthlyScheduledConfig,
    WeeklyScheduledConfig,
)
from .triggers import (
    DailyTrigger,
    HourlyTrigger,
    IntervalTrigger,
    MonthlyTrigger,
    Trigger,
    WeeklyTrigger,
)

logger = logging.getLogger(__name__)

_TRIGGER_REGISTRY: Dict[Type[Any], Type[Trigger]] = {
    IntervalTimerConfig: IntervalTrigger,
    HourlyScheduledConfig: HourlyTrigger,
    DailyScheduledConfig: DailyTrigger,
    WeeklyScheduledConfig: WeeklyTrigger,
    MonthlyScheduledConfig: MonthlyTrigger,
}


def create_trigger(config: BaseModel) -> Trigger:
    """
    Create a Trigger implementation from a timer configuration.

    Args:
        config: Timer configuration model.

    Returns:
        Trigger implementation instance.

    Raises:
        TypeError: If the configuration type is not supported.

    Examples:
        >>> cfg = IntervalTimerConfig(amount=5, unit="second")
        >>> trigger = create_trigger(cfg)
        >>> isinstance(trigger, Trigger)
        True
    """
    trigger_cls = _TRIGGER_REGISTRY.get(type(config))
    if not trigger_cls:
        msg = f"Unsupported timer config: {type(config).__name__}"
        raise TypeError(msg)
    return trigger_cls(config)  # type: ignore[arg-type]


def next_fire_time(config: BaseModel, now: datetime) -> datetime:
    """
    First instant strictly after ``now`` at which the timer fires, in UTC.

    Examples:
        >>> from datetime import timezone
        >>> cfg = IntervalTimerConfig(amount=5, unit="minute")
        >>> next_fire_time(cfg, datetime(2024, 1, 1, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 1, 0, 5, tzinfo=datetime.timezone.utc)
    """
    return create_trigger(config).next_fire_time(now)


def upcoming_fire_times(config: BaseModel, now: datetime, count: int) -> List[datetime]:
    """
    The next ``count`` firing instants after ``now``, oldest first.

    Each instant is computed from the previous one, which is what the editor
    shows as the "next runs" preview.
    """
    if count < 0:
        msg = "count must not be negative"
        raise ValueError(msg)

    trigger = create_trigger(config)
    fire_times: List[datetime] = []
    reference = now
    for _ in range(count):
        reference = trigger.next_fire_time(reference)
        fire_times.append(reference)

    logger.debug("Computed %d upcoming fire times for %r", len(fire_times), trigger)
    return fire_times
