"""MonthlyTrigger - Fires once a month on a fixed or symbolic day."""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from flash_trigger.config import trigger_settings
from flash_trigger.exceptions import ScheduleComputationError
from flash_trigger.schemas import MonthlyFallback

from .base import Trigger, ensure_aware

if TYPE_CHECKING:
    from flash_trigger.schemas import MonthlyScheduledConfig

logger = logging.getLogger(__name__)


class MonthlyTrigger(Trigger):
    """
    Trigger that fires on ``day_of_month`` at ``time``.

    ``day_of_month`` is 1-31, ``"first"`` or ``"last"``. Days 29-31 do not
    exist in every month; ``monthly_fallback`` decides what happens then:

    - ``last-day`` (default): fire on that month's last day instead.
    - ``skip``: do not fire that month at all.

    Examples:
        >>> # 31st of every month, clamped in short months
        >>> config = MonthlyScheduledConfig(
        ...     time="09:30", day_of_month=31, monthly_fallback="last-day"
        ... )
        >>> trigger = MonthlyTrigger(config)
        >>> trigger.next_fire_time(datetime(2024, 2, 1, tzinfo=timezone.utc))
        datetime.datetime(2024, 2, 29, 9, 30, tzinfo=datetime.timezone.utc)

    Args:
        config: MonthlyScheduledConfig
    """

    def __init__(self, config: MonthlyScheduledConfig):
        if isinstance(config.day_of_month, int) and not 1 <= config.day_of_month <= 31:
            msg = "day_of_month must be between 1 and 31, 'first' or 'last'"
            raise ValueError(msg)
        self.hour, self.minute = config.time_of_day()
        self.day_of_month = config.day_of_month
        self.monthly_fallback = config.monthly_fallback or MonthlyFallback.LAST_DAY
        self.tz = config.tz or trigger_settings.default_timezone()
        self.max_lookahead = trigger_settings.MAX_MONTHLY_LOOKAHEAD

    def next_fire_time(self, now: datetime) -> datetime:
        local_now = ensure_aware(now).astimezone(self.tz)
        year, month = local_now.year, local_now.month

        # Every month has >= 28 days, so at most one month in a row is skipped;
        # the cap only guards against a rule change breaking that.
        for _ in range(self.max_lookahead):
            day = self._resolve_day(year, month)
            if day is None:
                logger.debug(
                    "Skipping %04d-%02d: day %s does not exist",
                    year,
                    month,
                    self.day_of_month,
                )
            else:
                candidate = local_now.replace(
                    year=year,
                    month=month,
                    day=day,
                    hour=self.hour,
                    minute=self.minute,
                    second=0,
                    microsecond=0,
                )
                if candidate > local_now:
                    return candidate.astimezone(timezone.utc)
            year, month = _next_month(year, month)

        msg = (
            f"No firing instant for day_of_month={self.day_of_month!r} "
            f"within {self.max_lookahead} months of {now.isoformat()}"
        )
        raise ScheduleComputationError(msg)

    def _resolve_day(self, year: int, month: int) -> int | None:
        """Concrete day to fire on in the given month, or None to skip it."""
        last_day = calendar.monthrange(year, month)[1]
        if self.day_of_month == "first":
            return 1
        if self.day_of_month == "last":
            return last_day
        if self.day_of_month <= last_day:
            return self.day_of_month
        if self.monthly_fallback == MonthlyFallback.SKIP:
            return None
        return last_day


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1
