from .base import Trigger
from .daily import DailyTrigger
from .hourly import HourlyTrigger
from .interval import IntervalTrigger
from .monthly import MonthlyTrigger
from .weekly import WeeklyTrigger

__all__ = [
    "Trigger",
    "IntervalTrigger",
    "HourlyTrigger",
    "DailyTrigger",
    "WeeklyTrigger",
    "MonthlyTrigger",
]
