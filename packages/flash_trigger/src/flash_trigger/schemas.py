"""Pydantic schemas/data contracts for trigger configurations."""

import zoneinfo
from datetime import timedelta, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_serializer,
)
from pydantic.alias_generators import to_camel

from .config import trigger_settings


def validate_timezone(v: Any) -> Any:
    """Ensure the value is a valid timezone or ZoneInfo object."""
    if isinstance(v, (timezone, zoneinfo.ZoneInfo)):
        return v
    if isinstance(v, str):
        if v.upper() == "UTC":
            return timezone.utc
        try:
            return zoneinfo.ZoneInfo(v)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as z:
            msg = f"Invalid timezone name: {v}"
            raise ValueError(msg) from z
    msg = f"Invalid timezone type: {type(v).__name__}"
    raise ValueError(msg)


# Any here because pydantic cannot build a core schema for datetime.timezone;
# the BeforeValidator does the actual type enforcement.
TzType = Annotated[Any, BeforeValidator(validate_timezone)]


class ValueType(str, Enum):
    """Value type of a workflow variable."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    TIME = "time"
    ENUM = "enum"
    PERCENTAGE = "percentage"


class VarOperation(str, Enum):
    GET = "get"
    UPDATE = "update"
    RESET = "reset"


class UpdateOperation(str, Enum):
    """Mutation applied to a variable by an ``update`` operation."""

    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MAX = "max"
    MIN = "min"
    TOGGLE = "toggle"
    APPEND = "append"
    REMOVE = "remove"
    CLEAR = "clear"


class TriggerStyle(str, Enum):
    CONDITION = "condition"
    TIMER = "timer"
    DATAFLOW = "dataflow"


class TimerUnit(str, Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


class RepeatMode(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthlyFallback(str, Enum):
    """What a monthly timer does in months lacking the configured day."""

    LAST_DAY = "last-day"
    SKIP = "skip"


class ExpireUnit(str, Enum):
    MILLISECOND = "ms"
    SECOND = "s"
    MINUTE = "min"
    HOUR = "hour"
    DAY = "day"


class DataflowErrorKind(str, Enum):
    """Faulty conditions an upstream value can be in."""

    NULL_VALUE = "nullValue"
    ZERO_VALUE = "zeroValue"
    EXPIRED = "expired"


class ErrorStrategy(str, Enum):
    SKIP = "skip"
    STILL_UPDATE = "stillUpdate"
    VALUE_REPLACE = "valueReplace"
    USE_PREVIOUS_VALUE = "usePreviousValue"


class LogLevel(str, Enum):
    WARN = "warn"
    ERROR = "error"


class _DocumentModel(BaseModel):
    """Base for models persisted in workflow documents (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- Timer triggers ---


class IntervalTimerConfig(_DocumentModel):
    """Fires every ``amount`` ``unit`` after the reference instant."""

    mode: Literal["interval"] = "interval"
    amount: int
    unit: TimerUnit

    def to_timedelta(self) -> timedelta:
        return timedelta(**{f"{self.unit.value}s": self.amount})


class _ScheduledConfig(_DocumentModel):
    mode: Literal["scheduled"] = "scheduled"
    tz: TzType | None = None

    @field_serializer("tz")
    def serialize_timezone(self, v: Any) -> str | None:
        """Convert ZoneInfo or timezone object to string for JSON serialization."""
        if isinstance(v, zoneinfo.ZoneInfo):
            return v.key
        if isinstance(v, timezone):
            return str(v)
        if v is None:
            return None
        msg = f"Expected str, ZoneInfo, or timezone, got {type(v).__name__}"
        raise ValueError(msg)


class _TimeOfDayMixin:
    time: str

    def time_of_day(self) -> tuple[int, int]:
        """Split ``time`` ("HH:MM") into (hour, minute)."""
        hours, sep, minutes = self.time.partition(":")
        if not (
            sep
            and hours.isdigit()
            and minutes.isdigit()
            and int(hours) <= 23
            and int(minutes) <= 59
        ):
            msg = f"time must be a 24-hour HH:MM value, got {self.time!r}"
            raise ValueError(msg)
        return int(hours), int(minutes)


class HourlyScheduledConfig(_ScheduledConfig):
    """Fires at ``minute_of_hour`` of every ``hourly_interval``-th hour of the day."""

    repeat_mode: Literal["hourly"] = "hourly"
    hourly_interval: int = 1
    minute_of_hour: int = 0


class DailyScheduledConfig(_TimeOfDayMixin, _ScheduledConfig):
    """Fires once a day at ``time``, optionally restricted to ISO weekdays."""

    repeat_mode: Literal["daily"] = "daily"
    time: str
    days_of_week: list[int] = Field(default_factory=list)

    def weekday_filter(self) -> frozenset[int]:
        """ISO weekdays to fire on; empty when every day qualifies."""
        days = frozenset(self.days_of_week)
        if not days or days >= frozenset(range(1, 8)):
            return frozenset()
        return days


class WeeklyScheduledConfig(_TimeOfDayMixin, _ScheduledConfig):
    repeat_mode: Literal["weekly"] = "weekly"
    time: str
    day_of_week: int = 1


class MonthlyScheduledConfig(_TimeOfDayMixin, _ScheduledConfig):
    """Fires once a month on ``day_of_month`` at ``time``."""

    repeat_mode: Literal["monthly"] = "monthly"
    time: str
    day_of_month: int | Literal["first", "last"] = 1
    monthly_fallback: MonthlyFallback | None = None

    def needs_fallback(self) -> bool:
        """Days 29-31 are missing from some months."""
        return isinstance(self.day_of_month, int) and self.day_of_month >= 29


ScheduledTimerConfig = Union[
    HourlyScheduledConfig,
    DailyScheduledConfig,
    WeeklyScheduledConfig,
    MonthlyScheduledConfig,
]


def _timer_config_tag(v: Any) -> str | None:
    """Discriminate on ``mode`` first, then on ``repeatMode`` for scheduled configs."""
    if isinstance(v, dict):
        mode = v.get("mode")
        repeat_mode = v.get("repeatMode", v.get("repeat_mode"))
    else:
        mode = getattr(v, "mode", None)
        repeat_mode = getattr(v, "repeat_mode", None)
    if mode == "interval":
        return "interval"
    if mode == "scheduled" and repeat_mode is not None:
        return str(getattr(repeat_mode, "value", repeat_mode))
    return None


TimerConfig = Annotated[
    Union[
        Annotated[IntervalTimerConfig, Tag("interval")],
        Annotated[HourlyScheduledConfig, Tag("hourly")],
        Annotated[DailyScheduledConfig, Tag("daily")],
        Annotated[WeeklyScheduledConfig, Tag("weekly")],
        Annotated[MonthlyScheduledConfig, Tag("monthly")],
    ],
    Discriminator(_timer_config_tag),
]


# --- Condition triggers ---


class CaseBranchTrigger(_DocumentModel):
    trigger_type: Literal["case"] = "case"
    from_node_id: str
    from_handle_id: str = ""
    from_node_name: str = ""
    case_id: int


class ElseBranchTrigger(_DocumentModel):
    trigger_type: Literal["else"] = "else"
    from_node_id: str
    from_handle_id: str = ""
    from_node_name: str = ""


ConditionTrigger = Annotated[
    Union[CaseBranchTrigger, ElseBranchTrigger],
    Field(discriminator="trigger_type"),
]


# --- Dataflow triggers ---


class ErrorLog(_DocumentModel):
    notify: bool = False
    level: LogLevel | None = None

    def effective_level(self) -> LogLevel:
        return self.level or LogLevel.WARN


class SkipPolicy(_DocumentModel):
    strategy: Literal["skip"] = "skip"
    error_log: ErrorLog = Field(default_factory=ErrorLog)


class StillUpdatePolicy(_DocumentModel):
    """Propagates the faulty upstream value anyway."""

    strategy: Literal["stillUpdate"] = "stillUpdate"
    error_log: ErrorLog = Field(default_factory=ErrorLog)


class ValueReplacePolicy(_DocumentModel):
    strategy: Literal["valueReplace"] = "valueReplace"
    replacement: Any = Field(
        default=None,
        validation_alias=AliasChoices("replacement", "replaceValue"),
    )
    error_log: ErrorLog = Field(default_factory=ErrorLog)


class UsePreviousValuePolicy(_DocumentModel):
    """Reuses the last good value, at most ``max_use_times`` times in a row."""

    strategy: Literal["usePreviousValue"] = "usePreviousValue"
    max_use_times: int | None = None
    error_log: ErrorLog = Field(default_factory=ErrorLog)


ErrorPolicy = Annotated[
    Union[SkipPolicy, StillUpdatePolicy, ValueReplacePolicy, UsePreviousValuePolicy],
    Field(discriminator="strategy"),
]


_EXPIRE_UNIT_KWARGS = {
    ExpireUnit.MILLISECOND: "milliseconds",
    ExpireUnit.SECOND: "seconds",
    ExpireUnit.MINUTE: "minutes",
    ExpireUnit.HOUR: "hours",
    ExpireUnit.DAY: "days",
}


class ExpireDuration(_DocumentModel):
    """How long an upstream value stays fresh."""

    unit: ExpireUnit = Field(
        default_factory=lambda: ExpireUnit(trigger_settings.DEFAULT_EXPIRE_UNIT)
    )
    amount: int = Field(default_factory=lambda: trigger_settings.DEFAULT_EXPIRE_AMOUNT)

    def to_timedelta(self) -> timedelta:
        return timedelta(**{_EXPIRE_UNIT_KWARGS[self.unit]: self.amount})


class DataflowConfig(_DocumentModel):
    """
    Links a variable update to an upstream node output.

    Examples:
        >>> config = DataflowConfig.model_validate({
        ...     "fromNodeId": "indicator-1",
        ...     "expireDuration": {"unit": "min", "amount": 5},
        ...     "errorPolicy": {
        ...         "zeroValue": {"strategy": "valueReplace", "replacement": 1},
        ...     },
        ... })
        >>> config.policy_for(DataflowErrorKind.NULL_VALUE).strategy
        'skip'
    """

    from_node_id: str = ""
    from_node_name: str = ""
    from_handle_id: str = ""
    from_var: str = ""
    from_var_value_type: ValueType | None = None
    expire_duration: ExpireDuration = Field(default_factory=ExpireDuration)
    error_policy: dict[DataflowErrorKind, ErrorPolicy] = Field(default_factory=dict)

    def policy_for(self, error_kind: DataflowErrorKind) -> ErrorPolicy:
        """Configured policy for ``error_kind``; unconfigured kinds skip silently."""
        return self.error_policy.get(DataflowErrorKind(error_kind)) or SkipPolicy()


# --- Trigger wrappers ---


class TimerTriggerConfig(_DocumentModel):
    type: Literal["timer"] = "timer"
    config: TimerConfig


class ConditionTriggerConfig(_DocumentModel):
    type: Literal["condition"] = "condition"
    config: ConditionTrigger


class DataflowTriggerConfig(_DocumentModel):
    type: Literal["dataflow"] = "dataflow"
    config: DataflowConfig


TriggerConfig = Annotated[
    Union[TimerTriggerConfig, ConditionTriggerConfig, DataflowTriggerConfig],
    Field(discriminator="type"),
]


class VariableTriggerConfig(_DocumentModel):
    """A variable mutation bound to a trigger, as checked before save."""

    var_operation: VarOperation
    var_value_type: ValueType
    update_operation: UpdateOperation | None = None
    trigger: TriggerConfig

    @property
    def trigger_style(self) -> TriggerStyle:
        return TriggerStyle(self.trigger.type)


_TIMER_CONFIG_ADAPTER: TypeAdapter[Any] = TypeAdapter(TimerConfig)
_TRIGGER_CONFIG_ADAPTER: TypeAdapter[Any] = TypeAdapter(TriggerConfig)


def parse_timer_config(data: Any) -> Any:
    """Build the matching timer config model from document data."""
    return _TIMER_CONFIG_ADAPTER.validate_python(data)


def parse_trigger_config(data: Any) -> Any:
    return _TRIGGER_CONFIG_ADAPTER.validate_python(data)
