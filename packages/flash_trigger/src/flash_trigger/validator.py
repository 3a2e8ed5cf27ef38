"""
Semantic checks run on trigger configurations before they are saved.

Structural problems (unknown tags, wrong field types) are already rejected by
pydantic when the document is parsed; the checks here cover ranges, formats
and the cross-field rules between value types, operations and error policies.
Issues are collected, never raised, so the editor can show all of them at once.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, List, NamedTuple, Optional

from pydantic import BaseModel

from .exceptions import ConfigurationError
from .matrix import (
    allowed_error_kinds,
    allowed_operations,
    allowed_strategies,
    allowed_trigger_styles,
    is_numeric,
)
from .schemas import (
    ConditionTriggerConfig,
    DailyScheduledConfig,
    DataflowConfig,
    DataflowErrorKind,
    DataflowTriggerConfig,
    HourlyScheduledConfig,
    IntervalTimerConfig,
    MonthlyScheduledConfig,
    TimerTriggerConfig,
    UpdateOperation,
    UsePreviousValuePolicy,
    ValueReplacePolicy,
    ValueType,
    VariableTriggerConfig,
    VarOperation,
    WeeklyScheduledConfig,
)

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ValidationIssue(NamedTuple):
    field_path: str
    message: str


def _join(prefix: str, *parts: str) -> str:
    return ".".join(p for p in (prefix, *parts) if p)


def _is_zero(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def _matches_value_type(value: Any, value_type: ValueType) -> bool:
    if is_numeric(value_type):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if value_type == ValueType.BOOLEAN:
        return isinstance(value, bool)
    if value_type == ValueType.ENUM:
        return isinstance(value, list)
    return isinstance(value, str)


class TriggerConfigValidator:
    """
    Collects ``ValidationIssue``s for a configuration.

    Field paths use the camelCase document names, e.g.
    ``trigger.config.errorPolicy.zeroValue.replacement``.

    Examples:
        >>> validator = TriggerConfigValidator()
        >>> validator.validate(IntervalTimerConfig(amount=0, unit="minute"))
        [ValidationIssue(field_path='amount', message='Interval amount must be a positive integer')]
    """

    def validate(self, config: BaseModel) -> List[ValidationIssue]:
        issues = list(self._dispatch(config))
        if issues:
            logger.debug(
                "%s failed validation with %d issue(s)",
                type(config).__name__,
                len(issues),
            )
        return issues

    def _dispatch(self, config: BaseModel) -> Iterator[ValidationIssue]:
        if isinstance(config, VariableTriggerConfig):
            yield from self.validate_variable(config)
        elif isinstance(config, TimerTriggerConfig):
            yield from self.validate_timer(config.config, "config")
        elif isinstance(config, DataflowTriggerConfig):
            yield from self.validate_dataflow(
                config.config, path="config", require_source=True
            )
        elif isinstance(config, ConditionTriggerConfig):
            # Branch references are checked by the graph, not here
            return
        elif isinstance(config, DataflowConfig):
            yield from self.validate_dataflow(config)
        else:
            yield from self.validate_timer(config)

    # --- Timer ---

    def validate_timer(self, config: BaseModel, path: str = "") -> Iterator[ValidationIssue]:
        if isinstance(config, IntervalTimerConfig):
            if config.amount < 1:
                yield ValidationIssue(
                    _join(path, "amount"), "Interval amount must be a positive integer"
                )
        elif isinstance(config, HourlyScheduledConfig):
            if not 1 <= config.hourly_interval <= 24:
                yield ValidationIssue(
                    _join(path, "hourlyInterval"),
                    "Hourly interval must be between 1 and 24",
                )
            if not 0 <= config.minute_of_hour <= 59:
                yield ValidationIssue(
                    _join(path, "minuteOfHour"), "Minute of hour must be between 0 and 59"
                )
        elif isinstance(config, DailyScheduledConfig):
            yield from self._check_time(config.time, path)
            days = config.days_of_week
            if any(not 1 <= day <= 7 for day in days):
                yield ValidationIssue(
                    _join(path, "daysOfWeek"),
                    "Days of week must be between 1 (Monday) and 7 (Sunday)",
                )
            if len(set(days)) != len(days):
                yield ValidationIssue(
                    _join(path, "daysOfWeek"), "Days of week must not contain duplicates"
                )
        elif isinstance(config, WeeklyScheduledConfig):
            yield from self._check_time(config.time, path)
            if not 1 <= config.day_of_week <= 7:
                yield ValidationIssue(
                    _join(path, "dayOfWeek"),
                    "Day of week must be between 1 (Monday) and 7 (Sunday)",
                )
        elif isinstance(config, MonthlyScheduledConfig):
            yield from self._check_time(config.time, path)
            yield from self._check_day_of_month(config, path)
        else:
            msg = f"Unsupported timer config: {type(config).__name__}"
            raise TypeError(msg)

    def _check_time(self, value: str, path: str) -> Iterator[ValidationIssue]:
        if not _TIME_PATTERN.match(value):
            yield ValidationIssue(
                _join(path, "time"), f"Time must be a 24-hour HH:MM value, got {value!r}"
            )

    def _check_day_of_month(
        self, config: MonthlyScheduledConfig, path: str
    ) -> Iterator[ValidationIssue]:
        day = config.day_of_month
        if isinstance(day, int) and not 1 <= day <= 31:
            yield ValidationIssue(
                _join(path, "dayOfMonth"), "Day of month must be between 1 and 31"
            )
        elif config.needs_fallback() and config.monthly_fallback is None:
            yield ValidationIssue(
                _join(path, "monthlyFallback"),
                f"A fallback is required for day {day}, which some months lack",
            )
        elif not config.needs_fallback() and config.monthly_fallback is not None:
            yield ValidationIssue(
                _join(path, "monthlyFallback"),
                "A fallback is only allowed when day of month is 29 or later",
            )

    # --- Dataflow ---

    def validate_dataflow(
        self,
        config: DataflowConfig,
        value_type: Optional[ValueType] = None,
        operation: Optional[UpdateOperation] = None,
        path: str = "",
        require_source: bool = False,
    ) -> Iterator[ValidationIssue]:
        """
        Checks for a dataflow trigger writing into a ``value_type`` variable
        with ``operation``. Type and key checks are skipped while the target
        is unknown; the upstream node and variable are only required once the
        config is bound to a trigger (``require_source``).
        """
        if require_source:
            if not config.from_node_id:
                yield ValidationIssue(
                    _join(path, "fromNodeId"), "An upstream node is required"
                )
            if not config.from_var:
                yield ValidationIssue(
                    _join(path, "fromVar"), "An upstream variable is required"
                )

        if config.expire_duration.amount < 1:
            yield ValidationIssue(
                _join(path, "expireDuration", "amount"),
                "Expire duration must be a positive integer",
            )

        for error_kind, policy in config.error_policy.items():
            policy_path = _join(path, "errorPolicy", error_kind.value)

            if policy.strategy not in allowed_strategies(error_kind, operation):
                yield ValidationIssue(
                    _join(policy_path, "strategy"),
                    f"{policy.strategy} is not allowed for {error_kind.value} "
                    f"when the update operation is {operation.value}",
                )
            if policy.error_log.level is not None and not policy.error_log.notify:
                yield ValidationIssue(
                    _join(policy_path, "errorLog", "level"),
                    "Log level can only be set when notify is enabled",
                )
            if isinstance(policy, UsePreviousValuePolicy):
                if policy.max_use_times is not None and policy.max_use_times < 1:
                    yield ValidationIssue(
                        _join(policy_path, "maxUseTimes"),
                        "Max use times must be a positive integer",
                    )
            elif isinstance(policy, ValueReplacePolicy):
                message = self._replacement_issue(
                    error_kind, policy.replacement, value_type, operation
                )
                if message:
                    yield ValidationIssue(_join(policy_path, "replacement"), message)

        if value_type is not None:
            allowed = allowed_error_kinds(value_type)
            for error_kind in config.error_policy:
                if error_kind not in allowed:
                    yield ValidationIssue(
                        _join(path, "errorPolicy", error_kind.value),
                        f"{error_kind.value} does not apply to "
                        f"{ValueType(value_type).value} variables",
                    )

    def _replacement_issue(
        self,
        error_kind: DataflowErrorKind,
        replacement: Any,
        value_type: Optional[ValueType],
        operation: Optional[UpdateOperation],
    ) -> Optional[str]:
        """At most one message, for the first rule the replacement breaks."""
        if replacement is None:
            return "Replacement value is required"
        if operation == UpdateOperation.DIVIDE and _is_zero(replacement):
            return "Replacement value cannot be 0 when the update operation is divide"
        if error_kind == DataflowErrorKind.ZERO_VALUE and _is_zero(replacement):
            return "Replacement value cannot be 0 for zeroValue, it would retrigger the error"
        if value_type is not None and not _matches_value_type(replacement, value_type):
            return f"Replacement value must be a {ValueType(value_type).value}"
        return None

    # --- Variable ---

    def validate_variable(self, config: VariableTriggerConfig) -> Iterator[ValidationIssue]:
        style = config.trigger_style
        if style not in allowed_trigger_styles(config.var_operation):
            yield ValidationIssue(
                "trigger.type",
                f"{config.var_operation.value} variables cannot use a "
                f"{style.value} trigger",
            )

        operation = config.update_operation
        if config.var_operation == VarOperation.UPDATE:
            if operation is None:
                yield ValidationIssue(
                    "updateOperation", "An update operation is required for update"
                )
            elif operation not in allowed_operations(config.var_value_type, style):
                yield ValidationIssue(
                    "updateOperation",
                    f"{operation.value} is not available for "
                    f"{config.var_value_type.value} variables with a "
                    f"{style.value} trigger",
                )

        trigger = config.trigger
        if isinstance(trigger, TimerTriggerConfig):
            yield from self.validate_timer(trigger.config, "trigger.config")
        elif isinstance(trigger, DataflowTriggerConfig):
            yield from self.validate_dataflow(
                trigger.config,
                value_type=config.var_value_type,
                operation=operation,
                path="trigger.config",
                require_source=True,
            )


_validator = TriggerConfigValidator()


def validate(config: BaseModel) -> List[ValidationIssue]:
    """Issues found in ``config``; empty when it can be saved."""
    return _validator.validate(config)


def ensure_valid(config: BaseModel) -> None:
    """
    Raise ``ConfigurationError`` carrying every issue when ``config`` is invalid.

    Raises:
        ConfigurationError: With ``.issues`` set.
    """
    issues = validate(config)
    if issues:
        raise ConfigurationError(issues)
