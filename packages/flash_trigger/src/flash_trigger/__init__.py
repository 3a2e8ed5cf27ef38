from .config import TriggerSettings, trigger_settings
from .cron import to_cron
from .defaults import (
    default_error_policies,
    default_expire_duration,
    default_scheduled_config,
    default_use_previous_policy,
)
from .exceptions import ConfigurationError, FlashTriggerError, ScheduleComputationError
from .logging import emit_log_entry, get_logger, scoped_run_id, setup_logging
from .matrix import (
    allowed_error_kinds,
    allowed_operations,
    allowed_strategies,
    allowed_trigger_styles,
    is_numeric,
)
from .resolver import (
    LogEntry,
    OutcomeKind,
    ResolutionContext,
    ResolutionOutcome,
    detect_error_kind,
    resolve,
    resolve_for,
)
from .schedule import create_trigger, next_fire_time, upcoming_fire_times
from .schemas import (
    DataflowConfig,
    VariableTriggerConfig,
    parse_timer_config,
    parse_trigger_config,
)
from .validator import TriggerConfigValidator, ValidationIssue, ensure_valid, validate

__all__ = [
    "ConfigurationError",
    "DataflowConfig",
    "FlashTriggerError",
    "LogEntry",
    "OutcomeKind",
    "ResolutionContext",
    "ResolutionOutcome",
    "ScheduleComputationError",
    "TriggerConfigValidator",
    "TriggerSettings",
    "ValidationIssue",
    "VariableTriggerConfig",
    "allowed_error_kinds",
    "allowed_operations",
    "allowed_strategies",
    "allowed_trigger_styles",
    "create_trigger",
    "default_error_policies",
    "default_expire_duration",
    "default_scheduled_config",
    "default_use_previous_policy",
    "detect_error_kind",
    "emit_log_entry",
    "ensure_valid",
    "get_logger",
    "is_numeric",
    "next_fire_time",
    "parse_timer_config",
    "parse_trigger_config",
    "resolve",
    "resolve_for",
    "scoped_run_id",
    "setup_logging",
    "to_cron",
    "trigger_settings",
    "upcoming_fire_times",
    "validate",
]
