"""
Decides what a dataflow-triggered variable update does when the upstream
value is faulty.

Everything here is a pure function of its arguments. Counters for
``usePreviousValue`` and the last good value belong to the caller, which
passes them in through ``ResolutionContext`` and increments its counter
whenever an outcome reports ``used_previous_value``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .matrix import is_numeric
from .schemas import (
    DataflowConfig,
    DataflowErrorKind,
    ErrorPolicy,
    ErrorStrategy,
    ExpireDuration,
    LogLevel,
    SkipPolicy,
    StillUpdatePolicy,
    UsePreviousValuePolicy,
    ValueReplacePolicy,
    ValueType,
)
from .triggers.base import ensure_aware

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    UPDATE = "update"
    SKIP = "skip"
    LOG_ONLY = "logOnly"


@dataclass(frozen=True)
class ResolutionContext:
    """Runtime state the caller owns for one faulty upstream value."""

    candidate_value: Any = None
    previous_value: Any = None
    times_previous_value_used: int = 0


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    error_kind: DataflowErrorKind
    strategy: ErrorStrategy
    message: str


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Result of applying an error policy.

    ``value`` is only meaningful when ``kind`` is ``update``.
    """

    kind: OutcomeKind
    value: Any = None
    log: Optional[LogEntry] = None
    used_previous_value: bool = False

    @property
    def updates(self) -> bool:
        return self.kind == OutcomeKind.UPDATE


def _log_entry(
    error_kind: DataflowErrorKind,
    policy: ErrorPolicy,
    message: str,
    always: bool = False,
) -> Optional[LogEntry]:
    if not (always or policy.error_log.notify):
        return None
    return LogEntry(
        level=policy.error_log.effective_level(),
        error_kind=error_kind,
        strategy=ErrorStrategy(policy.strategy),
        message=message,
    )


def resolve(
    error_kind: DataflowErrorKind,
    policy: ErrorPolicy,
    ctx: ResolutionContext,
) -> ResolutionOutcome:
    """
    Apply ``policy`` to an upstream value in state ``error_kind``.

    Examples:
        >>> outcome = resolve(
        ...     DataflowErrorKind.NULL_VALUE,
        ...     ValueReplacePolicy(replacement=1),
        ...     ResolutionContext(candidate_value=None),
        ... )
        >>> outcome.kind, outcome.value
        (<OutcomeKind.UPDATE: 'update'>, 1)
    """
    error_kind = DataflowErrorKind(error_kind)
    kind_name = error_kind.value

    if isinstance(policy, SkipPolicy):
        return ResolutionOutcome(
            kind=OutcomeKind.SKIP,
            log=_log_entry(error_kind, policy, f"{kind_name}: update skipped"),
        )

    if isinstance(policy, StillUpdatePolicy):
        return ResolutionOutcome(
            kind=OutcomeKind.UPDATE,
            value=ctx.candidate_value,
            log=_log_entry(
                error_kind,
                policy,
                f"{kind_name}: updated with upstream value {ctx.candidate_value!r}",
            ),
        )

    if isinstance(policy, ValueReplacePolicy):
        return ResolutionOutcome(
            kind=OutcomeKind.UPDATE,
            value=policy.replacement,
            log=_log_entry(
                error_kind,
                policy,
                f"{kind_name}: updated with replacement {policy.replacement!r}",
            ),
        )

    if isinstance(policy, UsePreviousValuePolicy):
        return _resolve_use_previous(error_kind, policy, ctx)

    msg = f"Unsupported error policy: {type(policy).__name__}"
    raise TypeError(msg)


def _resolve_use_previous(
    error_kind: DataflowErrorKind,
    policy: UsePreviousValuePolicy,
    ctx: ResolutionContext,
) -> ResolutionOutcome:
    kind_name = error_kind.value

    if ctx.previous_value is None:
        return ResolutionOutcome(
            kind=OutcomeKind.LOG_ONLY,
            log=_log_entry(
                error_kind,
                policy,
                f"{kind_name}: no previous value to fall back to",
                always=True,
            ),
        )

    limit = policy.max_use_times
    if limit is not None and ctx.times_previous_value_used >= limit:
        logger.debug(
            "Previous value used %d/%d times; skipping",
            ctx.times_previous_value_used,
            limit,
        )
        return ResolutionOutcome(
            kind=OutcomeKind.SKIP,
            log=_log_entry(
                error_kind,
                policy,
                f"{kind_name}: previous value already used {limit} time(s), "
                "update skipped",
                always=True,
            ),
        )

    return ResolutionOutcome(
        kind=OutcomeKind.UPDATE,
        value=ctx.previous_value,
        used_previous_value=True,
        log=_log_entry(
            error_kind,
            policy,
            f"{kind_name}: updated with previous value {ctx.previous_value!r}",
        ),
    )


def resolve_for(
    config: DataflowConfig,
    error_kind: DataflowErrorKind,
    ctx: ResolutionContext,
) -> ResolutionOutcome:
    """Resolve with the policy ``config`` holds for ``error_kind``."""
    return resolve(error_kind, config.policy_for(DataflowErrorKind(error_kind)), ctx)


def detect_error_kind(
    value: Any,
    value_type: ValueType,
    produced_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
    expire_duration: Optional[ExpireDuration] = None,
) -> Optional[DataflowErrorKind]:
    """
    Classify an upstream value, or return None when it is usable as is.

    Checks run in order: null, then expiry (only when ``produced_at`` is
    given), then zero for numeric value types. Booleans are never zero.

    Raises:
        ValueError: ``produced_at`` is given without ``now``.

    Examples:
        >>> detect_error_kind(0, ValueType.NUMBER)
        <DataflowErrorKind.ZERO_VALUE: 'zeroValue'>
        >>> detect_error_kind(0, ValueType.STRING) is None
        True
    """
    if value is None:
        return DataflowErrorKind.NULL_VALUE

    if produced_at is not None:
        if now is None:
            msg = "now is required to check expiry"
            raise ValueError(msg)
        duration = (expire_duration or ExpireDuration()).to_timedelta()
        if ensure_aware(now) - ensure_aware(produced_at) > duration:
            return DataflowErrorKind.EXPIRED

    if (
        is_numeric(value_type)
        and isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value == 0
    ):
        return DataflowErrorKind.ZERO_VALUE

    return None
