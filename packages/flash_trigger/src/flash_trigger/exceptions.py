from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validator import ValidationIssue


class FlashTriggerError(Exception):
    """Base class for all Flash Trigger exceptions."""


class ConfigurationError(FlashTriggerError, ValueError):
    """Raised when a trigger configuration fails validation and must not be saved."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        details = "; ".join(f"{issue.field_path}: {issue.message}" for issue in issues)
        super().__init__(f"Invalid trigger configuration ({details})")


class ScheduleComputationError(FlashTriggerError, RuntimeError):
    """Raised when no firing instant exists within the scheduling lookahead."""
