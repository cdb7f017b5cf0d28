"""Validation module for auditing assignment sets."""

from coachplanner.validation.validator import (
    ScheduleValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "ScheduleValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
