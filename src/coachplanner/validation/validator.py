"""Validation module for auditing a set of assignments.

This module re-checks every booking rule over a whole assignment set. It is
used after batch operations such as a paste, and by the CLI, to confirm the
stored schedule is still consistent.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from coachplanner.config import get_config
from coachplanner.domain.calendar import weekday_of
from coachplanner.domain.models import Assignment, Client, CreatedVia
from coachplanner.domain.policies import CoachAvailabilityGate
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog


class ValidationErrorType(Enum):
    """Types of validation errors."""

    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    UNKNOWN_CLIENT = "unknown_client"
    UNKNOWN_TIME_SLOT = "unknown_time_slot"
    COACH_UNAVAILABLE = "coach_unavailable"
    CLIENT_NOT_SCHEDULABLE = "client_not_schedulable"
    MISSING_JUSTIFICATION = "missing_justification"
    OUTSIDE_CLIENT_PATTERN = "outside_client_pattern"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    assignment_id: Optional[str] = None
    client_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.client_id:
            parts.append(f"Client {self.client_id}:")
        parts.append(self.message)
        if self.assignment_id:
            parts.append(f"(assignment {self.assignment_id})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating an assignment set."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type is error_type]


class ScheduleValidator:
    """Validates assignment sets against every booking rule.

    Example:
        >>> validator = ScheduleValidator(gate)
        >>> result = validator.validate(store.assignments, clients_map)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(
        self,
        gate: CoachAvailabilityGate,
        catalog: Optional[TimeSlotCatalog] = None,
    ):
        self.gate = gate
        self.catalog = catalog or DEFAULT_CATALOG

    def validate(
        self,
        assignments: Iterable[Assignment],
        clients_map: dict[str, Client],
    ) -> ValidationResult:
        """Validate a set of assignments.

        Args:
            assignments: Assignments to audit.
            clients_map: Dict mapping client IDs to Client objects.

        Returns:
            ValidationResult with is_valid flag, errors and review warnings.
        """
        result = ValidationResult(is_valid=True)
        assignments = list(assignments)

        self._validate_uniqueness(assignments, result)

        for assignment in assignments:
            self._validate_assignment(assignment, clients_map, result)

        return result

    def _validate_uniqueness(
        self,
        assignments: list[Assignment],
        result: ValidationResult,
    ) -> None:
        """Check no two assignments share date, slot and client."""
        seen: dict[tuple, str] = {}
        for assignment in assignments:
            key = assignment.booking_key
            if key in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_ASSIGNMENT,
                        message=(
                            f"Booked twice at {assignment.time_slot_id} on "
                            f"{assignment.date} (also {seen[key]})"
                        ),
                        assignment_id=assignment.id,
                        client_id=assignment.client_id,
                    )
                )
            else:
                seen[key] = assignment.id

    def _validate_assignment(
        self,
        assignment: Assignment,
        clients_map: dict[str, Client],
        result: ValidationResult,
    ) -> None:
        """Validate a single assignment."""
        if assignment.time_slot_id not in self.catalog:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNKNOWN_TIME_SLOT,
                    message=f"Unknown time slot: {assignment.time_slot_id}",
                    assignment_id=assignment.id,
                    client_id=assignment.client_id,
                )
            )

        status = self.gate.status_and_reason(assignment.coach_id, assignment.date)
        if not status.is_available:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.COACH_UNAVAILABLE,
                    message=(
                        f"Coach {assignment.coach_id} is {status.describe()} "
                        f"on {assignment.date}"
                    ),
                    assignment_id=assignment.id,
                    client_id=assignment.client_id,
                    details={"status": status.status.value, "reason": status.reason},
                )
            )

        if assignment.created_via is CreatedVia.SPECIAL:
            if not (assignment.justification or "").strip():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.MISSING_JUSTIFICATION,
                        message="Special assignment has no justification",
                        assignment_id=assignment.id,
                        client_id=assignment.client_id,
                    )
                )
            else:
                result.add_warning(
                    f"Special assignment {assignment.id} for {assignment.client_id} at "
                    f"{assignment.time_slot_id} on {assignment.date}: "
                    f"{assignment.justification}"
                )

        client = clients_map.get(assignment.client_id)
        if client is None:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNKNOWN_CLIENT,
                    message=f"Unknown client ID: {assignment.client_id}",
                    assignment_id=assignment.id,
                    client_id=assignment.client_id,
                )
            )
            return

        if client.program.value not in get_config().schedulable_programs:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.CLIENT_NOT_SCHEDULABLE,
                    message=f"Program {client.program.value} does not use individual sessions",
                    assignment_id=assignment.id,
                    client_id=client.id,
                )
            )

        if assignment.created_via is CreatedVia.NORMAL:
            self._validate_pattern(assignment, client, result)

    def _validate_pattern(
        self,
        assignment: Assignment,
        client: Client,
        result: ValidationResult,
    ) -> None:
        """Check a normal assignment lies inside the client's envelope."""
        weekday = weekday_of(assignment.date)
        if not client.works_on(weekday):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OUTSIDE_CLIENT_PATTERN,
                    message=f"Does not work on {weekday.label}s",
                    assignment_id=assignment.id,
                    client_id=client.id,
                )
            )

        if not client.is_available_for_slot(assignment.time_slot_id):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OUTSIDE_CLIENT_PATTERN,
                    message=f"Not available for the {assignment.time_slot_id} time slot",
                    assignment_id=assignment.id,
                    client_id=client.id,
                )
            )
