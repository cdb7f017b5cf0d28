"""Scheduling engine for booking clients into coach sessions."""

from coachplanner.scheduling.assignment_engine import AssignmentEngine
from coachplanner.scheduling.availability import (
    clients_available_for_time_slot,
    compute_client_availability,
    fully_scheduled_clients,
    resolve_available_clients,
    schedulable_clients,
    unscheduled_clients,
)
from coachplanner.scheduling.conflict_checker import (
    AssignmentConflictSource,
    BookingConflictSource,
    ConflictChecker,
    ConflictCheckResult,
    RequestConflictSource,
)
from coachplanner.scheduling.replicator import (
    DayReplicator,
    PreviewSummary,
    summarize_preview,
)
from coachplanner.scheduling.results import (
    IDLE,
    BookingResult,
    CopyResult,
    PasteFailure,
    PasteResult,
    SelectionState,
)
from coachplanner.scheduling.special import SpecialKind, SpecialSchedulingClassifier

__all__ = [
    # Engine
    "AssignmentEngine",
    "SelectionState",
    "IDLE",
    "BookingResult",
    # Availability
    "resolve_available_clients",
    "compute_client_availability",
    "schedulable_clients",
    "clients_available_for_time_slot",
    "unscheduled_clients",
    "fully_scheduled_clients",
    # Conflicts
    "ConflictChecker",
    "ConflictCheckResult",
    "AssignmentConflictSource",
    "BookingConflictSource",
    "RequestConflictSource",
    # Special scheduling
    "SpecialKind",
    "SpecialSchedulingClassifier",
    # Copy/paste
    "DayReplicator",
    "CopyResult",
    "PasteResult",
    "PasteFailure",
    "PreviewSummary",
    "summarize_preview",
]
