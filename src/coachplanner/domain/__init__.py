"""Domain models and collaborator interfaces for session scheduling."""

from coachplanner.domain.errors import BookingError, BookingErrorType, PersistenceError
from coachplanner.domain.models import (
    Assignment,
    AvailabilityStatus,
    Booking,
    BookingStatus,
    Client,
    ClientAvailability,
    Coach,
    CoachAvailabilityRecord,
    CoachStatus,
    Conflict,
    ConflictSourceKind,
    CopiedAssignment,
    CopiedSchedule,
    CreatedVia,
    PasteConflict,
    PastePreview,
    Program,
    RequestStatus,
    SchedulingRequest,
    SlotCategory,
    TimeSlot,
    Weekday,
)
from coachplanner.domain.policies import (
    CoachAvailabilityGate,
    ConflictSource,
    RecordCoachAvailabilityGate,
)
from coachplanner.domain.store import AssignmentStore, InMemoryAssignmentStore
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog

__all__ = [
    # Models
    "Assignment",
    "AvailabilityStatus",
    "Booking",
    "BookingStatus",
    "Client",
    "ClientAvailability",
    "Coach",
    "CoachAvailabilityRecord",
    "CoachStatus",
    "Conflict",
    "ConflictSourceKind",
    "CopiedAssignment",
    "CopiedSchedule",
    "CreatedVia",
    "PasteConflict",
    "PastePreview",
    "Program",
    "RequestStatus",
    "SchedulingRequest",
    "SlotCategory",
    "TimeSlot",
    "Weekday",
    # Errors
    "BookingError",
    "BookingErrorType",
    "PersistenceError",
    # Catalog
    "TimeSlotCatalog",
    "DEFAULT_CATALOG",
    # Collaborators
    "CoachAvailabilityGate",
    "RecordCoachAvailabilityGate",
    "ConflictSource",
    "AssignmentStore",
    "InMemoryAssignmentStore",
]
