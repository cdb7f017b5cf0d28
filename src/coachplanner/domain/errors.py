"""Error kinds surfaced to callers.

Business-rule violations are never raised; they are returned inside result
objects as a ``BookingError`` so callers can tell, for example, "wrong slot"
from "coach unavailable" from "already booked".
"""

from dataclasses import dataclass, field
from enum import Enum


class BookingErrorType(Enum):
    """Kinds of recoverable booking errors."""

    SLOT_NOT_IN_CLIENT_AVAILABILITY = "slot_not_in_client_availability"
    COACH_UNAVAILABLE = "coach_unavailable"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    CLIENT_NOT_FOUND = "client_not_found"
    NOTHING_TO_COPY = "nothing_to_copy"
    MISSING_JUSTIFICATION = "missing_justification"
    CLIENT_NOT_WORKING_DAY = "client_not_working_day"
    SLOT_BLOCKED = "slot_blocked"
    UNKNOWN_TIME_SLOT = "unknown_time_slot"
    NO_CLIENT_SELECTED = "no_client_selected"
    CLIENT_FULLY_SCHEDULED = "client_fully_scheduled"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass(frozen=True)
class BookingError:
    """A single recoverable error with a user-facing message."""

    error_type: BookingErrorType
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.error_type.value}] {self.message}"


class PersistenceError(Exception):
    """Raised by an AssignmentStore when a write cannot be committed."""
