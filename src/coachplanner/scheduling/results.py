"""Result and state values returned by the scheduling entry points."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from coachplanner.domain.errors import BookingError, BookingErrorType
from coachplanner.domain.models import (
    Assignment,
    Client,
    Conflict,
    CopiedAssignment,
    CopiedSchedule,
)


@dataclass(frozen=True)
class SelectionState:
    """Which client, if any, is selected for click-to-book.

    ``client is None`` is the Idle state.
    """

    client: Optional[Client] = None

    @property
    def is_idle(self) -> bool:
        return self.client is None

    @property
    def client_id(self) -> Optional[str]:
        return self.client.id if self.client else None

    @classmethod
    def selected(cls, client: Client) -> "SelectionState":
        return cls(client=client)


IDLE = SelectionState()


@dataclass
class BookingResult:
    """Outcome of a click or a special booking.

    Attributes:
        state: Selection state after the call. Always Idle.
        assignment: The stored record on success.
        error: Why the booking was refused.
        conflicts: Conflicts reported by extra sources for SLOT_BLOCKED.
    """

    state: SelectionState = IDLE
    assignment: Optional[Assignment] = None
    error: Optional[BookingError] = None
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.assignment is not None and self.error is None

    @property
    def error_type(self) -> Optional[BookingErrorType]:
        return self.error.error_type if self.error else None

    @classmethod
    def ok(cls, assignment: Assignment) -> "BookingResult":
        return cls(assignment=assignment)

    @classmethod
    def failed(
        cls,
        error_type: BookingErrorType,
        message: str,
        conflicts: Optional[list[Conflict]] = None,
        **details,
    ) -> "BookingResult":
        return cls(
            error=BookingError(error_type, message, details),
            conflicts=list(conflicts or []),
        )


@dataclass
class CopyResult:
    """Outcome of copying a day: a snapshot or a NOTHING_TO_COPY error."""

    copied: Optional[CopiedSchedule] = None
    error: Optional[BookingError] = None

    @property
    def success(self) -> bool:
        return self.copied is not None


@dataclass(frozen=True)
class PasteFailure:
    """A valid preview entry whose creation failed during apply."""

    date: date
    assignment: CopiedAssignment
    message: str

    def __str__(self) -> str:
        return f"{self.date} {self.assignment.time_slot_id} {self.assignment.client_name}: {self.message}"


@dataclass
class PasteResult:
    """Outcome of applying a paste across one or more target dates.

    Attributes:
        succeeded: Assignments actually created, in creation order.
        failures: Entries whose creation raised.
        conflict_count: Entries flagged as conflicts during preview.
        cancelled: True if the caller stopped the paste part way.
        not_attempted: Valid entries never issued because of a cancel.
    """

    succeeded: list[Assignment] = field(default_factory=list)
    failures: list[PasteFailure] = field(default_factory=list)
    conflict_count: int = 0
    cancelled: bool = False
    not_attempted: int = 0

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def skipped(self) -> int:
        """Entries not created: preview conflicts plus failed creations."""
        return self.conflict_count + len(self.failures)
