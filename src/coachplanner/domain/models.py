"""Domain models for the session scheduling engine.

This module contains the core records the engine reasons about: clients,
coaches, time slots, assignments, the booking records that can block a slot,
and the computed structures produced by copy/paste and availability checks.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from coachplanner.domain.errors import BookingErrorType


class Weekday(Enum):
    """Day of the week, named the way client working days are stored."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map a ``date.weekday()`` index (Monday == 0) to a Weekday."""
        return _WEEKDAY_ORDER[index]

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)

    @property
    def label(self) -> str:
        """Display name, e.g. "Tuesday"."""
        return self.value.capitalize()

    @property
    def short_label(self) -> str:
        return self.label[:3]


_WEEKDAY_ORDER = list(Weekday)

WEEKDAYS = frozenset(
    {
        Weekday.MONDAY,
        Weekday.TUESDAY,
        Weekday.WEDNESDAY,
        Weekday.THURSDAY,
        Weekday.FRIDAY,
    }
)


class Program(Enum):
    """Client program. Grace clients do not use individual scheduling."""

    LIMITLESS = "limitless"
    NEW_OPTIONS = "new-options"
    BRIDGES = "bridges"
    GRACE = "grace"


class SlotCategory(Enum):
    """Category of a time slot.

    CORE slots are the normal bookable windows; every other category is a
    special slot that needs a justification to book.
    """

    CORE = "core"
    EARLY = "early"
    EXTENDED = "extended"
    WEEKEND = "weekend"
    CUSTOM = "custom"

    @property
    def is_special(self) -> bool:
        return self is not SlotCategory.CORE


CORE_SLOT_IDS = ("8-10", "10-12", "1230-230")

DEFAULT_TIME_SLOTS_BY_PROGRAM: dict[Program, frozenset[str]] = {
    Program.LIMITLESS: frozenset(CORE_SLOT_IDS),
    Program.NEW_OPTIONS: frozenset(CORE_SLOT_IDS),
    Program.BRIDGES: frozenset(CORE_SLOT_IDS),
    Program.GRACE: frozenset(),
}

DEFAULT_WORKING_DAYS_BY_PROGRAM: dict[Program, frozenset[Weekday]] = {
    Program.LIMITLESS: WEEKDAYS,
    Program.NEW_OPTIONS: WEEKDAYS,
    Program.BRIDGES: WEEKDAYS,
    Program.GRACE: frozenset(),
}


@dataclass(frozen=True)
class TimeSlot:
    """A named, fixed time window that can be booked.

    Attributes:
        id: Stable identifier stored on assignments (e.g. "8-10").
        label: Human-readable label.
        start_time: Start of the window. None for the custom slot.
        end_time: End of the window. None for the custom slot.
        category: Core or one of the special categories.
    """

    id: str
    label: str
    start_time: Optional[time]
    end_time: Optional[time]
    category: SlotCategory = SlotCategory.CORE

    @property
    def is_core(self) -> bool:
        return self.category is SlotCategory.CORE

    @property
    def is_special(self) -> bool:
        return self.category.is_special

    @property
    def duration_minutes(self) -> Optional[int]:
        """Length of the window in minutes, or None for custom slots."""
        if self.start_time is None or self.end_time is None:
            return None
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def __repr__(self) -> str:
        return f"TimeSlot({self.id}, {self.category.value})"


def _program_slots(program: Program) -> set[str]:
    return set(DEFAULT_TIME_SLOTS_BY_PROGRAM.get(program, CORE_SLOT_IDS))


def _program_days(program: Program) -> set[Weekday]:
    return set(DEFAULT_WORKING_DAYS_BY_PROGRAM.get(program, WEEKDAYS))


@dataclass
class Client:
    """A program participant who can be booked into sessions.

    ``working_days`` and ``available_time_slots`` define the client's normal
    availability envelope. When omitted they default to Monday-Friday and the
    three core slots.

    Attributes:
        id: Unique identifier for the client.
        name: Display name.
        program: The client's program.
        working_days: Weekdays the client normally works.
        available_time_slots: Slot ids the client can normally be booked into.
    """

    id: str
    name: str = ""
    program: Program = Program.LIMITLESS
    working_days: set[Weekday] = field(default_factory=lambda: set(WEEKDAYS))
    available_time_slots: set[str] = field(default_factory=lambda: set(CORE_SLOT_IDS))

    @classmethod
    def for_program(cls, id: str, name: str, program: Program) -> "Client":
        """Create a client with its program's default days and slots."""
        return cls(
            id=id,
            name=name,
            program=program,
            working_days=_program_days(program),
            available_time_slots=_program_slots(program),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def works_on(self, weekday: Weekday) -> bool:
        return weekday in self.working_days

    def is_available_for_slot(self, time_slot_id: str) -> bool:
        return time_slot_id in self.available_time_slots


@dataclass
class Coach:
    """A staff member who runs sessions.

    Per-date availability is not stored here; it comes from the
    CoachAvailabilityGate at query time.
    """

    id: str
    name: str = ""
    coach_type: str = "success"

    @property
    def display_name(self) -> str:
        return self.name or self.id


class CreatedVia(Enum):
    """How an assignment was created."""

    NORMAL = "normal"
    SPECIAL = "special"


@dataclass(frozen=True)
class Assignment:
    """A committed booking of one client to one coach in one slot on one date.

    No two assignments may share ``(date, time_slot_id, client_id)``. A coach
    may hold many assignments in the same slot.
    """

    id: str
    date: date
    time_slot_id: str
    coach_id: str
    client_id: str
    created_via: CreatedVia = CreatedVia.NORMAL
    justification: Optional[str] = None

    @property
    def booking_key(self) -> tuple[date, str, str]:
        """The uniqueness key ``(date, time_slot_id, client_id)``."""
        return (self.date, self.time_slot_id, self.client_id)

    @property
    def is_special(self) -> bool:
        return self.created_via is CreatedVia.SPECIAL


class AvailabilityStatus(Enum):
    """Per-date coach status."""

    AVAILABLE = "available"
    OFF = "off"
    SICK = "sick"
    VACATION = "vacation"


@dataclass(frozen=True)
class CoachAvailabilityRecord:
    """A coach's status for a single date."""

    coach_id: str
    date: date
    status: AvailabilityStatus
    reason: str = ""


@dataclass(frozen=True)
class CoachStatus:
    """Answer from the availability gate for one coach and date."""

    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    reason: str = ""

    @property
    def is_available(self) -> bool:
        return self.status is AvailabilityStatus.AVAILABLE

    def describe(self) -> str:
        """Status with the reason in parentheses, e.g. "sick (flu)"."""
        if self.reason:
            return f"{self.status.value} ({self.reason})"
        return self.status.value


class ConflictSourceKind(Enum):
    """Kind of collection that reported a conflict."""

    EXISTING_ASSIGNMENT = "existing_assignment"
    SESSION_BOOKING = "session_booking"
    WALKTHROUGH = "walkthrough"
    PENDING_REQUEST = "pending_request"


@dataclass(frozen=True)
class Conflict:
    """A single reason why a date/slot is already occupied."""

    source_kind: ConflictSourceKind
    reason: str
    client_id: Optional[str] = None
    record_id: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.source_kind.value}] {self.reason}"


class BookingStatus(Enum):
    """Status of a shared-room session or walkthrough booking."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Booking:
    """A training, walkthrough or shared-room session occupying a slot."""

    id: str
    date: date
    time_slot_id: str
    client_id: Optional[str] = None
    client_name: str = ""
    purpose: str = ""
    status: BookingStatus = BookingStatus.SCHEDULED


class RequestStatus(Enum):
    """Status of a client's scheduling request."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"

    @property
    def holds_slot(self) -> bool:
        return self in (RequestStatus.PENDING, RequestStatus.APPROVED)


@dataclass(frozen=True)
class SchedulingRequest:
    """A client's request for time with a coordinator."""

    id: str
    date: date
    time_slot_id: str
    client_id: str
    client_name: str = ""
    coordinator_type: str = ""
    status: RequestStatus = RequestStatus.PENDING


@dataclass(frozen=True)
class ClientAvailability:
    """How many of a client's configured slots remain open on a date."""

    client_id: str
    available_slots: int
    total_slots: int
    scheduled_slots: int
    is_fully_scheduled: bool


@dataclass(frozen=True)
class CopiedAssignment:
    """Snapshot of an assignment, denormalized with display labels."""

    assignment: Assignment
    coach_name: str
    client_name: str
    time_slot_label: str

    @property
    def time_slot_id(self) -> str:
        return self.assignment.time_slot_id

    @property
    def coach_id(self) -> str:
        return self.assignment.coach_id

    @property
    def client_id(self) -> str:
        return self.assignment.client_id


@dataclass(frozen=True)
class CopiedSchedule:
    """All assignments of a source date, held for a copy -> paste operation."""

    source_date: date
    assignments: tuple[CopiedAssignment, ...]
    copied_at: datetime

    def __len__(self) -> int:
        return len(self.assignments)


@dataclass(frozen=True)
class PasteConflict:
    """A snapshot entry that cannot be pasted onto a target date."""

    assignment: CopiedAssignment
    reason: str
    error_type: BookingErrorType

    def __str__(self) -> str:
        return self.reason


@dataclass
class PastePreview:
    """What a paste onto one target date would create and skip."""

    date: date
    valid_assignments: list[CopiedAssignment] = field(default_factory=list)
    conflicts: list[PasteConflict] = field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return len(self.valid_assignments)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)
