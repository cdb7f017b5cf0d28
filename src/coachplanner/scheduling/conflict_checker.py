"""Conflict detection for candidate bookings.

Every collection that can block a slot registers as a ``ConflictSource``. The
checker asks each one about a candidate (date, slot, client) and returns the
union of everything they report.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from coachplanner.domain.calendar import DateLike, parse_date
from coachplanner.domain.models import (
    Assignment,
    Booking,
    BookingStatus,
    Conflict,
    ConflictSourceKind,
    RequestStatus,
    SchedulingRequest,
)
from coachplanner.domain.policies import ConflictSource
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog

logger = logging.getLogger(__name__)

# Line prefixes used when rendering a conflict summary
_SUMMARY_PREFIX = {
    ConflictSourceKind.EXISTING_ASSIGNMENT: "Session",
    ConflictSourceKind.SESSION_BOOKING: "Room",
    ConflictSourceKind.WALKTHROUGH: "Training",
    ConflictSourceKind.PENDING_REQUEST: "Request",
}


class AssignmentConflictSource(ConflictSource):
    """Existing assignments; only the same client double-booking conflicts."""

    def __init__(
        self,
        assignments: Iterable[Assignment],
        catalog: Optional[TimeSlotCatalog] = None,
    ):
        self.assignments = list(assignments)
        self.catalog = catalog or DEFAULT_CATALOG

    def query(
        self,
        schedule_date: date,
        time_slot_id: str,
        candidate_client_id: Optional[str] = None,
    ) -> list[Conflict]:
        if candidate_client_id is None:
            return []
        label = self.catalog.label_for(time_slot_id)
        return [
            Conflict(
                source_kind=ConflictSourceKind.EXISTING_ASSIGNMENT,
                reason=f"Client is already scheduled at {label} on {schedule_date}",
                client_id=a.client_id,
                record_id=a.id,
            )
            for a in self.assignments
            if a.date == schedule_date
            and a.time_slot_id == time_slot_id
            and a.client_id == candidate_client_id
        ]


class BookingConflictSource(ConflictSource):
    """Trainings, walkthroughs and shared-room sessions.

    Any non-cancelled booking blocks the whole slot, whoever it belongs to.
    """

    def __init__(
        self,
        bookings: Iterable[Booking],
        kind: ConflictSourceKind = ConflictSourceKind.WALKTHROUGH,
    ):
        self.bookings = list(bookings)
        self.kind = kind

    def _describe(self, booking: Booking) -> str:
        who = booking.client_name or "another client"
        if self.kind is ConflictSourceKind.WALKTHROUGH:
            return f"Equipment walkthrough/training for {who}"
        return f"{who} - {booking.purpose or 'Session'}"

    def query(
        self,
        schedule_date: date,
        time_slot_id: str,
        candidate_client_id: Optional[str] = None,
    ) -> list[Conflict]:
        return [
            Conflict(
                source_kind=self.kind,
                reason=self._describe(b),
                client_id=b.client_id,
                record_id=b.id,
            )
            for b in self.bookings
            if b.date == schedule_date
            and b.time_slot_id == time_slot_id
            and b.status is not BookingStatus.CANCELLED
        ]


class RequestConflictSource(ConflictSource):
    """Other clients' pending or approved scheduling requests.

    Args:
        requests: Scheduling requests to check.
        coordinator_type: If set, only requests for this coordinator count.
    """

    def __init__(
        self,
        requests: Iterable[SchedulingRequest],
        coordinator_type: Optional[str] = None,
    ):
        self.requests = list(requests)
        self.coordinator_type = coordinator_type

    def query(
        self,
        schedule_date: date,
        time_slot_id: str,
        candidate_client_id: Optional[str] = None,
    ) -> list[Conflict]:
        conflicts = []
        for request in self.requests:
            if request.date != schedule_date or request.time_slot_id != time_slot_id:
                continue
            if not request.status.holds_slot:
                continue
            if candidate_client_id is not None and request.client_id == candidate_client_id:
                continue
            if self.coordinator_type and request.coordinator_type != self.coordinator_type:
                continue
            if request.status is RequestStatus.PENDING:
                kind = "Pending request"
            else:
                kind = "Approved session"
            conflicts.append(
                Conflict(
                    source_kind=ConflictSourceKind.PENDING_REQUEST,
                    reason=f"{kind} for {request.client_name or request.client_id}",
                    client_id=request.client_id,
                    record_id=request.id,
                )
            )
        return conflicts


@dataclass
class ConflictCheckResult:
    """Outcome of checking a candidate booking against every source."""

    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return not self.conflicts

    def summary(self) -> str:
        """User-facing description, empty when the slot is free."""
        if self.available:
            return ""
        lines = ["This time slot is already booked:"]
        for conflict in self.conflicts:
            prefix = _SUMMARY_PREFIX.get(conflict.source_kind, "Conflict")
            lines.append(f"  {prefix}: {conflict.reason}")
        return "\n".join(lines)


class ConflictChecker:
    """Queries registered conflict sources for a candidate booking.

    Sources are queried independently and the result is their union; the
    checker never stops at the first conflict.

    Example:
        >>> checker = ConflictChecker([AssignmentConflictSource(assignments)])
        >>> result = checker.check_conflicts(date(2024, 1, 15), "8-10", "C1")
        >>> result.available
        True
    """

    def __init__(self, sources: Optional[Iterable[ConflictSource]] = None):
        self.sources: list[ConflictSource] = list(sources or [])

    def register(self, source: ConflictSource) -> None:
        """Add another booking source."""
        self.sources.append(source)

    def check_conflicts(
        self,
        schedule_date: DateLike,
        time_slot_id: str,
        candidate_client_id: Optional[str] = None,
    ) -> ConflictCheckResult:
        d = parse_date(schedule_date)
        result = ConflictCheckResult()
        for source in self.sources:
            result.conflicts.extend(source.query(d, time_slot_id, candidate_client_id))

        if result.conflicts:
            logger.debug(
                "%d conflict(s) for client %s at %s on %s",
                len(result.conflicts),
                candidate_client_id,
                time_slot_id,
                d,
            )
        return result
