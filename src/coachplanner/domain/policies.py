"""Collaborator interfaces consulted by the scheduling engine.

The engine does not own coach availability or the booking collections that can
veto a slot. Those are supplied as implementations of the interfaces below, so
they can be tested independently and replaced by storage-backed versions.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from coachplanner.domain.models import (
    AvailabilityStatus,
    Coach,
    CoachAvailabilityRecord,
    CoachStatus,
    Conflict,
)


class CoachAvailabilityGate(ABC):
    """Authoritative per-coach, per-date availability.

    The engine never overrides the gate; even special scheduling requires an
    available coach.
    """

    @abstractmethod
    def status_and_reason(self, coach_id: str, schedule_date: date) -> CoachStatus:
        """Get the coach's status and optional reason for a date."""
        pass

    def is_available(self, coach_id: str, schedule_date: date) -> bool:
        """Check whether the coach can take sessions on a date."""
        return self.status_and_reason(coach_id, schedule_date).is_available

    def available_coaches(self, coaches: Iterable[Coach], schedule_date: date) -> list[Coach]:
        """Filter coaches down to those available on a date."""
        return [c for c in coaches if self.is_available(c.id, schedule_date)]


class RecordCoachAvailabilityGate(CoachAvailabilityGate):
    """Gate backed by per-date status records.

    A coach with no record for a date is available. When several records
    exist for the same coach and date, the last one wins.

    Example:
        >>> gate = RecordCoachAvailabilityGate([
        ...     CoachAvailabilityRecord("K1", date(2024, 1, 15), AvailabilityStatus.SICK, "flu"),
        ... ])
        >>> gate.is_available("K1", date(2024, 1, 15))
        False
    """

    def __init__(self, records: Optional[Iterable[CoachAvailabilityRecord]] = None):
        self._records: dict[tuple[str, date], CoachAvailabilityRecord] = {}
        for record in records or []:
            self.set_record(record)

    def set_record(self, record: CoachAvailabilityRecord) -> None:
        """Add or replace the record for ``(coach_id, date)``."""
        self._records[(record.coach_id, record.date)] = record

    def clear_record(self, coach_id: str, schedule_date: date) -> None:
        """Remove any record so the coach is available again that date."""
        self._records.pop((coach_id, schedule_date), None)

    def status_and_reason(self, coach_id: str, schedule_date: date) -> CoachStatus:
        record = self._records.get((coach_id, schedule_date))
        if record is None:
            return CoachStatus(AvailabilityStatus.AVAILABLE)
        return CoachStatus(record.status, record.reason)


class ConflictSource(ABC):
    """A booking collection that can veto a candidate (date, slot).

    Each source decides its own rule: some block the whole slot regardless of
    who occupies it, others only report the same client double-booking, or
    only other clients' holds.
    """

    @abstractmethod
    def query(
        self,
        schedule_date: date,
        time_slot_id: str,
        candidate_client_id: Optional[str] = None,
    ) -> list[Conflict]:
        """Get conflicts for the candidate at a date and slot.

        Args:
            schedule_date: Date of the candidate booking.
            time_slot_id: Slot of the candidate booking.
            candidate_client_id: Client being booked, if known.

        Returns:
            Zero or more conflicts with human-readable reasons.
        """
        pass
