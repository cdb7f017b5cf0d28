"""Special-scheduling classification.

A booking is "special" when it falls outside a client's normal envelope:
a weekend, an early or extended slot, or a weekday the client does not
normally work. Special bookings need a written justification.
"""

from enum import Enum
from typing import Iterable, Optional

from coachplanner.config import get_config
from coachplanner.domain.calendar import DateLike, parse_date, weekday_of
from coachplanner.domain.models import (
    Assignment,
    Client,
    Coach,
    SlotCategory,
    TimeSlot,
)
from coachplanner.domain.policies import CoachAvailabilityGate
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog
from coachplanner.scheduling.availability import schedulable_clients


class SpecialKind(Enum):
    """Why a booking is outside the client's normal pattern."""

    OFF_DAY = "off-day"
    EARLY = "early"
    EXTENDED = "extended"
    WEEKEND = "weekend"
    NORMAL = "normal"


class SpecialSchedulingClassifier:
    """Classifies bookings and lists candidates for special scheduling."""

    def __init__(self, catalog: Optional[TimeSlotCatalog] = None):
        self.catalog = catalog or DEFAULT_CATALOG

    def classify(self, schedule_date: DateLike, time_slot_id: str, client: Client) -> SpecialKind:
        """Classify a (date, slot, client) booking.

        Rules apply in order: weekend (slot or date), early slot, extended
        slot, off day for the client, otherwise normal.
        """
        weekday = weekday_of(schedule_date)
        category = self.catalog.category_of(time_slot_id)

        if category is SlotCategory.WEEKEND or weekday.is_weekend:
            return SpecialKind.WEEKEND
        if category is SlotCategory.EARLY:
            return SpecialKind.EARLY
        if category is SlotCategory.EXTENDED:
            return SpecialKind.EXTENDED
        if not client.works_on(weekday):
            return SpecialKind.OFF_DAY
        return SpecialKind.NORMAL

    @staticmethod
    def requires_justification(kind: SpecialKind) -> bool:
        return kind is not SpecialKind.NORMAL

    def slots_for_kind(self, kind: SpecialKind) -> list[TimeSlot]:
        """Slots offered when booking a given kind of special session."""
        if kind is SpecialKind.EARLY:
            return self.catalog.by_category(SlotCategory.EARLY)
        if kind is SpecialKind.WEEKEND:
            return self.catalog.by_category(SlotCategory.WEEKEND, SlotCategory.CUSTOM)
        if kind is SpecialKind.OFF_DAY:
            return list(self.catalog)
        return self.catalog.special_slots

    def is_special_scheduling_needed(
        self, schedule_date: DateLike, time_slot_id: str, client: Client
    ) -> bool:
        """True for an off day, an off-pattern slot, or any special slot."""
        if not client.works_on(weekday_of(schedule_date)):
            return True
        if not client.is_available_for_slot(time_slot_id):
            return True
        slot = self.catalog.get(time_slot_id)
        return slot is not None and slot.is_special

    def special_assignments(
        self,
        assignments: Iterable[Assignment],
        clients: Iterable[Client],
    ) -> list[Assignment]:
        """Existing assignments that lie outside their client's pattern.

        Records created through the special path are always included, even
        when the client can no longer be resolved.
        """
        clients_map = {c.id: c for c in clients}
        result = []
        for assignment in assignments:
            client = clients_map.get(assignment.client_id)
            if assignment.is_special:
                result.append(assignment)
            elif client is not None and self.is_special_scheduling_needed(
                assignment.date, assignment.time_slot_id, client
            ):
                result.append(assignment)
        return sorted(result, key=lambda a: (a.date, self.catalog.order_of(a.time_slot_id)))

    def candidate_clients(
        self,
        kind: SpecialKind,
        schedule_date: DateLike,
        clients: Iterable[Client],
        assignments: Iterable[Assignment],
    ) -> list[Client]:
        """Clients who can be offered a special booking of ``kind``.

        For an off-day booking these are the schedulable clients who do not
        normally work that weekday. For every other kind they are the
        schedulable clients with fewer bookings that day than configured
        slots.
        """
        d = parse_date(schedule_date)
        weekday = weekday_of(d)
        eligible = schedulable_clients(clients)

        if kind is SpecialKind.OFF_DAY:
            return [c for c in eligible if not c.works_on(weekday)]

        snapshot = list(assignments)
        result = []
        for client in eligible:
            booked = sum(
                1
                for a in snapshot
                if a.client_id == client.id and a.date == d
            )
            if booked < len(client.available_time_slots):
                result.append(client)
        return result

    @staticmethod
    def candidate_coaches(
        coaches: Iterable[Coach],
        schedule_date: DateLike,
        gate: CoachAvailabilityGate,
    ) -> list[Coach]:
        """Available coaches whose type takes client sessions."""
        allowed = get_config().schedulable_coach_types
        d = parse_date(schedule_date)
        return [
            c for c in gate.available_coaches(coaches, d) if c.coach_type in allowed
        ]

