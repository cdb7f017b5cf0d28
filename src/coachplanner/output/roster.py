"""Day roster grouping: slot -> coach -> clients.

The roster is the shape every output renders. Slots follow catalog order
(core first), coaches follow the order of the coach list passed in, and each
coach's clients are sorted by name.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from coachplanner.domain.calendar import DateLike, parse_date
from coachplanner.domain.models import Assignment, Client, Coach, SlotCategory, TimeSlot
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog


@dataclass(frozen=True)
class RosterEntry:
    """One booked client within a coach's slot."""

    assignment: Assignment
    client_name: str

    @property
    def is_special(self) -> bool:
        return self.assignment.is_special


@dataclass
class CoachGroup:
    """A coach and the clients booked with them in one slot."""

    coach_id: str
    coach_name: str
    entries: list[RosterEntry] = field(default_factory=list)

    @property
    def client_names(self) -> list[str]:
        return [e.client_name for e in self.entries]


@dataclass
class SlotGroup:
    """Every coach with at least one client in a slot."""

    time_slot: TimeSlot
    coaches: list[CoachGroup] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.coaches

    @property
    def session_count(self) -> int:
        return sum(len(g.entries) for g in self.coaches)


def build_day_roster(
    schedule_date: DateLike,
    assignments: Iterable[Assignment],
    clients: Iterable[Client],
    coaches: Iterable[Coach],
    catalog: Optional[TimeSlotCatalog] = None,
) -> list[SlotGroup]:
    """Group a date's assignments by slot and coach.

    Returns one SlotGroup per catalog slot, in catalog order. Assignments in
    slots the catalog does not know are grouped after the known slots.
    """
    catalog = catalog or DEFAULT_CATALOG
    d = parse_date(schedule_date)
    clients_map = {c.id: c for c in clients}
    coaches = list(coaches)
    coach_order = {c.id: i for i, c in enumerate(coaches)}
    coaches_map = {c.id: c for c in coaches}

    day = [a for a in assignments if a.date == d]

    slots = list(catalog)
    for unknown_id in sorted({a.time_slot_id for a in day if a.time_slot_id not in catalog}):
        slots.append(TimeSlot(unknown_id, unknown_id, None, None, SlotCategory.CUSTOM))

    roster = []
    for slot in slots:
        by_coach: dict[str, CoachGroup] = {}
        for assignment in day:
            if assignment.time_slot_id != slot.id:
                continue
            group = by_coach.get(assignment.coach_id)
            if group is None:
                coach = coaches_map.get(assignment.coach_id)
                group = CoachGroup(
                    coach_id=assignment.coach_id,
                    coach_name=coach.display_name if coach else assignment.coach_id,
                )
                by_coach[assignment.coach_id] = group
            client = clients_map.get(assignment.client_id)
            group.entries.append(
                RosterEntry(
                    assignment=assignment,
                    client_name=client.display_name if client else assignment.client_id,
                )
            )

        groups = sorted(
            by_coach.values(),
            key=lambda g: (coach_order.get(g.coach_id, len(coach_order)), g.coach_id),
        )
        for group in groups:
            group.entries.sort(key=lambda e: e.client_name.lower())
        roster.append(SlotGroup(time_slot=slot, coaches=groups))

    return roster


def build_coach_roster(
    coach_id: str,
    schedule_date: DateLike,
    assignments: Iterable[Assignment],
    clients: Iterable[Client],
    coaches: Iterable[Coach],
    catalog: Optional[TimeSlotCatalog] = None,
) -> list[SlotGroup]:
    """Day roster restricted to a single coach."""
    mine = [a for a in assignments if a.coach_id == coach_id]
    return build_day_roster(schedule_date, mine, clients, coaches, catalog)
