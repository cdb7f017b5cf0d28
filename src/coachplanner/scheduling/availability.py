"""Availability resolution for clients on a given date.

All functions are pure over the snapshots passed in: which clients work a
date, and how many of each client's configured slots are still open.
"""

from typing import Iterable, Optional

from coachplanner.config import get_config
from coachplanner.domain.calendar import DateLike, parse_date, weekday_of
from coachplanner.domain.models import Assignment, Client, ClientAvailability


def schedulable_clients(
    clients: Iterable[Client],
    programs: Optional[Iterable[str]] = None,
) -> list[Client]:
    """Filter out clients whose program does not use individual scheduling.

    Args:
        clients: All clients.
        programs: Schedulable program ids. Defaults to the configured set.
    """
    allowed = set(programs) if programs is not None else get_config().schedulable_programs
    return [c for c in clients if c.program.value in allowed]


def resolve_available_clients(clients: Iterable[Client], schedule_date: DateLike) -> list[Client]:
    """Clients whose working days include the weekday of ``schedule_date``."""
    weekday = weekday_of(schedule_date)
    return [c for c in clients if c.works_on(weekday)]


def clients_available_for_time_slot(
    clients: Iterable[Client],
    schedule_date: DateLike,
    time_slot_id: str,
) -> list[Client]:
    """Clients who work the date and normally take the given slot."""
    return [
        c
        for c in resolve_available_clients(clients, schedule_date)
        if c.is_available_for_slot(time_slot_id)
    ]


def compute_client_availability(
    client: Client,
    assignments: Iterable[Assignment],
    schedule_date: DateLike,
) -> ClientAvailability:
    """Count a client's open slots on a date.

    Only assignments in the client's own configured slots count toward
    ``scheduled_slots``; special bookings in other slots do not use up
    normal capacity.
    """
    d = parse_date(schedule_date)
    total_slots = len(client.available_time_slots)
    scheduled_slots = sum(
        1
        for a in assignments
        if a.client_id == client.id
        and a.date == d
        and a.time_slot_id in client.available_time_slots
    )
    available_slots = total_slots - scheduled_slots

    return ClientAvailability(
        client_id=client.id,
        available_slots=available_slots,
        total_slots=total_slots,
        scheduled_slots=scheduled_slots,
        is_fully_scheduled=available_slots == 0 and total_slots > 0,
    )


def unscheduled_clients(
    clients: Iterable[Client],
    assignments: Iterable[Assignment],
    schedule_date: DateLike,
) -> list[tuple[Client, ClientAvailability]]:
    """Clients working the date who still have at least one open slot."""
    snapshot = list(assignments)
    result = []
    for client in resolve_available_clients(clients, schedule_date):
        availability = compute_client_availability(client, snapshot, schedule_date)
        if availability.available_slots > 0:
            result.append((client, availability))
    return result


def fully_scheduled_clients(
    clients: Iterable[Client],
    assignments: Iterable[Assignment],
    schedule_date: DateLike,
) -> list[tuple[Client, ClientAvailability]]:
    """Clients working the date whose every configured slot is booked."""
    snapshot = list(assignments)
    result = []
    for client in resolve_available_clients(clients, schedule_date):
        availability = compute_client_availability(client, snapshot, schedule_date)
        if availability.is_fully_scheduled:
            result.append((client, availability))
    return result
