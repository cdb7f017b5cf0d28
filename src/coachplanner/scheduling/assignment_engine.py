"""Click-to-book assignment engine.

The engine applies the booking rules to a selected client and hands new
records to the assignment store. Selection is an explicit ``SelectionState``
value that callers pass in and get back; the engine itself only holds its
collaborators.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from coachplanner.domain.calendar import DateLike, parse_date
from coachplanner.domain.errors import BookingErrorType, PersistenceError
from coachplanner.domain.models import Assignment, Client, CreatedVia
from coachplanner.domain.policies import CoachAvailabilityGate, ConflictSource
from coachplanner.domain.store import AssignmentStore
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog
from coachplanner.scheduling.availability import compute_client_availability
from coachplanner.scheduling.conflict_checker import ConflictChecker
from coachplanner.scheduling.results import IDLE, BookingResult, SelectionState
from coachplanner.scheduling.special import SpecialKind, SpecialSchedulingClassifier

logger = logging.getLogger(__name__)


class AssignmentEngine:
    """Books clients into (date, coach, slot) cells.

    A normal booking goes through these checks in order, and the first
    failure wins:

    1. The slot is one of the client's available slots.
    2. The coach is available that date.
    3. The client is not already booked in that date and slot.
    4. No extra conflict source blocks the slot.

    Every call returns to Idle whatever the outcome.

    Example:
        >>> engine = AssignmentEngine(gate, store)
        >>> state = engine.select_client(IDLE, client)
        >>> result = engine.click_slot(state, date(2024, 1, 15), "K1", "8-10", [])
        >>> result.success, result.state.is_idle
        (True, True)
    """

    def __init__(
        self,
        gate: CoachAvailabilityGate,
        store: AssignmentStore,
        conflict_sources: Optional[Iterable[ConflictSource]] = None,
        catalog: Optional[TimeSlotCatalog] = None,
        classifier: Optional[SpecialSchedulingClassifier] = None,
    ):
        """Initialize the engine with its collaborators.

        Args:
            gate: Authoritative coach availability.
            store: Persistence for new assignment records.
            conflict_sources: Extra booking sources that can block a slot,
                such as walkthroughs or shared-room sessions.
            catalog: Time slot catalog.
            classifier: Special-scheduling classifier.
        """
        self.gate = gate
        self.store = store
        self.catalog = catalog or DEFAULT_CATALOG
        self.classifier = classifier or SpecialSchedulingClassifier(self.catalog)
        self.conflict_checker = ConflictChecker(conflict_sources)

    def select_client(
        self,
        state: SelectionState,
        client: Client,
        schedule_date: Optional[DateLike] = None,
        assignments: Optional[Iterable[Assignment]] = None,
    ) -> SelectionState:
        """Select, toggle off, or switch the selected client.

        When ``schedule_date`` and ``assignments`` are given, a client whose
        every slot is already booked that date cannot be selected and the
        state is returned unchanged.
        """
        if state.client_id == client.id:
            return IDLE

        if schedule_date is not None and assignments is not None:
            availability = compute_client_availability(client, assignments, schedule_date)
            if availability.is_fully_scheduled:
                logger.info(
                    "Client %s is fully scheduled on %s; selection refused",
                    client.id,
                    parse_date(schedule_date),
                )
                return state

        return SelectionState.selected(client)

    def click_slot(
        self,
        state: SelectionState,
        schedule_date: DateLike,
        coach_id: str,
        time_slot_id: str,
        assignments: Iterable[Assignment],
    ) -> BookingResult:
        """Book the selected client into a coach's slot on a date."""
        if state.is_idle:
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.NO_CLIENT_SELECTED,
                    "Select a client before choosing a time slot",
                )
            )

        return self._book(
            state.client,
            parse_date(schedule_date),
            coach_id,
            time_slot_id,
            assignments,
        )

    def book_special(
        self,
        schedule_date: DateLike,
        client: Client,
        coach_id: str,
        time_slot_id: str,
        justification: Optional[str],
        assignments: Iterable[Assignment],
    ) -> BookingResult:
        """Book a session outside the client's normal pattern.

        A booking that classifies as normal goes through the ordinary rules.
        Anything else needs a non-blank justification and skips only the
        slot membership check; the coach, duplicate and conflict checks still
        apply.
        """
        d = parse_date(schedule_date)
        if time_slot_id not in self.catalog:
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.UNKNOWN_TIME_SLOT,
                    f"Unknown time slot: {time_slot_id}",
                    time_slot_id=time_slot_id,
                )
            )

        kind = self.classifier.classify(d, time_slot_id, client)
        if kind is SpecialKind.NORMAL:
            return self._book(client, d, coach_id, time_slot_id, assignments)

        reason = (justification or "").strip()
        if not reason:
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.MISSING_JUSTIFICATION,
                    f"A reason is required for {kind.value} scheduling",
                    kind=kind.value,
                )
            )

        return self._book(
            client,
            d,
            coach_id,
            time_slot_id,
            assignments,
            created_via=CreatedVia.SPECIAL,
            justification=reason,
        )

    def remove_assignment(self, assignment_id: str) -> bool:
        """Remove an assignment. Removing a missing id is a no-op."""
        removed = self.store.remove_assignment(assignment_id)
        if removed:
            logger.info("Removed assignment %s", assignment_id)
        return removed

    def unassign_coach_for_date(
        self,
        coach_id: str,
        schedule_date: DateLike,
        assignments: Iterable[Assignment],
    ) -> list[str]:
        """Remove every assignment a coach holds on a date.

        Returns:
            Client ids of the removed assignments, in snapshot order.
        """
        d = parse_date(schedule_date)
        unassigned = []
        for assignment in assignments:
            if assignment.coach_id != coach_id or assignment.date != d:
                continue
            if self.store.remove_assignment(assignment.id):
                unassigned.append(assignment.client_id)

        if unassigned:
            logger.info(
                "Unassigned %d client(s) from coach %s on %s", len(unassigned), coach_id, d
            )
        return unassigned

    def _book(
        self,
        client: Client,
        d: date,
        coach_id: str,
        time_slot_id: str,
        assignments: Iterable[Assignment],
        created_via: CreatedVia = CreatedVia.NORMAL,
        justification: Optional[str] = None,
    ) -> BookingResult:
        label = self.catalog.label_for(time_slot_id)

        if created_via is CreatedVia.NORMAL and not client.is_available_for_slot(time_slot_id):
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.SLOT_NOT_IN_CLIENT_AVAILABILITY,
                    f"{client.display_name} is not available for the {label} time slot",
                    client_id=client.id,
                    time_slot_id=time_slot_id,
                )
            )

        coach_status = self.gate.status_and_reason(coach_id, d)
        if not coach_status.is_available:
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.COACH_UNAVAILABLE,
                    f"Coach {coach_id} is {coach_status.describe()} on {d}",
                    coach_id=coach_id,
                    status=coach_status.status.value,
                    reason=coach_status.reason,
                )
            )

        key = (d, time_slot_id, client.id)
        if any(a.booking_key == key for a in assignments):
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.DUPLICATE_ASSIGNMENT,
                    f"{client.display_name} is already scheduled at {label} on {d}",
                    client_id=client.id,
                    time_slot_id=time_slot_id,
                )
            )

        check = self.conflict_checker.check_conflicts(d, time_slot_id, client.id)
        if not check.available:
            return self._reject(
                BookingResult.failed(
                    BookingErrorType.SLOT_BLOCKED,
                    check.summary(),
                    conflicts=check.conflicts,
                )
            )

        candidate = Assignment(
            id="",
            date=d,
            time_slot_id=time_slot_id,
            coach_id=coach_id,
            client_id=client.id,
            created_via=created_via,
            justification=justification,
        )
        try:
            stored = self.store.create_assignment(candidate)
        except PersistenceError as e:
            logger.warning("Could not store assignment for %s: %s", client.id, e)
            return BookingResult.failed(BookingErrorType.PERSISTENCE_FAILED, str(e))

        logger.info(
            "Booked %s with coach %s at %s on %s (%s)",
            client.id,
            coach_id,
            time_slot_id,
            d,
            created_via.value,
        )
        return BookingResult.ok(stored)

    @staticmethod
    def _reject(result: BookingResult) -> BookingResult:
        logger.info("Booking rejected [%s]: %s", result.error.error_type.value, result.error.message)
        return result
