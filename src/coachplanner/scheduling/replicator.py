"""Copy one day's assignments and paste them onto other days.

Pasting is a two-step operation. ``build_paste_preview`` checks every copied
entry against each target date independently and sorts it into valid entries
and conflicts. ``apply_paste`` then creates the valid entries one by one.
A failed creation is logged and counted as skipped. It does not stop the
remaining creations and nothing already created is rolled back.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

from coachplanner.domain.calendar import DateLike, current_time, parse_date, weekday_of
from coachplanner.domain.errors import BookingError, BookingErrorType
from coachplanner.domain.models import (
    Assignment,
    Client,
    Coach,
    CopiedAssignment,
    CopiedSchedule,
    CreatedVia,
    PasteConflict,
    PastePreview,
)
from coachplanner.domain.policies import CoachAvailabilityGate
from coachplanner.domain.store import AssignmentStore
from coachplanner.domain.time_slots import DEFAULT_CATALOG, TimeSlotCatalog
from coachplanner.scheduling.results import CopyResult, PasteFailure, PasteResult

logger = logging.getLogger(__name__)

UNKNOWN_COACH = "Unknown Coach"
UNKNOWN_CLIENT = "Unknown Client"


@dataclass(frozen=True)
class PreviewSummary:
    """Totals across every target date of a paste preview."""

    total_valid: int
    total_conflicts: int
    target_dates: tuple[date, ...]

    @property
    def has_valid(self) -> bool:
        return self.total_valid > 0


def summarize_preview(previews: Iterable[PastePreview]) -> PreviewSummary:
    """Count valid and conflicting entries for a confirmation prompt."""
    previews = list(previews)
    return PreviewSummary(
        total_valid=sum(p.valid_count for p in previews),
        total_conflicts=sum(p.conflict_count for p in previews),
        target_dates=tuple(p.date for p in previews),
    )


class DayReplicator:
    """Copies a day's assignments and replays them onto target dates.

    Example:
        >>> replicator = DayReplicator(gate, store)
        >>> copied = replicator.copy_day(monday, assignments, clients, coaches).copied
        >>> previews = replicator.build_paste_preview(
        ...     copied, [tuesday], clients, coaches, assignments
        ... )
        >>> result = replicator.apply_paste(previews)
    """

    def __init__(
        self,
        gate: CoachAvailabilityGate,
        store: AssignmentStore,
        catalog: Optional[TimeSlotCatalog] = None,
    ):
        self.gate = gate
        self.store = store
        self.catalog = catalog or DEFAULT_CATALOG

    def copy_day(
        self,
        schedule_date: DateLike,
        assignments: Iterable[Assignment],
        clients: Iterable[Client] = (),
        coaches: Iterable[Coach] = (),
    ) -> CopyResult:
        """Snapshot every assignment of a date with display names.

        Returns:
            CopyResult with the snapshot, or a NOTHING_TO_COPY error when the
            date has no assignments.
        """
        d = parse_date(schedule_date)
        day_assignments = self.catalog.sort_by_slot(
            [a for a in assignments if a.date == d], key=lambda a: a.time_slot_id
        )
        if not day_assignments:
            return CopyResult(
                error=BookingError(
                    BookingErrorType.NOTHING_TO_COPY,
                    f"No assignments to copy for {d}",
                )
            )

        clients_map = {c.id: c for c in clients}
        coaches_map = {c.id: c for c in coaches}

        entries = []
        for assignment in day_assignments:
            coach = coaches_map.get(assignment.coach_id)
            client = clients_map.get(assignment.client_id)
            entries.append(
                CopiedAssignment(
                    assignment=assignment,
                    coach_name=coach.display_name if coach else UNKNOWN_COACH,
                    client_name=client.display_name if client else UNKNOWN_CLIENT,
                    time_slot_label=self.catalog.label_for(assignment.time_slot_id),
                )
            )

        copied = CopiedSchedule(
            source_date=d,
            assignments=tuple(entries),
            copied_at=current_time(),
        )
        logger.info("Copied %d assignment(s) from %s", len(copied), d)
        return CopyResult(copied=copied)

    def build_paste_preview(
        self,
        copied: CopiedSchedule,
        target_dates: Iterable[DateLike],
        clients: Iterable[Client],
        coaches: Iterable[Coach],
        assignments: Iterable[Assignment],
    ) -> list[PastePreview]:
        """Check every copied entry against each target date.

        Duplicate target dates are dropped, keeping first-seen order. Each
        date is evaluated only against assignments on that same date.
        """
        clients_map = {c.id: c for c in clients}
        coaches_map = {c.id: c for c in coaches}
        snapshot = list(assignments)

        previews = []
        seen = set()
        for value in target_dates:
            target = parse_date(value)
            if target in seen:
                continue
            seen.add(target)

            booked = {a.booking_key for a in snapshot if a.date == target}
            preview = PastePreview(date=target)
            for entry in copied.assignments:
                conflict = self._check_entry(entry, target, clients_map, coaches_map, booked)
                if conflict is None:
                    preview.valid_assignments.append(entry)
                else:
                    preview.conflicts.append(conflict)
            previews.append(preview)

        return previews

    def _check_entry(
        self,
        entry: CopiedAssignment,
        target: date,
        clients_map: dict[str, Client],
        coaches_map: dict[str, Coach],
        booked: set,
    ) -> Optional[PasteConflict]:
        """First failing paste check for one entry, or None if it is valid."""
        client = clients_map.get(entry.client_id)
        if client is None:
            return PasteConflict(
                entry, "Client no longer exists", BookingErrorType.CLIENT_NOT_FOUND
            )

        weekday = weekday_of(target)
        if not client.works_on(weekday):
            return PasteConflict(
                entry,
                f"{client.display_name} does not work on {weekday.label}s",
                BookingErrorType.CLIENT_NOT_WORKING_DAY,
            )

        if not client.is_available_for_slot(entry.time_slot_id):
            return PasteConflict(
                entry,
                f"{client.display_name} is not available for the "
                f"{entry.time_slot_label} time slot",
                BookingErrorType.SLOT_NOT_IN_CLIENT_AVAILABILITY,
            )

        status = self.gate.status_and_reason(entry.coach_id, target)
        if not status.is_available:
            coach = coaches_map.get(entry.coach_id)
            coach_name = coach.display_name if coach else entry.coach_name
            return PasteConflict(
                entry,
                f"Coach {coach_name} is {status.status.value} on this date",
                BookingErrorType.COACH_UNAVAILABLE,
            )

        if (target, entry.time_slot_id, entry.client_id) in booked:
            return PasteConflict(
                entry,
                f"{client.display_name} is already scheduled at "
                f"{entry.time_slot_label} on this date",
                BookingErrorType.DUPLICATE_ASSIGNMENT,
            )

        return None

    def apply_paste(
        self,
        previews: Iterable[PastePreview],
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> PasteResult:
        """Create every valid preview entry, one at a time.

        Args:
            previews: Previews from ``build_paste_preview``.
            should_continue: Optional callback asked before each creation.
                Once it returns False no further creations are issued;
                assignments already created stay in place.

        Returns:
            PasteResult with the created records and the skip count.
        """
        previews = list(previews)
        result = PasteResult(conflict_count=sum(p.conflict_count for p in previews))
        total_valid = sum(p.valid_count for p in previews)

        for preview in previews:
            for entry in preview.valid_assignments:
                if should_continue is not None and not should_continue():
                    result.cancelled = True
                    result.not_attempted = (
                        total_valid - result.success_count - len(result.failures)
                    )
                    logger.info(
                        "Paste cancelled after %d assignment(s), %d not attempted",
                        result.success_count,
                        result.not_attempted,
                    )
                    return result

                candidate = Assignment(
                    id="",
                    date=preview.date,
                    time_slot_id=entry.time_slot_id,
                    coach_id=entry.coach_id,
                    client_id=entry.client_id,
                    created_via=CreatedVia.NORMAL,
                )
                try:
                    stored = self.store.create_assignment(candidate)
                except Exception as e:
                    logger.exception(
                        "Error creating assignment for %s at %s on %s",
                        entry.client_id,
                        entry.time_slot_id,
                        preview.date,
                    )
                    result.failures.append(PasteFailure(preview.date, entry, str(e)))
                    continue
                result.succeeded.append(stored)

        logger.info(
            "Pasted %d assignment(s), skipped %d", result.success_count, result.skipped
        )
        return result
