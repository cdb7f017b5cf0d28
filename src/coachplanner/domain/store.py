"""Assignment persistence collaborator.

The engine hands new assignment records to an ``AssignmentStore`` and never
writes anything itself. ``InMemoryAssignmentStore`` backs the CLI demos and the
tests; it re-checks the duplicate invariant on write, which is the only guard
against two writers acting on stale snapshots.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from coachplanner.domain.errors import PersistenceError
from coachplanner.domain.models import Assignment

logger = logging.getLogger(__name__)


class AssignmentStore(ABC):
    """Persistence for assignment records."""

    @abstractmethod
    def create_assignment(self, assignment: Assignment) -> Assignment:
        """Persist a new assignment.

        The store may assign a new id; callers must use the returned record.

        Raises:
            PersistenceError: If the record cannot be committed.
        """
        pass

    @abstractmethod
    def remove_assignment(self, assignment_id: str) -> bool:
        """Remove an assignment. Returns False if the id did not exist."""
        pass


class InMemoryAssignmentStore(AssignmentStore):
    """Dict-backed store that assigns sequential ids."""

    def __init__(self, assignments: Optional[Iterable[Assignment]] = None):
        self._assignments: dict[str, Assignment] = {}
        self._ids = itertools.count(1)
        for assignment in assignments or []:
            self._assignments[assignment.id] = assignment

    @property
    def assignments(self) -> list[Assignment]:
        """Snapshot of every stored assignment."""
        return list(self._assignments.values())

    def assignments_for(self, schedule_date: date) -> list[Assignment]:
        return [a for a in self._assignments.values() if a.date == schedule_date]

    def get(self, assignment_id: str) -> Optional[Assignment]:
        return self._assignments.get(assignment_id)

    def _next_id(self) -> str:
        while True:
            candidate = f"S{next(self._ids):05d}"
            if candidate not in self._assignments:
                return candidate

    def create_assignment(self, assignment: Assignment) -> Assignment:
        key = assignment.booking_key
        if any(a.booking_key == key for a in self._assignments.values()):
            raise PersistenceError(
                f"Client {assignment.client_id} is already booked at "
                f"{assignment.time_slot_id} on {assignment.date}"
            )

        record_id = assignment.id
        if not record_id or record_id in self._assignments:
            record_id = self._next_id()

        stored = Assignment(
            id=record_id,
            date=assignment.date,
            time_slot_id=assignment.time_slot_id,
            coach_id=assignment.coach_id,
            client_id=assignment.client_id,
            created_via=assignment.created_via,
            justification=assignment.justification,
        )
        self._assignments[record_id] = stored
        logger.debug("Stored assignment %s", record_id)
        return stored

    def remove_assignment(self, assignment_id: str) -> bool:
        return self._assignments.pop(assignment_id, None) is not None
