"""Tests for collaborator implementations: availability gate and store."""

from datetime import date

import pytest

from coachplanner.domain.errors import PersistenceError
from coachplanner.domain.models import (
    Assignment,
    AvailabilityStatus,
    Coach,
    CoachAvailabilityRecord,
    CoachStatus,
)
from coachplanner.domain.policies import RecordCoachAvailabilityGate
from coachplanner.domain.store import InMemoryAssignmentStore

MONDAY = date(2024, 1, 15)
TUESDAY = date(2024, 1, 16)


class TestRecordCoachAvailabilityGate:
    """Tests for RecordCoachAvailabilityGate."""

    @pytest.fixture
    def gate(self):
        return RecordCoachAvailabilityGate(
            [CoachAvailabilityRecord("K1", MONDAY, AvailabilityStatus.SICK, "flu")]
        )

    def test_no_record_means_available(self, gate):
        assert gate.is_available("K2", MONDAY) is True
        assert gate.is_available("K1", TUESDAY) is True

    def test_status_and_reason(self, gate):
        status = gate.status_and_reason("K1", MONDAY)
        assert status.status is AvailabilityStatus.SICK
        assert status.reason == "flu"
        assert status.describe() == "sick (flu)"
        assert gate.is_available("K1", MONDAY) is False

    def test_last_record_wins(self, gate):
        gate.set_record(CoachAvailabilityRecord("K1", MONDAY, AvailabilityStatus.AVAILABLE))
        assert gate.is_available("K1", MONDAY) is True

    def test_clear_record(self, gate):
        gate.clear_record("K1", MONDAY)
        assert gate.is_available("K1", MONDAY) is True

    def test_available_coaches(self, gate):
        coaches = [Coach("K1", "Kate"), Coach("K2", "Leo")]
        assert [c.id for c in gate.available_coaches(coaches, MONDAY)] == ["K2"]

    def test_describe_without_reason(self):
        assert CoachStatus(AvailabilityStatus.OFF).describe() == "off"


class TestInMemoryAssignmentStore:
    """Tests for InMemoryAssignmentStore."""

    @pytest.fixture
    def store(self):
        return InMemoryAssignmentStore()

    def _assignment(self, client_id="C1", slot="8-10", id=""):
        return Assignment(id, MONDAY, slot, "K1", client_id)

    def test_assigns_ids(self, store):
        first = store.create_assignment(self._assignment("C1"))
        second = store.create_assignment(self._assignment("C2"))
        assert first.id == "S00001"
        assert second.id == "S00002"
        assert store.get("S00001") == first

    def test_keeps_explicit_unused_id(self, store):
        stored = store.create_assignment(self._assignment(id="X1"))
        assert stored.id == "X1"

    def test_rejects_duplicate_booking_key(self, store):
        store.create_assignment(self._assignment())
        with pytest.raises(PersistenceError):
            store.create_assignment(self._assignment())
        assert len(store.assignments) == 1

    def test_remove_is_idempotent(self, store):
        stored = store.create_assignment(self._assignment())
        assert store.remove_assignment(stored.id) is True
        assert store.remove_assignment(stored.id) is False
        assert store.assignments == []

    def test_assignments_for_date(self, store):
        store.create_assignment(self._assignment())
        store.create_assignment(Assignment("", TUESDAY, "8-10", "K1", "C1"))
        assert len(store.assignments_for(MONDAY)) == 1
