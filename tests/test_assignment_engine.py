"""Tests for the click-to-book assignment engine."""

from datetime import date

import pytest

from coachplanner.domain.errors import BookingErrorType, PersistenceError
from coachplanner.domain.models import (
    Assignment,
    AvailabilityStatus,
    Booking,
    Client,
    CoachAvailabilityRecord,
    CreatedVia,
    Weekday,
)
from coachplanner.domain.policies import RecordCoachAvailabilityGate
from coachplanner.domain.store import AssignmentStore, InMemoryAssignmentStore
from coachplanner.scheduling.assignment_engine import AssignmentEngine
from coachplanner.scheduling.conflict_checker import BookingConflictSource
from coachplanner.scheduling.results import IDLE, SelectionState

MONDAY = date(2024, 1, 15)
TUESDAY = date(2024, 1, 16)
SATURDAY = date(2024, 1, 20)


class FailingStore(AssignmentStore):
    """Store whose writes always fail."""

    def create_assignment(self, assignment):
        raise PersistenceError("database unavailable")

    def remove_assignment(self, assignment_id):
        return False


class TestSelection:
    """Tests for the selection state transitions."""

    @pytest.fixture
    def engine(self):
        return AssignmentEngine(RecordCoachAvailabilityGate(), InMemoryAssignmentStore())

    @pytest.fixture
    def alice(self):
        return Client("C1", "Alice")

    @pytest.fixture
    def ben(self):
        return Client("C2", "Ben")

    def test_select_from_idle(self, engine, alice):
        state = engine.select_client(IDLE, alice)
        assert state.client_id == "C1"

    def test_same_client_toggles_off(self, engine, alice):
        state = engine.select_client(SelectionState.selected(alice), alice)
        assert state.is_idle

    def test_other_client_switches(self, engine, alice, ben):
        state = engine.select_client(SelectionState.selected(alice), ben)
        assert state.client_id == "C2"

    def test_fully_scheduled_client_refused(self, engine):
        client = Client("C1", "Alice", available_time_slots={"8-10"})
        assignments = [Assignment("S1", MONDAY, "8-10", "K1", "C1")]
        assert engine.select_client(IDLE, client, MONDAY, assignments) is IDLE

    def test_refusal_keeps_current_selection(self, engine, ben):
        full = Client("C1", "Alice", available_time_slots={"8-10"})
        assignments = [Assignment("S1", MONDAY, "8-10", "K1", "C1")]
        current = SelectionState.selected(ben)
        assert engine.select_client(current, full, MONDAY, assignments) is current


class TestClickSlot:
    """Tests for click_slot rules."""

    @pytest.fixture
    def gate(self):
        return RecordCoachAvailabilityGate(
            [CoachAvailabilityRecord("K2", MONDAY, AvailabilityStatus.SICK, "flu")]
        )

    @pytest.fixture
    def store(self):
        return InMemoryAssignmentStore()

    @pytest.fixture
    def engine(self, gate, store):
        return AssignmentEngine(gate, store)

    @pytest.fixture
    def client(self):
        return Client("C1", "Alice", available_time_slots={"8-10", "10-12"})

    @pytest.fixture
    def selected(self, client):
        return SelectionState.selected(client)

    def test_successful_booking(self, engine, store, selected):
        result = engine.click_slot(selected, MONDAY, "K1", "8-10", store.assignments)
        assert result.success
        assert result.state.is_idle
        assert result.assignment.created_via is CreatedVia.NORMAL
        assert result.assignment.booking_key == (MONDAY, "8-10", "C1")
        assert store.assignments == [result.assignment]

    def test_accepts_iso_date(self, engine, store, selected):
        result = engine.click_slot(selected, "2024-01-15", "K1", "8-10", store.assignments)
        assert result.assignment.date == MONDAY

    def test_idle_click_rejected(self, engine, store):
        result = engine.click_slot(IDLE, MONDAY, "K1", "8-10", store.assignments)
        assert result.error_type is BookingErrorType.NO_CLIENT_SELECTED
        assert store.assignments == []

    def test_slot_not_in_availability(self, engine, store, selected):
        result = engine.click_slot(selected, MONDAY, "K1", "1230-230", store.assignments)
        assert result.error_type is BookingErrorType.SLOT_NOT_IN_CLIENT_AVAILABILITY
        assert result.state.is_idle
        assert store.assignments == []

    def test_coach_unavailable(self, engine, store, selected):
        result = engine.click_slot(selected, MONDAY, "K2", "8-10", store.assignments)
        assert result.error_type is BookingErrorType.COACH_UNAVAILABLE
        assert result.error.details["status"] == "sick"
        assert result.error.details["reason"] == "flu"
        assert "sick (flu)" in result.error.message

    def test_slot_check_runs_before_coach_check(self, engine, store, selected):
        result = engine.click_slot(selected, MONDAY, "K2", "1230-230", store.assignments)
        assert result.error_type is BookingErrorType.SLOT_NOT_IN_CLIENT_AVAILABILITY

    def test_duplicate_rejected(self, engine, store, selected):
        engine.click_slot(selected, MONDAY, "K1", "8-10", store.assignments)
        result = engine.click_slot(selected, MONDAY, "K3", "8-10", store.assignments)
        assert result.error_type is BookingErrorType.DUPLICATE_ASSIGNMENT
        assert len(store.assignments) == 1

    def test_coach_may_take_many_clients(self, engine, store, selected):
        other = SelectionState.selected(Client("C2", "Ben"))
        engine.click_slot(selected, MONDAY, "K1", "8-10", store.assignments)
        result = engine.click_slot(other, MONDAY, "K1", "8-10", store.assignments)
        assert result.success
        assert len(store.assignments) == 2

    def test_working_days_not_checked_on_normal_path(self, engine, store):
        client = Client("C1", working_days={Weekday.MONDAY})
        result = engine.click_slot(
            SelectionState.selected(client), TUESDAY, "K1", "8-10", store.assignments
        )
        assert result.success

    def test_extra_source_blocks_slot(self, gate, store, selected):
        engine = AssignmentEngine(
            gate,
            store,
            conflict_sources=[
                BookingConflictSource([Booking("W1", MONDAY, "8-10", client_name="Zed")])
            ],
        )
        result = engine.click_slot(selected, MONDAY, "K1", "8-10", store.assignments)
        assert result.error_type is BookingErrorType.SLOT_BLOCKED
        assert len(result.conflicts) == 1
        assert store.assignments == []

    def test_persistence_failure_reported(self, gate, selected):
        engine = AssignmentEngine(gate, FailingStore())
        result = engine.click_slot(selected, MONDAY, "K1", "8-10", [])
        assert result.error_type is BookingErrorType.PERSISTENCE_FAILED
        assert "database unavailable" in result.error.message
        assert result.state.is_idle


class TestBookSpecial:
    """Tests for the special-scheduling path."""

    @pytest.fixture
    def gate(self):
        return RecordCoachAvailabilityGate(
            [CoachAvailabilityRecord("K2", SATURDAY, AvailabilityStatus.OFF)]
        )

    @pytest.fixture
    def store(self):
        return InMemoryAssignmentStore()

    @pytest.fixture
    def engine(self, gate, store):
        return AssignmentEngine(gate, store)

    @pytest.fixture
    def client(self):
        return Client("C1", "Alice", working_days={Weekday.MONDAY})

    def test_weekend_booking_with_reason(self, engine, store, client):
        result = engine.book_special(
            SATURDAY, client, "K1", "weekend-morning", "  Open house  ", store.assignments
        )
        assert result.success
        assert result.assignment.created_via is CreatedVia.SPECIAL
        assert result.assignment.justification == "Open house"

    def test_missing_justification(self, engine, store, client):
        result = engine.book_special(SATURDAY, client, "K1", "weekend-morning", "   ", store.assignments)
        assert result.error_type is BookingErrorType.MISSING_JUSTIFICATION
        assert store.assignments == []

    def test_unknown_slot(self, engine, store, client):
        result = engine.book_special(MONDAY, client, "K1", "9-11", "reason", store.assignments)
        assert result.error_type is BookingErrorType.UNKNOWN_TIME_SLOT

    def test_gate_still_applies(self, engine, store, client):
        result = engine.book_special(
            SATURDAY, client, "K2", "weekend-morning", "Open house", store.assignments
        )
        assert result.error_type is BookingErrorType.COACH_UNAVAILABLE

    def test_duplicate_still_applies(self, engine, store, client):
        engine.book_special(SATURDAY, client, "K1", "custom", "Event", store.assignments)
        result = engine.book_special(SATURDAY, client, "K3", "custom", "Event", store.assignments)
        assert result.error_type is BookingErrorType.DUPLICATE_ASSIGNMENT

    def test_off_day_bypasses_slot_membership(self, engine, store, client):
        client.available_time_slots = {"8-10"}
        result = engine.book_special(TUESDAY, client, "K1", "10-12", "Make-up", store.assignments)
        assert result.success
        assert result.assignment.is_special

    def test_normal_classification_uses_normal_rules(self, engine, store):
        client = Client("C1", available_time_slots={"8-10"})
        ok = engine.book_special(MONDAY, client, "K1", "8-10", None, store.assignments)
        assert ok.success
        assert ok.assignment.created_via is CreatedVia.NORMAL

        refused = engine.book_special(MONDAY, client, "K1", "10-12", "please", store.assignments)
        assert refused.error_type is BookingErrorType.SLOT_NOT_IN_CLIENT_AVAILABILITY


class TestRemoval:
    """Tests for removing assignments."""

    @pytest.fixture
    def store(self):
        return InMemoryAssignmentStore(
            [
                Assignment("S1", MONDAY, "8-10", "K1", "C1"),
                Assignment("S2", MONDAY, "10-12", "K1", "C2"),
                Assignment("S3", MONDAY, "8-10", "K2", "C3"),
                Assignment("S4", TUESDAY, "8-10", "K1", "C1"),
            ]
        )

    @pytest.fixture
    def engine(self, store):
        return AssignmentEngine(RecordCoachAvailabilityGate(), store)

    def test_remove_is_idempotent(self, engine):
        assert engine.remove_assignment("S1") is True
        assert engine.remove_assignment("S1") is False
        assert engine.remove_assignment("missing") is False

    def test_unassign_coach_for_date(self, engine, store):
        removed = engine.unassign_coach_for_date("K1", MONDAY, store.assignments)
        assert removed == ["C1", "C2"]
        assert sorted(a.id for a in store.assignments) == ["S3", "S4"]
