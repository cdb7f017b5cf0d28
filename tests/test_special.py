"""Tests for special-scheduling classification."""

from datetime import date

import pytest

from coachplanner.domain.models import (
    Assignment,
    AvailabilityStatus,
    Client,
    Coach,
    CoachAvailabilityRecord,
    CreatedVia,
    Program,
    Weekday,
)
from coachplanner.domain.policies import RecordCoachAvailabilityGate
from coachplanner.scheduling.special import SpecialKind, SpecialSchedulingClassifier

MONDAY = date(2024, 1, 15)
TUESDAY = date(2024, 1, 16)
SATURDAY = date(2024, 1, 20)


class TestClassify:
    """Tests for SpecialSchedulingClassifier.classify."""

    @pytest.fixture
    def classifier(self):
        return SpecialSchedulingClassifier()

    @pytest.fixture
    def client(self):
        return Client("C1", "Alice", working_days={Weekday.MONDAY})

    def test_normal(self, classifier, client):
        assert classifier.classify(MONDAY, "8-10", client) is SpecialKind.NORMAL

    @pytest.mark.parametrize("slot", ["8-10", "7-9", "3-5", "custom", "weekend-morning"])
    def test_saturday_is_always_weekend(self, classifier, client, slot):
        assert classifier.classify(SATURDAY, slot, client) is SpecialKind.WEEKEND

    def test_weekend_slot_on_weekday(self, classifier, client):
        assert classifier.classify(MONDAY, "weekend-afternoon", client) is SpecialKind.WEEKEND

    def test_early_slot(self, classifier, client):
        assert classifier.classify(MONDAY, "730-930", client) is SpecialKind.EARLY

    def test_extended_slot(self, classifier, client):
        assert classifier.classify(TUESDAY, "2-4", client) is SpecialKind.EXTENDED

    def test_off_day(self, classifier, client):
        assert classifier.classify(TUESDAY, "8-10", client) is SpecialKind.OFF_DAY

    def test_requires_justification(self, classifier):
        assert classifier.requires_justification(SpecialKind.NORMAL) is False
        for kind in (SpecialKind.OFF_DAY, SpecialKind.EARLY, SpecialKind.WEEKEND):
            assert classifier.requires_justification(kind) is True


class TestSpecialHelpers:
    """Tests for slot offers, candidate lists and existing special bookings."""

    @pytest.fixture
    def classifier(self):
        return SpecialSchedulingClassifier()

    def test_slots_for_kind(self, classifier):
        assert [s.id for s in classifier.slots_for_kind(SpecialKind.EARLY)] == ["7-9", "730-930"]
        assert [s.id for s in classifier.slots_for_kind(SpecialKind.WEEKEND)] == [
            "weekend-morning",
            "weekend-afternoon",
            "custom",
        ]
        assert len(classifier.slots_for_kind(SpecialKind.OFF_DAY)) == 10
        assert len(classifier.slots_for_kind(SpecialKind.EXTENDED)) == 7

    def test_is_special_scheduling_needed(self, classifier):
        client = Client("C1", working_days={Weekday.MONDAY}, available_time_slots={"8-10"})
        assert classifier.is_special_scheduling_needed(MONDAY, "8-10", client) is False
        assert classifier.is_special_scheduling_needed(TUESDAY, "8-10", client) is True
        assert classifier.is_special_scheduling_needed(MONDAY, "10-12", client) is True

    def test_special_assignments(self, classifier):
        clients = [Client("C1", working_days={Weekday.MONDAY})]
        assignments = [
            Assignment("S1", MONDAY, "8-10", "K1", "C1"),
            Assignment("S2", TUESDAY, "8-10", "K1", "C1"),
            Assignment("S3", MONDAY, "7-9", "K1", "GONE", CreatedVia.SPECIAL, "early start"),
        ]
        assert [a.id for a in classifier.special_assignments(assignments, clients)] == [
            "S3",
            "S2",
        ]

    def test_candidate_clients_off_day(self, classifier):
        clients = [
            Client("C1", working_days={Weekday.MONDAY}),
            Client("C2", working_days={Weekday.TUESDAY}),
            Client.for_program("C3", "Gina", Program.GRACE),
        ]
        result = classifier.candidate_clients(SpecialKind.OFF_DAY, TUESDAY, clients, [])
        assert [c.id for c in result] == ["C1"]

    def test_candidate_clients_with_open_slots(self, classifier):
        clients = [
            Client("C1", available_time_slots={"8-10"}),
            Client("C2", available_time_slots={"8-10", "10-12"}),
        ]
        assignments = [
            Assignment("S1", MONDAY, "8-10", "K1", "C1"),
            Assignment("S2", MONDAY, "8-10", "K1", "C2"),
        ]
        result = classifier.candidate_clients(SpecialKind.EARLY, MONDAY, clients, assignments)
        assert [c.id for c in result] == ["C2"]

    def test_candidate_coaches(self, classifier):
        coaches = [Coach("K1"), Coach("K2"), Coach("K3", coach_type="grace")]
        gate = RecordCoachAvailabilityGate(
            [CoachAvailabilityRecord("K2", MONDAY, AvailabilityStatus.VACATION)]
        )
        result = classifier.candidate_coaches(coaches, MONDAY, gate)
        assert [c.id for c in result] == ["K1"]
