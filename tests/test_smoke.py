"""Smoke tests for end-to-end booking, copy/paste and the CLI."""

from datetime import date

import pytest

from coachplanner.cli import (
    book_sample_day,
    create_sample_clients,
    create_sample_coaches,
    main,
)
from coachplanner.domain.policies import RecordCoachAvailabilityGate
from coachplanner.domain.store import InMemoryAssignmentStore
from coachplanner.scheduling.assignment_engine import AssignmentEngine
from coachplanner.scheduling.replicator import DayReplicator
from coachplanner.validation.validator import ScheduleValidator

MONDAY = date(2024, 1, 15)


class TestSmoke:
    """End-to-end smoke tests for the scheduling system."""

    @pytest.fixture
    def clients(self):
        return create_sample_clients()

    @pytest.fixture
    def coaches(self):
        return create_sample_coaches()

    def test_book_validate_copy_paste(self, clients, coaches):
        gate = RecordCoachAvailabilityGate()
        store = InMemoryAssignmentStore()
        engine = AssignmentEngine(gate, store)

        refused = book_sample_day(engine, store, clients, coaches, MONDAY)
        assert refused == 0
        assert len(store.assignments) > 0
        assert all(a.client_id != "C7" for a in store.assignments)

        validator = ScheduleValidator(gate)
        clients_map = {c.id: c for c in clients}
        assert validator.validate(store.assignments, clients_map).is_valid

        replicator = DayReplicator(gate, store)
        copied = replicator.copy_day(MONDAY, store.assignments, clients, coaches).copied
        previews = replicator.build_paste_preview(
            copied, [date(2024, 1, 16)], clients, coaches, store.assignments
        )
        result = replicator.apply_paste(previews)
        assert result.success_count + result.skipped == len(copied)
        assert validator.validate(store.assignments, clients_map).is_valid

    def test_no_duplicates_after_booking_twice(self, clients, coaches):
        store = InMemoryAssignmentStore()
        engine = AssignmentEngine(RecordCoachAvailabilityGate(), store)
        book_sample_day(engine, store, clients, coaches, MONDAY)
        count = len(store.assignments)
        book_sample_day(engine, store, clients, coaches, MONDAY)
        assert len(store.assignments) == count
        keys = [a.booking_key for a in store.assignments]
        assert len(keys) == len(set(keys))


class TestCLI:
    """Tests for the command-line entry point."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_demo(self, capsys):
        assert main(["--log-level", "WARNING", "demo", "--date", "2024-01-15"]) == 0
        out = capsys.readouterr().out
        assert "Monday, January 15, 2024" in out
        assert "Validation: PASSED" in out

    def test_demo_pdf(self, tmp_path, capsys):
        pytest.importorskip("reportlab")
        path = tmp_path / "day.pdf"
        assert main(["--log-level", "WARNING", "demo", "--date", "2024-01-15", "-o", str(path)]) == 0
        assert path.exists()

    def test_copy_demo(self, capsys):
        assert main(["--log-level", "WARNING", "copy-demo", "--date", "2024-01-15", "--days", "3"]) == 0
        out = capsys.readouterr().out
        assert "COPY/PASTE REPORT" in out
        assert "Successfully pasted" in out
