"""Command-line interface for the coachplanner session scheduling tool."""

import argparse
import sys
from datetime import date, timedelta
from typing import Optional

from coachplanner.domain.calendar import format_date, parse_date, today, upcoming_dates
from coachplanner.domain.models import (
    AvailabilityStatus,
    Client,
    Coach,
    CoachAvailabilityRecord,
    Program,
    Weekday,
)
from coachplanner.domain.policies import RecordCoachAvailabilityGate
from coachplanner.domain.store import InMemoryAssignmentStore
from coachplanner.logging_config import configure_logging
from coachplanner.output.pdf_generator import PDFGenerator
from coachplanner.output.report_generator import PasteReportGenerator
from coachplanner.output.roster import build_day_roster
from coachplanner.scheduling.assignment_engine import AssignmentEngine
from coachplanner.scheduling.availability import (
    compute_client_availability,
    resolve_available_clients,
    schedulable_clients,
)
from coachplanner.scheduling.replicator import DayReplicator
from coachplanner.scheduling.results import IDLE
from coachplanner.validation.validator import ScheduleValidator


def create_sample_clients() -> list[Client]:
    """Create sample clients across programs and working patterns."""
    mwf = {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}
    tth = {Weekday.TUESDAY, Weekday.THURSDAY}

    return [
        Client.for_program("C1", "Alice Adams", Program.LIMITLESS),
        Client.for_program("C2", "Ben Brooks", Program.NEW_OPTIONS),
        Client("C3", "Chloe Chen", Program.BRIDGES, working_days=mwf),
        Client("C4", "Dan Diaz", Program.LIMITLESS, available_time_slots={"8-10", "10-12"}),
        Client("C5", "Emma Evans", Program.NEW_OPTIONS, working_days=tth),
        Client("C6", "Finn Foster", Program.LIMITLESS, available_time_slots={"1230-230"}),
        Client.for_program("C7", "Gina Grant", Program.GRACE),
    ]


def create_sample_coaches() -> list[Coach]:
    """Create sample coaches, including one grace coach."""
    return [
        Coach("K1", "Kate Kim"),
        Coach("K2", "Leo Lopez"),
        Coach("K3", "Maya Moore"),
        Coach("K4", "Nate Nolan", coach_type="grace"),
    ]


def _first_weekday_on_or_after(d: date) -> date:
    while d.weekday() >= 5:
        d += timedelta(days=1)
    return d


def book_sample_day(
    engine: AssignmentEngine,
    store: InMemoryAssignmentStore,
    clients: list[Client],
    coaches: list[Coach],
    schedule_date: date,
) -> int:
    """Book every available client into their slots, rotating coaches.

    Returns:
        Number of bookings refused.
    """
    refused = 0
    coach_ids = [c.id for c in coaches if c.coach_type == "success"]
    turn = 0
    for client in resolve_available_clients(schedulable_clients(clients), schedule_date):
        for slot_id in sorted(client.available_time_slots):
            state = engine.select_client(IDLE, client, schedule_date, store.assignments)
            if state.is_idle:
                break
            coach_id = coach_ids[turn % len(coach_ids)]
            turn += 1
            result = engine.click_slot(state, schedule_date, coach_id, slot_id, store.assignments)
            if not result.success:
                refused += 1
                print(f"    Refused: {result.error}")
    return refused


def run_demo(date_str: Optional[str] = None, output_path: Optional[str] = None) -> None:
    """Run a demo day of bookings."""
    schedule_date = parse_date(date_str) if date_str else _first_weekday_on_or_after(today())
    print(f"Booking demo sessions for {format_date(schedule_date)}...")

    clients = create_sample_clients()
    coaches = create_sample_coaches()
    gate = RecordCoachAvailabilityGate(
        [CoachAvailabilityRecord("K3", schedule_date, AvailabilityStatus.SICK, "flu")]
    )
    store = InMemoryAssignmentStore()
    engine = AssignmentEngine(gate, store)

    refused = book_sample_day(engine, store, clients, coaches, schedule_date)

    # One special booking outside the normal pattern
    special = engine.book_special(
        schedule_date,
        clients[0],
        "K1",
        "3-5",
        "Make-up session after missed Monday",
        store.assignments,
    )
    if not special.success:
        print(f"    Special booking refused: {special.error}")

    print(f"\n  Sessions booked: {len(store.assignments)} ({refused} refused)")
    print("\n  Client availability:")
    for client in resolve_available_clients(schedulable_clients(clients), schedule_date):
        availability = compute_client_availability(client, store.assignments, schedule_date)
        print(
            f"    {client.display_name:<14} {availability.scheduled_slots}/"
            f"{availability.total_slots} booked"
            f"{' (full)' if availability.is_fully_scheduled else ''}"
        )

    validator = ScheduleValidator(gate)
    result = validator.validate(store.assignments, {c.id: c for c in clients})
    if result.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")
    for warning in result.warnings:
        print(f"    Warning: {warning}")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        roster = build_day_roster(schedule_date, store.assignments, clients, coaches)
        PDFGenerator().generate(schedule_date, roster, output_path)
        print("  PDF created successfully!")


def run_copy_demo(date_str: Optional[str] = None, days: int = 7) -> None:
    """Run a demo copy of one day onto the following days."""
    source_date = parse_date(date_str) if date_str else _first_weekday_on_or_after(today())
    targets = upcoming_dates(source_date, days)
    print(f"Copying {format_date(source_date)} onto the next {len(targets)} day(s)...")

    clients = create_sample_clients()
    coaches = create_sample_coaches()
    gate = RecordCoachAvailabilityGate()
    if targets:
        gate.set_record(
            CoachAvailabilityRecord("K2", targets[0], AvailabilityStatus.VACATION)
        )
    store = InMemoryAssignmentStore()
    engine = AssignmentEngine(gate, store)
    book_sample_day(engine, store, clients, coaches, source_date)

    replicator = DayReplicator(gate, store)
    copy_result = replicator.copy_day(source_date, store.assignments, clients, coaches)
    if not copy_result.success:
        print(f"  {copy_result.error}")
        return

    previews = replicator.build_paste_preview(
        copy_result.copied, targets, clients, coaches, store.assignments
    )
    result = replicator.apply_paste(previews)

    print()
    print(PasteReportGenerator().generate_to_string(copy_result.copied, previews, result))


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="coachplanner - Coaching Session Scheduling Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Book a demo day
  %(prog)s demo --date 2024-01-15        Book a demo for a specific date
  %(prog)s demo --output day.pdf         Generate the PDF day sheet

  %(prog)s copy-demo                     Copy a demo day onto the next 7 days
  %(prog)s copy-demo --days 14           Copy onto the next 14 days
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: COACHPLANNER_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Book a demo day of sessions")
    demo_parser.add_argument(
        "--date", "-d",
        type=str,
        default=None,
        help="Date to book (YYYY-MM-DD, default: next weekday)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output PDF file path",
    )

    # Copy demo command
    copy_parser = subparsers.add_parser(
        "copy-demo", help="Copy a demo day onto the following days"
    )
    copy_parser.add_argument(
        "--date", "-d",
        type=str,
        default=None,
        help="Source date (YYYY-MM-DD, default: next weekday)",
    )
    copy_parser.add_argument(
        "--days", "-n",
        type=int,
        default=7,
        help="Number of following days to paste onto (default: 7)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "demo":
        run_demo(args.date, args.output)
        return 0
    elif args.command == "copy-demo":
        run_copy_demo(args.date, args.days)
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
