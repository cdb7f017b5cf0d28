"""Output generation for schedules (roster, text report, PDF)."""

from coachplanner.output.pdf_generator import PDFGenerator
from coachplanner.output.report_generator import (
    PasteReportGenerator,
    completion_message,
    confirmation_message,
)
from coachplanner.output.roster import (
    CoachGroup,
    RosterEntry,
    SlotGroup,
    build_coach_roster,
    build_day_roster,
)

__all__ = [
    "PDFGenerator",
    "PasteReportGenerator",
    "completion_message",
    "confirmation_message",
    "CoachGroup",
    "RosterEntry",
    "SlotGroup",
    "build_coach_roster",
    "build_day_roster",
]
