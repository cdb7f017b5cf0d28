"""PDF generation for the daily session sheet.

This module creates a printable day sheet showing:
- Each time slot in catalog order
- The coaches working that slot and their booked clients
- Special sessions highlighted, with a per-slot session count
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from coachplanner.domain.calendar import format_date
from coachplanner.domain.models import SlotCategory
from coachplanner.output.roster import CoachGroup, SlotGroup

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    SlotCategory.CORE: (0.85, 0.92, 1.0),  # Light blue
    SlotCategory.EARLY: (1.0, 0.93, 0.8),  # Light orange
    SlotCategory.EXTENDED: (0.93, 0.87, 1.0),  # Light purple
    SlotCategory.WEEKEND: (0.87, 0.97, 0.87),  # Light green
    SlotCategory.CUSTOM: (0.93, 0.93, 0.93),  # Light gray
    "special": (0.8, 0.2, 0.2),  # Red text for special sessions
    "grid": (0.7, 0.7, 0.7),
}


class PDFGenerator:
    """Generates a printable PDF day sheet from a roster.

    Core slots are always listed; special slots appear only when something
    is booked in them.

    Example:
        >>> generator = PDFGenerator()
        >>> roster = build_day_roster(day, assignments, clients, coaches)
        >>> generator.generate(day, roster, "day_sheet.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        schedule_date,
        roster: list[SlotGroup],
        output_path: Union[str, Path],
    ) -> None:
        """Generate the day sheet and save to file.

        Args:
            schedule_date: Date shown in the header.
            roster: Slot groups from ``build_day_roster``.
            output_path: Path to save the PDF.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw_pages(c, schedule_date, roster)
        c.save()

    def generate_to_buffer(self, schedule_date, roster: list[SlotGroup]) -> BytesIO:
        """Generate the day sheet and return it as a bytes buffer.

        Args:
            schedule_date: Date shown in the header.
            roster: Slot groups from ``build_day_roster``.

        Returns:
            BytesIO buffer containing PDF data.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw_pages(c, schedule_date, roster)
        c.save()
        buffer.seek(0)
        return buffer

    def _visible_groups(self, roster: list[SlotGroup]) -> list[SlotGroup]:
        return [g for g in roster if g.time_slot.is_core or not g.is_empty]

    def _rows(self, roster: list[SlotGroup]) -> list[tuple[SlotGroup, Optional[CoachGroup]]]:
        """Flatten the roster into one row per (slot, coach)."""
        rows = []
        for group in self._visible_groups(roster):
            if group.is_empty:
                rows.append((group, None))
                continue
            for coach_group in group.coaches:
                rows.append((group, coach_group))
        return rows

    def _draw_pages(self, c, schedule_date, roster: list[SlotGroup]) -> None:
        """Draw the session table, paginating as needed."""
        rows = self._rows(roster)
        total_sessions = sum(g.session_count for g in roster)

        row_height = 22
        header_height = 70
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height))
        total_pages = max(1, (len(rows) + rows_per_page - 1) // rows_per_page)

        # Column layout
        slot_x = self.margin
        coach_x = self.margin + 230
        clients_x = self.margin + 390

        for page_index in range(total_pages):
            page_rows = rows[page_index * rows_per_page : (page_index + 1) * rows_per_page]

            self._draw_header(c, schedule_date, total_sessions)

            y = self.page_height - self.margin - header_height
            c.setFont("Helvetica-Bold", 10)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(slot_x, y, "Time Slot")
            c.drawString(coach_x, y, "Coach")
            c.drawString(clients_x, y, "Clients")

            previous_slot = None
            for group, coach_group in page_rows:
                y -= row_height
                self._draw_row(
                    c,
                    group,
                    coach_group,
                    show_slot=group.time_slot.id != previous_slot,
                    columns=(slot_x, coach_x, clients_x),
                    y=y,
                    height=row_height - 4,
                )
                previous_slot = group.time_slot.id

            self._draw_legend(c, self.margin, self.margin + 10)

            c.setFont("Helvetica", 9)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_index + 1} of {total_pages}",
            )
            c.showPage()

    def _draw_header(self, c, schedule_date, total_sessions: int) -> None:
        """Draw page header with date and totals."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Daily Session Schedule - {format_date(schedule_date)}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Total Sessions Scheduled: {total_sessions}",
        )

    def _draw_row(
        self,
        c,
        group: SlotGroup,
        coach_group: Optional[CoachGroup],
        show_slot: bool,
        columns: tuple[float, float, float],
        y: float,
        height: float,
    ) -> None:
        """Draw one (slot, coach) row of the table."""
        slot_x, coach_x, clients_x = columns
        right = self.page_width - self.margin

        c.setFillColorRGB(*COLORS.get(group.time_slot.category, COLORS[SlotCategory.CUSTOM]))
        c.rect(slot_x, y, right - slot_x, height, fill=1, stroke=0)
        c.setStrokeColorRGB(*COLORS["grid"])
        c.setLineWidth(0.5)
        c.line(slot_x, y, right, y)

        text_y = y + height / 2 - 3
        c.setFillColorRGB(0, 0, 0)
        if show_slot:
            c.setFont("Helvetica-Bold", 9)
            c.drawString(slot_x + 4, text_y, group.time_slot.label[:42])

        if coach_group is None:
            c.setFont("Helvetica-Oblique", 9)
            c.drawString(coach_x, text_y, "No sessions")
            return

        c.setFont("Helvetica", 9)
        c.drawString(coach_x, text_y, coach_group.coach_name[:26])

        x = clients_x
        for entry in coach_group.entries:
            label = entry.client_name + (" *" if entry.is_special else "")
            if entry.is_special:
                c.setFillColorRGB(*COLORS["special"])
            else:
                c.setFillColorRGB(0, 0, 0)
            c.drawString(x, text_y, label)
            x += c.stringWidth(label, "Helvetica", 9) + 12
            if x > right - 40:
                break

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for slot colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (SlotCategory.CORE, "Core"),
            (SlotCategory.EARLY, "Early"),
            (SlotCategory.EXTENDED, "Extended"),
            (SlotCategory.WEEKEND, "Weekend"),
            (SlotCategory.CUSTOM, "Custom"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 70

        c.setFillColorRGB(*COLORS["special"])
        c.drawString(current_x, y, "* special session")
