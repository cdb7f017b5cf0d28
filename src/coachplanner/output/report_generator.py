"""Plain-text output for copy/paste operations.

This module creates text reports for:
- The copied day and its denormalized entries
- Per-target-date paste previews with their conflicts
- The confirmation prompt and the final paste outcome
"""

from collections import defaultdict
from pathlib import Path
from typing import Iterable, Optional, Union

from coachplanner.domain.calendar import format_date
from coachplanner.domain.models import CopiedSchedule, PastePreview
from coachplanner.scheduling.replicator import summarize_preview
from coachplanner.scheduling.results import PasteResult

NO_VALID_MESSAGE = "No valid assignments can be made to the selected dates due to conflicts."


def confirmation_message(previews: Iterable[PastePreview]) -> str:
    """Prompt shown before applying a paste."""
    summary = summarize_preview(previews)
    if not summary.has_valid:
        return NO_VALID_MESSAGE
    return (
        "Ready to paste schedule:\n"
        f"• {summary.total_valid} assignments will be created\n"
        f"• {summary.total_conflicts} assignments will be skipped due to conflicts\n"
        "\n"
        "Continue?"
    )


def completion_message(result: PasteResult) -> str:
    """Message shown after a paste has been applied."""
    message = (
        f"Successfully pasted {result.success_count} assignments! "
        f"{result.skipped} were skipped due to conflicts."
    )
    if result.cancelled:
        message += (
            " The paste was cancelled before it finished;"
            f" {result.not_attempted} were not attempted."
        )
    return message


class PasteReportGenerator:
    """Generates text reports for a copy/paste operation."""

    def generate(
        self,
        copied: CopiedSchedule,
        previews: list[PastePreview],
        output_path: Union[str, Path],
        result: Optional[PasteResult] = None,
    ) -> str:
        """Generate the report and save it to a file.

        Args:
            copied: The copied source day.
            previews: Paste previews per target date.
            output_path: Path to save the text file.
            result: Outcome of applying the paste, if it has been applied.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(copied, previews, result)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        copied: CopiedSchedule,
        previews: list[PastePreview],
        result: Optional[PasteResult] = None,
    ) -> str:
        """Generate the report and return it as a string."""
        lines = []

        lines.append("=" * 80)
        lines.append(f"COPY/PASTE REPORT - {format_date(copied.source_date)}")
        lines.append("=" * 80)
        lines.append("")

        lines.extend(self._copied_lines(copied))
        lines.append("")
        lines.extend(self._preview_lines(previews))
        lines.append("")
        lines.append(confirmation_message(previews))

        if result is not None:
            lines.append("")
            lines.extend(self._result_lines(result))

        lines.append("")
        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)

    def _copied_lines(self, copied: CopiedSchedule) -> list[str]:
        lines = ["-" * 80, f"COPIED ASSIGNMENTS ({len(copied)})", "-" * 80]
        lines.append(f"{'Time Slot':<28} {'Coach':<22} {'Client':<22}")
        lines.append("-" * 80)
        for entry in copied.assignments:
            lines.append(
                f"{entry.time_slot_label[:28]:<28} "
                f"{entry.coach_name[:22]:<22} "
                f"{entry.client_name[:22]:<22}"
            )
        lines.append(f"Copied at {copied.copied_at:%Y-%m-%d %H:%M:%S}")
        return lines

    def _preview_lines(self, previews: list[PastePreview]) -> list[str]:
        lines = ["-" * 80, "PASTE PREVIEW", "-" * 80]
        if not previews:
            lines.append("No target dates selected.")
            return lines

        for preview in previews:
            lines.append(
                f"{format_date(preview.date)}: {preview.valid_count} valid, "
                f"{preview.conflict_count} conflict(s)"
            )
            for conflict in preview.conflicts:
                entry = conflict.assignment
                lines.append(
                    f"  • {entry.time_slot_label}: {entry.client_name} - {conflict.reason}"
                )

        # Conflict reasons grouped by kind
        by_type: dict[str, int] = defaultdict(int)
        for preview in previews:
            for conflict in preview.conflicts:
                by_type[conflict.error_type.value] += 1
        if by_type:
            lines.append("")
            lines.append("Conflicts by type:")
            for error_type in sorted(by_type):
                lines.append(f"  {error_type:<34} {by_type[error_type]:>3}")
        return lines

    def _result_lines(self, result: PasteResult) -> list[str]:
        lines = ["-" * 80, "PASTE RESULT", "-" * 80, completion_message(result)]
        for failure in result.failures:
            lines.append(f"  Failed: {failure}")
        return lines
