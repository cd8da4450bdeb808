from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import RelocationOutcome, RelocationRequest
from .validation import ValidationIssue, ValidationReport

# Color constants for status indicators
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
DIM_COLOR = "dim"

# Symbol indicators for quick scanning
SUCCESS_SYMBOL = "✓"
WARNING_SYMBOL = "⚠"
ERROR_SYMBOL = "✗"
SKIP_SYMBOL = "⊘"


class OutcomeTableRenderer:
    """Renders relocation outcomes and validation reports as Rich Tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    @staticmethod
    def _status(outcome: RelocationOutcome) -> str:
        """Return the colored status cell for an outcome."""
        if not outcome.ok:
            return f"[{ERROR_COLOR}]{ERROR_SYMBOL} failed[/{ERROR_COLOR}]"
        if outcome.is_noop:
            return f"[{DIM_COLOR}]{SKIP_SYMBOL} no change[/{DIM_COLOR}]"
        if outcome.deferred:
            return f"[{WARNING_COLOR}]{WARNING_SYMBOL} deferred[/{WARNING_COLOR}]"
        return f"[{SUCCESS_COLOR}]{SUCCESS_SYMBOL} ok[/{SUCCESS_COLOR}]"

    @staticmethod
    def _dim(value: Optional[str]) -> str:
        if value:
            return escape(value)
        return f"[{DIM_COLOR}]-[/{DIM_COLOR}]"

    def render_outcome_table(self, request: RelocationRequest, outcome: RelocationOutcome) -> Table:
        """Render one relocation decision.

        Args:
            request: The request that was relocated
            outcome: The decision returned by ``relocate``

        Returns:
            Rich Table instance ready to print
        """
        table = Table(title="Relocation Plan", show_header=True, header_style="bold")
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value")

        table.add_row("Status", self._status(outcome))
        table.add_row("Source", escape(request.file.path))

        if not outcome.ok:
            table.add_row("Error", f"[{ERROR_COLOR}]{outcome.kind.value}[/{ERROR_COLOR}]")
            table.add_row("Message", escape(outcome.message))
            return table

        destination = outcome.destination
        table.add_row("Filename", self._dim(outcome.filename))
        table.add_row("Destination", self._dim(destination.location if destination else None))
        table.add_row("Subfolder", self._dim(outcome.subfolder))
        if outcome.backup_path:
            table.add_row("Backup", escape(outcome.backup_path))
        if outcome.deferred:
            table.add_row("Deferred", ", ".join(outcome.deferred))
        return table

    def render_validation_table(self, report: ValidationReport) -> Optional[Table]:
        """Render validation issues, or ``None`` when there are none."""
        issues: List[ValidationIssue] = [*report.errors, *report.warnings]
        if not issues:
            return None

        table = Table(title="Settings Validation", show_header=True, header_style="bold")
        table.add_column("Severity", no_wrap=True)
        table.add_column("Path", style="cyan")
        table.add_column("Message")
        table.add_column("Suggestion", style=DIM_COLOR)

        for issue in issues:
            if issue.severity == "error":
                severity = f"[{ERROR_COLOR}]{ERROR_SYMBOL} error[/{ERROR_COLOR}]"
            else:
                severity = f"[{WARNING_COLOR}]{WARNING_SYMBOL} warning[/{WARNING_COLOR}]"
            table.add_row(severity, escape(issue.path), escape(issue.message), escape(issue.fix_suggestion or ""))
        return table

    def print_outcome(self, request: RelocationRequest, outcome: RelocationOutcome) -> None:
        self.console.print(self.render_outcome_table(request, outcome))

    def print_validation(self, report: ValidationReport) -> None:
        table = self.render_validation_table(report)
        if table is None:
            self.console.print(f"[{SUCCESS_COLOR}]{SUCCESS_SYMBOL} Settings are valid[/{SUCCESS_COLOR}]")
            return
        self.console.print(table)
