"""Rich terminal formatter for SDK Namecheck."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..resolution.models import NamingResult, Severity
from .base import BaseFormatter


def _severity_label(severity: Severity) -> str:
    if severity == Severity.ERROR:
        return "[red bold]error[/red bold]"
    return "[yellow]warning[/yellow]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: a diagnostics table followed by a summary line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result: NamingResult) -> None:
        if result.diagnostics:
            self.console.print(self._table(result))
        for rule, error in result.rule_errors.items():
            self.console.print(f"[yellow]Rule {escape(rule)} was skipped: {escape(error)}[/yellow]")
        style = "red" if result.has_errors else ("yellow" if result.diagnostics else "green")
        self.console.print(f"[{style}]{escape(result.summary())}[/{style}]")

    def format(self, result: NamingResult) -> str:
        # Rich output goes directly to console; capture it for callers that want text
        with self.console.capture() as capture:
            self.render(result)
        return capture.get()

    def _table(self, result: NamingResult) -> Table:
        table = Table(title="Naming diagnostics", show_lines=False)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Code", style="cyan", no_wrap=True)
        table.add_column("Target", style="bold")
        table.add_column("Message")
        for d in result.diagnostics:
            table.add_row(
                _severity_label(d.severity),
                d.code,
                escape(d.target),
                escape(d.message),
            )
        return table
