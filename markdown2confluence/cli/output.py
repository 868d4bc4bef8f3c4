"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines and the end-of-run summary. Diagnostic detail goes
through logging instead.
"""

from rich.console import Console

from ..sync_engine.models import SyncSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: 0=summary only, 1=info, 2=debug
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.print_summary(summary)
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def print_summary(self, summary: SyncSummary) -> None:
        """Display the sync summary with color coding.

        Failed documents are listed with the reason they failed.
        """
        title = "Dry Run - Changes Preview:" if summary.dry_run else "Sync Summary:"
        verb = "Would create" if summary.dry_run else "Created"
        update_verb = "Would update" if summary.dry_run else "Updated"

        self.console.print(f"\n[bold]{title}[/bold]")

        if summary.created_count > 0:
            self.console.print(f"  [green]+[/green] {verb}: {summary.created_count} page(s)")

        if summary.updated_count > 0:
            self.console.print(f"  [green]↑[/green] {update_verb}: {summary.updated_count} page(s)")

        if summary.unchanged_count > 0:
            self.console.print(f"  [dim]─[/dim] Unchanged: {summary.unchanged_count} page(s)")

        if summary.failed_count > 0:
            self.console.print(f"  [red]✗[/red] Failed: {summary.failed_count} document(s)")
            for result in summary.results:
                if not result.success:
                    self.console.print(f"      • {result.error}", markup=False)

        if not summary.results:
            self.console.print("\n[yellow]No documents to publish[/yellow]")
        elif summary.failed_count > 0:
            self.console.print("\n[red]Sync completed with failures[/red]")
        elif summary.created_count == 0 and summary.updated_count == 0:
            self.console.print()
            self.success("Already in sync. No changes detected.")
        else:
            self.console.print()
            self.success("Sync completed successfully")
