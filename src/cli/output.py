"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, a spinner for remote calls, and the run summaries.
Supports verbosity levels and the --no-color flag.
"""

from typing import Iterator, List
from contextlib import contextmanager

from rich.console import Console
from rich.spinner import Spinner
from rich.live import Live

from .models import StripSummary, SyncSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Resolving repositories..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Listing repositories..."):
            ...     pass
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_summary(self, summary: SyncSummary, dry_run: bool = False) -> None:
        """Display sync summary with color coding.

        Args:
            summary: Counters collected over the run
            dry_run: Word the summary as a preview
        """
        title = "Dry Run - Changes Preview" if dry_run else "Sync Summary"
        self.console.print(f"\n[bold]{title}:[/bold]")

        self.console.print(
            f"  Repositories: {len(summary.repos_succeeded)} synced, "
            f"{len(summary.repos_failed)} failed"
        )

        if summary.created_count > 0:
            self.console.print(f"  [green]+[/green] Created: {summary.created_count} file(s)")

        if summary.updated_count > 0:
            self.console.print(f"  [blue]→[/blue] Updated: {summary.updated_count} file(s)")

        if summary.pruned_count > 0:
            self.console.print(f"  [red]✗[/red] Pruned: {summary.pruned_count} file(s)")

        if summary.failed_file_count > 0:
            self.console.print(f"  [red]⚡[/red] Failed: {summary.failed_file_count} file(s)")

        if summary.unchanged_count > 0:
            self.console.print(f"  [dim]─[/dim] Unchanged: {summary.unchanged_count} file(s)")

        for repo_id in summary.repos_failed:
            self.console.print(f"  [red]✗[/red] {repo_id}")

        changes = summary.created_count + summary.updated_count + summary.pruned_count
        total = changes + summary.unchanged_count + summary.failed_file_count
        if summary.repos_failed:
            self.console.print("\n[red]Sync completed with failures[/red]")
        elif total == 0 and not summary.repos_removed:
            self.console.print("\n[yellow]No files to sync[/yellow]")
        elif changes == 0 and not summary.repos_removed:
            self.console.print("\n[green]Already in sync. No changes detected.[/green]")
        else:
            self.console.print("\n[green]Sync completed successfully[/green]")

    def print_cleanup_summary(self, removed: List[str], dry_run: bool = False) -> None:
        """Display repositories removed because they fell out of scope.

        Args:
            removed: Repository ids whose local trees were deleted
            dry_run: Word the summary as a preview
        """
        if not removed:
            return

        verb = "Would remove" if dry_run else "Removed"
        self.console.print(f"\n[bold]{verb} {len(removed)} repository folder(s):[/bold]")
        for repo_id in removed:
            self.console.print(f"  [red]✗[/red] {repo_id}")

    def print_strip_summary(self, summary: StripSummary) -> None:
        """Display results of removing annotations from mirrored files."""
        self.console.print("\n[bold]Strip Summary:[/bold]")

        if summary.stripped:
            self.console.print(f"  [green]✓[/green] Stripped: {len(summary.stripped)} file(s)")

        if summary.skipped:
            self.console.print(f"  [dim]─[/dim] Skipped: {len(summary.skipped)} file(s) without provenance")

        if summary.failed:
            self.console.print(f"  [red]✗[/red] Failed: {len(summary.failed)} file(s)")
            for path in summary.failed:
                self.console.print(f"    • {path}")

        if not summary.stripped and not summary.failed:
            self.console.print("\n[yellow]No mirrored files found[/yellow]")
