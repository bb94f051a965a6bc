"""Migration probe that prints human-readable progress to a rich console."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from migration.application.report import MigrationReport
    from shared_kernel.observability_context import ObservationContext


class ConsoleMigrationProbe:
    """Prints migration progress for an operator watching the run.

    Item writes are only printed with `verbose`; dry-run writes, skips with
    a reason and failures are always printed.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False):
        self._console = console or Console()
        self._verbose = verbose

    def with_context(self, context: ObservationContext) -> ConsoleMigrationProbe:
        return self

    def run_started(self, name: str, dry_run: bool) -> None:
        self._console.print(f"\n[bold cyan]=== Migration: {escape(name)} ===[/bold cyan]\n")
        if dry_run:
            self._console.print("[yellow]⚠️  DRY RUN MODE - No changes will be made[/yellow]\n")

    def step(self, message: str) -> None:
        self._console.print(escape(message))

    def would_write(self, action: str, target: str) -> None:
        self._console.print(escape(f"[DRY RUN] Would {action}: {target}"), style="dim")

    def item_written(self, category: str, item_id: str, action: str) -> None:
        if self._verbose:
            self._console.print(
                f"[green]✓[/green] {escape(action.capitalize())} {escape(category)}/{escape(item_id)}"
            )

    def item_skipped(self, category: str, item_id: str, reason: str) -> None:
        self._console.print(
            f"[yellow]⚠️[/yellow]  {escape(category)}/{escape(item_id)}: {escape(reason)}"
        )

    def item_failed(self, category: str, item_id: str, error: str) -> None:
        self._console.print(
            f"[bold red]✗[/bold red] Error on {escape(category)}/{escape(item_id)}: "
            f"{escape(error)}"
        )

    def run_finished(self, report: MigrationReport) -> None:
        if report.dry_run:
            self._console.print("\n[yellow]⚠️  This was a dry run. No changes were made.[/yellow]")
            self._console.print("Run without --dry-run to apply changes.")
        else:
            self._console.print(f"\n[green]✓[/green] {escape(report.name)} complete")
