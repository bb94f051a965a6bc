"""Command-line runners for the migration engines.

Each runner parses its arguments, asks for confirmation before writing,
runs one engine against the configured store and prints a summary.
Exit codes: 0 when the run completes (even with per-item errors) or is
cancelled, 1 when the store is unreachable or the run aborts, 130 on Ctrl+C.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infrastructure.document_store import RetryingDocumentStore
from infrastructure.document_store.firestore import FirestoreDocumentStore
from infrastructure.logging import configure_logging
from infrastructure.settings import get_migration_settings, get_store_settings
from migration.application import (
    CollectionCopy,
    MigrationReport,
    OrganizationBackfill,
    WorkspaceIdBackfill,
    WorkspaceOwnershipBackfill,
)
from migration.application.workspace_id_backfill import RESOURCE_COLLECTIONS
from migration.presentation.console_probe import ConsoleMigrationProbe
from shared_kernel.document_store import DocumentStore, StoreError

ENV_FILE = Path.cwd() / ".env"

CONFIRM_ANSWERS = ("y", "yes")


def build_store() -> DocumentStore:
    """Store for the configured project, with retried reads."""
    settings = get_store_settings()
    return RetryingDocumentStore(
        FirestoreDocumentStore.from_settings(settings),
        attempts=settings.read_retry_attempts,
        base_delay=settings.read_retry_base_delay_seconds,
    )


def confirm(console: Console, question: str) -> bool:
    """Ask a yes/no question; only y or yes proceeds."""
    answer = console.input(f"[bold]{escape(question)} (y/N):[/bold] ")
    return answer.strip().lower() in CONFIRM_ANSWERS


def render_report(console: Console, report: MigrationReport, max_errors: int) -> None:
    """Print the summary block: per-category counters, then errors."""
    title = "Migration Summary (dry run)" if report.dry_run else "Migration Summary"
    console.print(f"\n[bold cyan]=== {title} ===[/bold cyan]")

    table = Table(show_header=True, box=box.SIMPLE, padding=(0, 1))
    table.add_column("Category")
    for column in ("Created", "Updated", "Deleted", "Skipped", "Orphaned", "Errors"):
        table.add_column(column, justify="right")
    for category, counts in sorted(report.counts.items()):
        table.add_row(
            category,
            str(counts.created),
            str(counts.updated),
            str(counts.deleted),
            str(counts.skipped),
            str(counts.orphaned),
            str(counts.errored),
        )
    console.print(table)

    if report.findings:
        console.print("[yellow]⚠️  Data integrity issues found:[/yellow]")
        for finding in report.findings:
            console.print(f"  - {escape(finding.detail)}")
    elif report.name == "workspace-ids":
        console.print("[green]✓[/green] No data integrity issues found")

    if report.errors:
        console.print(f"\n[bold red]⚠️  Errors: {len(report.errors)}[/bold red]")
        for error in report.errors[:max_errors]:
            console.print(
                f"  - {escape(error.category)}/{escape(error.item_id)}: "
                f"{escape(error.error)}"
            )
        if len(report.errors) > max_errors:
            console.print(f"  ... and {len(report.errors) - max_errors} more errors")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Perform every read and decision but write nothing",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print every written document and debug logs",
    )


def _execute(
    console: Console,
    args: argparse.Namespace,
    run: Callable[[], Awaitable[MigrationReport | None]],
) -> int:
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        report = asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Interrupted by user[/yellow]")
        return 130
    except StoreError as e:
        console.print(f"\n[bold red]Migration failed:[/bold red] {escape(str(e))}")
        return 1

    if report is not None:
        render_report(console, report, get_migration_settings().max_reported_errors)
    return 0


def _cancelled(console: Console) -> None:
    console.print("Migration cancelled.")


def organizations_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migrate-to-organizations",
        description="Create organizations, workspaces and subscriptions for legacy users",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --dry-run
  %(prog)s --single-org
  %(prog)s --per-user
  %(prog)s --yes
        """,
    )
    _add_common_arguments(parser)
    grouping = parser.add_mutually_exclusive_group()
    grouping.add_argument(
        "--single-org",
        action="store_true",
        help="Put every user into one organization instead of grouping by email domain",
    )
    grouping.add_argument(
        "--per-user",
        action="store_true",
        help="Give every user an organization of their own",
    )
    return parser


def migrate_to_organizations_main(
    argv: Sequence[str] | None = None,
    store: DocumentStore | None = None,
    console: Console | None = None,
) -> int:
    """Entry point for migrate-to-organizations."""
    args = organizations_parser().parse_args(argv)
    console = console or Console()
    load_dotenv(ENV_FILE)

    console.print("[bold cyan]=== Migration Script: Users → Organizations ===[/bold cyan]")
    if not args.dry_run and not args.yes:
        console.print(
            "[yellow]⚠️  This will create organizations and update users, "
            "sessions, projects and themes.[/yellow]"
        )
        if not confirm(console, "Do you want to continue?"):
            _cancelled(console)
            return 0

    async def run() -> MigrationReport:
        backfill = OrganizationBackfill(
            store or build_store(),
            probe=ConsoleMigrationProbe(console, verbose=args.verbose),
        )
        return await backfill.run(
            dry_run=args.dry_run, single_org=args.single_org, per_user=args.per_user
        )

    return _execute(console, args, run)


def workspace_ids_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migrate-workspace-ids",
        description="Assign a workspaceId to sessions, projects and themes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --dry-run
  %(prog)s --collection sessions
        """,
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--collection",
        choices=RESOURCE_COLLECTIONS,
        default=None,
        help="Only migrate this collection (default: all)",
    )
    return parser


def migrate_workspace_ids_main(
    argv: Sequence[str] | None = None,
    store: DocumentStore | None = None,
    console: Console | None = None,
) -> int:
    """Entry point for migrate-workspace-ids."""
    args = workspace_ids_parser().parse_args(argv)
    console = console or Console()
    load_dotenv(ENV_FILE)

    collections = (args.collection,) if args.collection else RESOURCE_COLLECTIONS
    console.print("[bold cyan]=== Migration Script: Assign workspaceId to Resources ===[/bold cyan]")
    if not args.dry_run and not args.yes:
        console.print(f"This will update resources in: {', '.join(collections)}")
        if not confirm(console, "Do you want to continue?"):
            _cancelled(console)
            return 0

    async def run() -> MigrationReport:
        backfill = WorkspaceIdBackfill(
            store or build_store(),
            collections=collections,
            probe=ConsoleMigrationProbe(console, verbose=args.verbose),
        )
        return await backfill.run(dry_run=args.dry_run)

    return _execute(console, args, run)


def themes_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migrate-problem-spaces-to-themes",
        description="Copy problemSpaces into themes, or delete themes with --rollback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --dry-run
  %(prog)s
  %(prog)s --rollback
        """,
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--rollback",
        action="store_true",
        help="Delete every document in themes (asks for confirmation)",
    )
    return parser


def migrate_problem_spaces_to_themes_main(
    argv: Sequence[str] | None = None,
    store: DocumentStore | None = None,
    console: Console | None = None,
) -> int:
    """Entry point for migrate-problem-spaces-to-themes."""
    args = themes_parser().parse_args(argv)
    console = console or Console()
    load_dotenv(ENV_FILE)

    console.print("[bold cyan]=== Migration Script: problemSpaces → themes ===[/bold cyan]")

    async def run() -> MigrationReport | None:
        copy = CollectionCopy(
            store or build_store(),
            probe=ConsoleMigrationProbe(console, verbose=args.verbose),
        )

        if args.rollback:
            existing = await copy.count_target()
            if existing == 0:
                console.print(
                    f"No documents found in {copy.target} collection. Nothing to rollback."
                )
                return None
            if not args.dry_run and not confirm(
                console,
                f"This will permanently delete {existing} document(s) from "
                f"{copy.target}. Are you sure?",
            ):
                console.print("Rollback cancelled.")
                return None
            return await copy.rollback(dry_run=args.dry_run)

        if not args.dry_run and not args.yes:
            existing = await copy.count_target()
            if existing:
                console.print(
                    f"[yellow]⚠️  WARNING: {copy.target} collection already contains "
                    f"{existing} document(s).[/yellow]"
                )
            if not confirm(
                console, f"Copy all documents from {copy.source} to {copy.target}?"
            ):
                _cancelled(console)
                return None
        return await copy.copy(dry_run=args.dry_run)

    return _execute(console, args, run)


def workspace_ownership_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migrate-workspace-ownership",
        description="Set ownerId on workspaces from their createdBy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --dry-run
  %(prog)s --yes
        """,
    )
    _add_common_arguments(parser)
    return parser


def migrate_workspace_ownership_main(
    argv: Sequence[str] | None = None,
    store: DocumentStore | None = None,
    console: Console | None = None,
) -> int:
    """Entry point for migrate-workspace-ownership."""
    args = workspace_ownership_parser().parse_args(argv)
    console = console or Console()
    load_dotenv(ENV_FILE)

    console.print("[bold cyan]=== Migration Script: Workspace Ownership ===[/bold cyan]")

    async def run() -> MigrationReport | None:
        backfill = WorkspaceOwnershipBackfill(
            store or build_store(),
            probe=ConsoleMigrationProbe(console, verbose=args.verbose),
        )

        pending = await backfill.count_pending()
        if pending == 0:
            console.print("[green]✓[/green] All workspaces already have ownerId")
            return None
        if not args.dry_run and not args.yes:
            console.print(f"{pending} workspace(s) will get ownerId set from createdBy.")
            if not confirm(console, "Do you want to continue?"):
                _cancelled(console)
                return None
        return await backfill.run(dry_run=args.dry_run)

    return _execute(console, args, run)
