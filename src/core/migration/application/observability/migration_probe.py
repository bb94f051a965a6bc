"""Protocol for migration run observability.

Engines report progress through a probe rather than printing. The default
probe logs structured events; the CLI swaps in a console probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context

if TYPE_CHECKING:
    from migration.application.report import MigrationReport


class MigrationProbe(Protocol):
    """Domain probe for migration runs."""

    def run_started(self, name: str, dry_run: bool) -> None:
        """Record the start of a run."""
        ...

    def step(self, message: str) -> None:
        """Record a phase of the run."""
        ...

    def would_write(self, action: str, target: str) -> None:
        """Record a write that a dry run skipped."""
        ...

    def item_written(self, category: str, item_id: str, action: str) -> None:
        """Record a document created, updated or deleted."""
        ...

    def item_skipped(self, category: str, item_id: str, reason: str) -> None:
        """Record an item left untouched."""
        ...

    def item_failed(self, category: str, item_id: str, error: str) -> None:
        """Record an item that failed; the run continues."""
        ...

    def run_finished(self, report: MigrationReport) -> None:
        """Record the end of a run."""
        ...

    def with_context(self, context: ObservationContext) -> MigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMigrationProbe:
    """Default implementation of MigrationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._root_logger = logger or structlog.get_logger()
        self._context = context
        self._logger = bind_context(self._root_logger, context)

    def with_context(self, context: ObservationContext) -> DefaultMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultMigrationProbe(logger=self._root_logger, context=context)

    def run_started(self, name: str, dry_run: bool) -> None:
        self._logger.info("migration_started", migration=name, dry_run=dry_run)

    def step(self, message: str) -> None:
        self._logger.info("migration_step", message=message)

    def would_write(self, action: str, target: str) -> None:
        self._logger.info(
            "migration_dry_run_write",
            action=action,
            target=target,
        )

    def item_written(self, category: str, item_id: str, action: str) -> None:
        self._logger.debug(
            "migration_item_written",
            category=category,
            item_id=item_id,
            action=action,
        )

    def item_skipped(self, category: str, item_id: str, reason: str) -> None:
        self._logger.debug(
            "migration_item_skipped",
            category=category,
            item_id=item_id,
            reason=reason,
        )

    def item_failed(self, category: str, item_id: str, error: str) -> None:
        self._logger.warning(
            "migration_item_failed",
            category=category,
            item_id=item_id,
            error=error,
        )

    def run_finished(self, report: MigrationReport) -> None:
        self._logger.info(
            "migration_finished",
            migration=report.name,
            dry_run=report.dry_run,
            created=report.total_created,
            updated=report.total_updated,
            errors=len(report.errors),
        )
