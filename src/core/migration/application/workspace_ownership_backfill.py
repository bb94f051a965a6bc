"""Sets ownerId on workspaces created before workspace ownership existed.

The creator becomes the owner. Workspaces that already have an ownerId are
left alone; those without a createdBy cannot be resolved and are skipped.
"""

from __future__ import annotations

from datetime import UTC, datetime

from migration.application.observability import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from migration.application.report import MigrationReport
from shared_kernel.document_store import (
    DocumentStore,
    StoreError,
    StoreUnavailableError,
)
from tenancy.infrastructure.documents import WORKSPACES


class WorkspaceOwnershipBackfill:
    """Copies createdBy into ownerId for legacy workspaces."""

    def __init__(self, store: DocumentStore, probe: MigrationProbe | None = None):
        self._store = store
        self._probe = probe or DefaultMigrationProbe()

    async def count_pending(self) -> int:
        """Number of workspaces still without an ownerId."""
        documents = await self._store.query(WORKSPACES)
        return sum(1 for d in documents if not d.data.get("ownerId"))

    async def run(self, dry_run: bool = False) -> MigrationReport:
        """Backfill ownerId on every workspace missing one.

        Raises:
            StoreUnavailableError: If the store cannot be reached at all
        """
        report = MigrationReport(name="workspace-ownership", dry_run=dry_run)
        self._probe.run_started(report.name, dry_run)

        documents = await self._store.query(WORKSPACES)
        pending = [d for d in documents if not d.data.get("ownerId")]
        if len(documents) > len(pending):
            report.record_skipped(WORKSPACES, len(documents) - len(pending))
        self._probe.step(
            f"{WORKSPACES}: {len(documents)} total, {len(pending)} without ownerId"
        )

        for document in pending:
            owner_id = document.data.get("createdBy")
            if not owner_id:
                report.record_orphaned(WORKSPACES)
                self._probe.item_skipped(WORKSPACES, document.id, "No createdBy found")
                continue

            if dry_run:
                report.record_updated(WORKSPACES)
                self._probe.would_write(f"set ownerId={owner_id} for workspace", document.id)
                continue

            try:
                await self._store.update(
                    WORKSPACES,
                    document.id,
                    {"ownerId": owner_id, "updatedAt": datetime.now(UTC)},
                )
            except StoreUnavailableError:
                raise
            except StoreError as e:
                report.record_error(WORKSPACES, document.id, e)
                self._probe.item_failed(WORKSPACES, document.id, str(e))
                continue

            report.record_updated(WORKSPACES)
            self._probe.item_written(WORKSPACES, document.id, "updated")

        self._probe.run_finished(report)
        return report
