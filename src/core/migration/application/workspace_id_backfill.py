"""Assigns a workspaceId to resources created before workspaces existed.

A resource's workspace is resolved through its owner: the owner's first
accessible workspace, or failing that the default workspace of the owner's
organization. Resources that already carry a workspaceId are never touched.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from migration.application.observability import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from migration.application.report import MigrationReport
from shared_kernel.document_store import (
    DocumentStore,
    StoredDocument,
    StoreError,
    StoreUnavailableError,
)
from tenancy.domain.value_objects import OrganizationId
from tenancy.infrastructure import WorkspaceRepository
from tenancy.infrastructure.documents import ORGANIZATIONS, USERS, WORKSPACES

RESOURCE_COLLECTIONS = ("sessions", "projects", "themes")


class WorkspaceIdBackfill:
    """Points legacy sessions, projects and themes at a workspace."""

    def __init__(
        self,
        store: DocumentStore,
        collections: Sequence[str] = RESOURCE_COLLECTIONS,
        probe: MigrationProbe | None = None,
    ):
        unknown = set(collections) - set(RESOURCE_COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {', '.join(sorted(unknown))}")

        self._store = store
        self._collections = tuple(collections)
        self._workspaces = WorkspaceRepository(store)
        self._probe = probe or DefaultMigrationProbe()
        self._resolved: dict[str, str | None] = {}

    async def run(self, dry_run: bool = False) -> MigrationReport:
        """Backfill every configured collection, then validate integrity.

        Raises:
            StoreUnavailableError: If the store cannot be reached at all
        """
        report = MigrationReport(name="workspace-ids", dry_run=dry_run)
        self._probe.run_started(report.name, dry_run)
        self._resolved.clear()

        for collection in self._collections:
            await self._backfill_collection(collection, report, dry_run)

        await self.validate(report)
        self._probe.run_finished(report)
        return report

    async def _backfill_collection(
        self, collection: str, report: MigrationReport, dry_run: bool
    ) -> None:
        self._probe.step(f"Migrating {collection}")
        documents = await self._store.query(collection)
        pending = [d for d in documents if not d.data.get("workspaceId")]
        self._probe.step(
            f"{collection}: {len(documents)} total, {len(pending)} without workspaceId"
        )

        if not pending:
            self._probe.step(f"All {collection} already have workspaceId")
            return

        for document in pending:
            await self._backfill_resource(collection, document, report, dry_run)

    async def _backfill_resource(
        self,
        collection: str,
        document: StoredDocument,
        report: MigrationReport,
        dry_run: bool,
    ) -> None:
        owner_id = document.data.get("userId") or document.data.get("createdBy")
        if not owner_id:
            report.record_orphaned(collection)
            self._probe.item_skipped(collection, document.id, "No userId found")
            return

        try:
            workspace_id = await self.resolve_workspace(owner_id)
            if workspace_id is None:
                report.record_skipped(collection)
                self._probe.item_skipped(
                    collection, document.id, f"User {owner_id} has no workspace"
                )
                return

            if dry_run:
                report.record_updated(collection)
                self._probe.would_write(
                    f"update {collection}/{document.id} with workspaceId", workspace_id
                )
                return

            await self._store.update(
                collection,
                document.id,
                {"workspaceId": workspace_id, "updatedAt": datetime.now(UTC)},
            )
        except StoreUnavailableError:
            raise
        except StoreError as e:
            report.record_error(collection, document.id, e)
            self._probe.item_failed(collection, document.id, str(e))
            return

        report.record_updated(collection)
        self._probe.item_written(collection, document.id, "updated")

    async def resolve_workspace(self, user_id: str) -> str | None:
        """Workspace a user's legacy resources belong to, cached per run."""
        if user_id in self._resolved:
            return self._resolved[user_id]

        workspace_id = None
        user = await self._store.get(USERS, user_id)
        if user is not None:
            workspace_ids = user.data.get("workspaceIds") or []
            if workspace_ids:
                workspace_id = workspace_ids[0]
            elif user.data.get("organizationId"):
                workspace = await self._workspaces.get_default(
                    OrganizationId.from_string(user.data["organizationId"])
                )
                workspace_id = workspace.id.value if workspace else None

        self._resolved[user_id] = workspace_id
        return workspace_id

    async def validate(self, report: MigrationReport) -> None:
        """Record integrity findings for tenancy data across the store."""
        self._probe.step("Validating data integrity")

        users = await self._store.query(USERS)
        for user in users:
            if not user.data.get("organizationId"):
                report.record_finding(
                    "user_without_organization",
                    user.id,
                    f"User {user.id} has no organizationId",
                )

        known_workspaces: dict[str, bool] = {}
        for collection in self._collections:
            for document in await self._store.query(collection):
                workspace_id = document.data.get("workspaceId")
                if not workspace_id:
                    continue
                if workspace_id not in known_workspaces:
                    known_workspaces[workspace_id] = (
                        await self._store.get(WORKSPACES, workspace_id) is not None
                    )
                if not known_workspaces[workspace_id]:
                    report.record_finding(
                        "missing_workspace",
                        document.id,
                        f"{collection}/{document.id} references missing "
                        f"workspace {workspace_id}",
                    )

        for workspace in await self._store.query(WORKSPACES):
            organization_id = workspace.data.get("organizationId")
            if (
                not organization_id
                or await self._store.get(ORGANIZATIONS, organization_id) is None
            ):
                report.record_finding(
                    "workspace_without_organization",
                    workspace.id,
                    f"Workspace {workspace.id} has no valid organizationId",
                )
