"""Store-backed implementation of IWorkspaceRepository."""

from __future__ import annotations

from shared_kernel.document_store import DocumentStore, FieldFilter, upsert
from tenancy.domain.aggregates import Workspace
from tenancy.domain.value_objects import OrganizationId, WorkspaceId
from tenancy.infrastructure.documents import WORKSPACES, WorkspaceDocument, parse_document


class WorkspaceRepository:
    """Maps Workspace aggregates to documents in the workspaces collection."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def save(self, workspace: Workspace) -> None:
        data = WorkspaceDocument.from_domain(workspace).to_data()
        await upsert(self._store, WORKSPACES, workspace.id.value, data)

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        document = await self._store.get(WORKSPACES, workspace_id.value)
        if document is None:
            return None
        return parse_document(WorkspaceDocument, WORKSPACES, document).to_domain(
            document.id
        )

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Workspace]:
        # Sorted here rather than in the query to avoid a composite index
        documents = await self._store.query(
            WORKSPACES, [FieldFilter("organizationId", organization_id.value)]
        )
        workspaces = [
            parse_document(WorkspaceDocument, WORKSPACES, d).to_domain(d.id)
            for d in documents
        ]
        return sorted(workspaces, key=lambda w: (w.created_at, w.id.value))

    async def get_default(self, organization_id: OrganizationId) -> Workspace | None:
        workspaces = await self.list_by_organization(organization_id)
        return workspaces[0] if workspaces else None

    async def delete(self, workspace_id: WorkspaceId) -> None:
        await self._store.delete(WORKSPACES, workspace_id.value)
