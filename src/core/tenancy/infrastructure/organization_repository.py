"""Store-backed implementation of IOrganizationRepository."""

from __future__ import annotations

from shared_kernel.document_store import (
    DocumentStore,
    FieldFilter,
    StoredDocument,
    upsert,
    wait_until_visible,
)
from tenancy.domain.aggregates import Organization
from tenancy.domain.value_objects import OrganizationId, UserId
from tenancy.infrastructure.documents import (
    ORGANIZATIONS,
    OrganizationDocument,
    parse_document,
)


class OrganizationRepository:
    """Maps Organization aggregates to documents in the organizations collection."""

    def __init__(
        self,
        store: DocumentStore,
        visibility_attempts: int = 10,
        visibility_interval: float = 0.1,
    ):
        self._store = store
        self._visibility_attempts = visibility_attempts
        self._visibility_interval = visibility_interval

    async def save(self, organization: Organization) -> None:
        data = OrganizationDocument.from_domain(organization).to_data()
        await upsert(self._store, ORGANIZATIONS, organization.id.value, data)

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        document = await self._store.get(ORGANIZATIONS, organization_id.value)
        return self._to_domain(document) if document else None

    async def find_by_subdomain(self, subdomain: str) -> list[Organization]:
        documents = await self._store.query(
            ORGANIZATIONS, [FieldFilter("subdomain", subdomain)]
        )
        organizations = [self._to_domain(d) for d in documents]
        return sorted(organizations, key=lambda o: (o.created_at, o.id.value))

    async def get_by_owner(self, owner_id: UserId) -> Organization | None:
        documents = await self._store.query(
            ORGANIZATIONS, [FieldFilter("ownerId", owner_id.value)], limit=1
        )
        return self._to_domain(documents[0]) if documents else None

    async def wait_until_visible(self, organization_id: OrganizationId) -> Organization:
        document = await wait_until_visible(
            self._store,
            ORGANIZATIONS,
            organization_id.value,
            attempts=self._visibility_attempts,
            interval=self._visibility_interval,
        )
        return self._to_domain(document)

    async def delete(self, organization_id: OrganizationId) -> None:
        await self._store.delete(ORGANIZATIONS, organization_id.value)

    def _to_domain(self, document: StoredDocument) -> Organization:
        return parse_document(OrganizationDocument, ORGANIZATIONS, document).to_domain(
            document.id
        )
