"""Store-backed implementation of ISubscriptionRepository."""

from __future__ import annotations

from shared_kernel.document_store import DocumentStore, FieldFilter, upsert
from tenancy.domain.aggregates import Subscription
from tenancy.domain.value_objects import OrganizationId
from tenancy.infrastructure.documents import (
    SUBSCRIPTIONS,
    SubscriptionDocument,
    parse_document,
)


class SubscriptionRepository:
    """Maps Subscription aggregates to documents in the subscriptions collection."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def save(self, subscription: Subscription) -> None:
        data = SubscriptionDocument.from_domain(subscription).to_data()
        await upsert(self._store, SUBSCRIPTIONS, subscription.id.value, data)

    async def get_by_organization(
        self, organization_id: OrganizationId
    ) -> Subscription | None:
        documents = await self._store.query(
            SUBSCRIPTIONS,
            [FieldFilter("organizationId", organization_id.value)],
            limit=1,
        )
        if not documents:
            return None
        document = documents[0]
        return parse_document(SubscriptionDocument, SUBSCRIPTIONS, document).to_domain(
            document.id
        )

    async def delete(self, subscription: Subscription) -> None:
        await self._store.delete(SUBSCRIPTIONS, subscription.id.value)
