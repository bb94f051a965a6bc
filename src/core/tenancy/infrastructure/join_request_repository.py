"""Store-backed implementation of IJoinRequestRepository."""

from __future__ import annotations

from shared_kernel.document_store import (
    DocumentStore,
    FieldFilter,
    OrderBy,
    StoredDocument,
    upsert,
)
from tenancy.domain.aggregates import JoinRequest
from tenancy.domain.value_objects import (
    JoinRequestId,
    JoinRequestStatus,
    OrganizationId,
    UserId,
)
from tenancy.infrastructure.documents import (
    JOIN_REQUESTS,
    JoinRequestDocument,
    parse_document,
)
from tenancy.ports.repositories import JoinRequestPage

_NEWEST_FIRST = OrderBy("requestedAt", descending=True)


class JoinRequestRepository:
    """Maps JoinRequest aggregates to documents in the organizationRequests collection."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def save(self, request: JoinRequest) -> None:
        data = JoinRequestDocument.from_domain(request).to_data()
        await upsert(self._store, JOIN_REQUESTS, request.id.value, data)

    async def get_by_id(self, request_id: JoinRequestId) -> JoinRequest | None:
        document = await self._store.get(JOIN_REQUESTS, request_id.value)
        return self._to_domain(document) if document else None

    async def find_pending(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> JoinRequest | None:
        documents = await self._store.query(
            JOIN_REQUESTS,
            [
                FieldFilter("organizationId", organization_id.value),
                FieldFilter("userId", user_id.value),
                FieldFilter("status", JoinRequestStatus.PENDING.value),
            ],
            limit=1,
        )
        return self._to_domain(documents[0]) if documents else None

    async def list_pending(
        self,
        organization_id: OrganizationId,
        limit: int = 50,
        cursor: str | None = None,
    ) -> JoinRequestPage:
        # Fetch one extra document to learn whether another page exists
        documents = await self._store.query(
            JOIN_REQUESTS,
            [
                FieldFilter("organizationId", organization_id.value),
                FieldFilter("status", JoinRequestStatus.PENDING.value),
            ],
            limit=limit + 1,
            order_by=_NEWEST_FIRST,
            start_after=cursor,
        )
        items = [self._to_domain(d) for d in documents[:limit]]
        next_cursor = items[-1].id.value if len(documents) > limit else None
        return JoinRequestPage(items=items, next_cursor=next_cursor)

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[JoinRequest]:
        documents = await self._store.query(
            JOIN_REQUESTS, [FieldFilter("organizationId", organization_id.value)]
        )
        return [self._to_domain(d) for d in documents]

    async def list_by_user(self, user_id: UserId) -> list[JoinRequest]:
        documents = await self._store.query(
            JOIN_REQUESTS,
            [FieldFilter("userId", user_id.value)],
            order_by=_NEWEST_FIRST,
        )
        return [self._to_domain(d) for d in documents]

    async def delete(self, request_id: JoinRequestId) -> None:
        await self._store.delete(JOIN_REQUESTS, request_id.value)

    def _to_domain(self, document: StoredDocument) -> JoinRequest:
        return parse_document(JoinRequestDocument, JOIN_REQUESTS, document).to_domain(
            document.id
        )
