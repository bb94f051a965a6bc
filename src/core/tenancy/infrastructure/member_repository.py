"""Store-backed implementation of IMemberRepository.

Members live in the users collection. Only the tenancy fields are written;
profile fields owned elsewhere are never touched.
"""

from __future__ import annotations

from shared_kernel.document_store import DocumentStore, FieldFilter
from tenancy.domain.aggregates import Member
from tenancy.domain.value_objects import OrganizationId, UserId
from tenancy.infrastructure.documents import USERS, MemberDocument, parse_document


class MemberRepository:
    """Reads and writes the tenancy view of user documents."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def get_by_id(self, user_id: UserId) -> Member | None:
        document = await self._store.get(USERS, user_id.value)
        if document is None:
            return None
        return parse_document(MemberDocument, USERS, document).to_domain(document.id)

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Member]:
        documents = await self._store.query(
            USERS, [FieldFilter("organizationId", organization_id.value)]
        )
        return [
            parse_document(MemberDocument, USERS, d).to_domain(d.id) for d in documents
        ]

    async def save(self, member: Member) -> None:
        fields = MemberDocument.from_domain(member).tenancy_fields()
        await self._store.update(USERS, member.id.value, fields)
