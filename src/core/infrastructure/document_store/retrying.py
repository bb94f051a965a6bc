"""Document store decorator that retries transient read failures."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from shared_kernel.document_store.ports import (
    DocumentStore,
    Filter,
    OrderBy,
    StoredDocument,
)
from shared_kernel.document_store.retry import retry_read


class RetryingDocumentStore:
    """Wraps a DocumentStore, retrying get/query on TransientStoreError.

    Writes pass straight through: a failed write is reported to the caller
    rather than replayed.
    """

    def __init__(
        self,
        inner: DocumentStore,
        attempts: int = 3,
        base_delay: float = 0.2,
    ):
        self._inner = inner
        self._attempts = attempts
        self._base_delay = base_delay

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        return await retry_read(
            lambda: self._inner.get(collection, document_id),
            attempts=self._attempts,
            base_delay=self._base_delay,
        )

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        order_by: OrderBy | None = None,
        start_after: str | None = None,
    ) -> list[StoredDocument]:
        return await retry_read(
            lambda: self._inner.query(
                collection,
                filters,
                limit=limit,
                order_by=order_by,
                start_after=start_after,
            ),
            attempts=self._attempts,
            base_delay=self._base_delay,
        )

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        document_id: str | None = None,
    ) -> str:
        return await self._inner.create(collection, data, document_id=document_id)

    async def update(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        await self._inner.update(collection, document_id, data)

    async def delete(self, collection: str, document_id: str) -> None:
        await self._inner.delete(collection, document_id)
