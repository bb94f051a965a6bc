"""In-process document store.

Used by tests and local dry runs. Mirrors the production store's query
semantics, including the any-of value limit, so code exercised against it
respects the same constraints.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any

from ulid import ULID

from shared_kernel.document_store.exceptions import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    QueryLimitExceededError,
)
from shared_kernel.document_store.ports import (
    MAX_ANY_OF_VALUES,
    AnyOf,
    FieldFilter,
    Filter,
    OrderBy,
    StoredDocument,
)


class InMemoryDocumentStore:
    """Dictionary-backed implementation of the DocumentStore port.

    Documents are deep-copied on the way in and out so callers cannot mutate
    stored state. Every query is appended to `queries` as
    (collection, filters) for assertions in tests.
    """

    def __init__(self, data: dict[str, dict[str, dict[str, Any]]] | None = None):
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(
            data or {}
        )
        self.queries: list[tuple[str, tuple[Filter, ...]]] = []

    def snapshot(self, collection: str) -> dict[str, dict[str, Any]]:
        """Return a copy of every document in a collection keyed by id."""
        return copy.deepcopy(self._collections.get(collection, {}))

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return None
        return StoredDocument(id=document_id, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        order_by: OrderBy | None = None,
        start_after: str | None = None,
    ) -> list[StoredDocument]:
        self.queries.append((collection, tuple(filters)))

        for query_filter in filters:
            if (
                isinstance(query_filter, AnyOf)
                and len(query_filter.values) > MAX_ANY_OF_VALUES
            ):
                raise QueryLimitExceededError(
                    f"any-of on '{query_filter.field}' exceeds {MAX_ANY_OF_VALUES}"
                )

        matches = [
            (document_id, data)
            for document_id, data in self._collections.get(collection, {}).items()
            if all(_matches(data, query_filter) for query_filter in filters)
        ]

        if order_by is not None:
            present = [m for m in matches if m[1].get(order_by.field) is not None]
            missing = [m for m in matches if m[1].get(order_by.field) is None]
            present.sort(
                key=lambda m: (m[1][order_by.field], m[0]),
                reverse=order_by.descending,
            )
            matches = present + missing

        if start_after is not None:
            ids = [document_id for document_id, _ in matches]
            if start_after in ids:
                matches = matches[ids.index(start_after) + 1 :]

        if limit is not None:
            matches = matches[:limit]

        return [
            StoredDocument(id=document_id, data=copy.deepcopy(data))
            for document_id, data in matches
        ]

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        document_id: str | None = None,
    ) -> str:
        documents = self._collections.setdefault(collection, {})
        document_id = document_id or str(ULID())
        if document_id in documents:
            raise DocumentAlreadyExistsError(f"{collection}/{document_id} exists")
        documents[document_id] = copy.deepcopy(data)
        return document_id

    async def update(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        documents = self._collections.get(collection, {})
        if document_id not in documents:
            raise DocumentNotFoundError(f"{collection}/{document_id} not found")
        documents[document_id].update(copy.deepcopy(data))

    async def delete(self, collection: str, document_id: str) -> None:
        self._collections.get(collection, {}).pop(document_id, None)


def _matches(data: dict[str, Any], query_filter: Filter) -> bool:
    match query_filter:
        case FieldFilter(field=field, value=value):
            return field in data and data[field] == value
        case AnyOf(field=field, values=values):
            return field in data and data[field] in values
    return False
