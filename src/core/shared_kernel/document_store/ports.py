"""Port for the document store collaborator.

The store is an eventually-consistent document database without
multi-document transactions. Queries support equality filters and a single
bounded any-of match per filter, ordering on one field and id-based cursors.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from shared_kernel.document_store.exceptions import QueryLimitExceededError

MAX_ANY_OF_VALUES = 10


@dataclass(frozen=True)
class FieldFilter:
    """Equality match on a single field."""

    field: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    """Match documents whose field equals any of the given values.

    The store rejects more than MAX_ANY_OF_VALUES values; use
    shared_kernel.document_store.chunking.query_any_of for larger sets.
    """

    field: str
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        if len(self.values) > MAX_ANY_OF_VALUES:
            raise QueryLimitExceededError(
                f"any-of on '{self.field}' has {len(self.values)} values, "
                f"limit is {MAX_ANY_OF_VALUES}"
            )


Filter = FieldFilter | AnyOf


@dataclass(frozen=True)
class OrderBy:
    """Single-field ordering for a query."""

    field: str
    descending: bool = False


@dataclass(frozen=True)
class StoredDocument:
    """A document as returned by the store: its id plus raw field data."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DocumentStore(Protocol):
    """Narrow CRUD and filtered-query interface over a document database."""

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        """Fetch a document by id, or None if it does not exist."""
        ...

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        order_by: OrderBy | None = None,
        start_after: str | None = None,
    ) -> list[StoredDocument]:
        """Return documents matching every filter.

        Args:
            collection: Collection to search
            filters: Equality and any-of filters, combined with AND
            limit: Maximum number of documents to return
            order_by: Optional ordering
            start_after: Id of the document after which results start
        """
        ...

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        document_id: str | None = None,
    ) -> str:
        """Create a document and return its id.

        When document_id is given the document is created under that id and
        DocumentAlreadyExistsError is raised if it is taken.
        """
        ...

    async def update(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        """Merge the given fields into an existing document."""
        ...

    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...
