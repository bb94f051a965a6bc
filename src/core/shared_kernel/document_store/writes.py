"""Write helpers built on the DocumentStore port."""

from __future__ import annotations

from typing import Any

from shared_kernel.document_store.exceptions import DocumentNotFoundError
from shared_kernel.document_store.ports import DocumentStore


async def upsert(
    store: DocumentStore, collection: str, document_id: str, data: dict[str, Any]
) -> None:
    """Update a document, creating it under the same id if it does not exist.

    Two callers creating the same id concurrently surface as
    DocumentAlreadyExistsError from the second create.
    """
    try:
        await store.update(collection, document_id, data)
    except DocumentNotFoundError:
        await store.create(collection, data, document_id=document_id)
