"""Read-after-write confirmation for an eventually-consistent store."""

from __future__ import annotations

import asyncio

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from shared_kernel.document_store.exceptions import VisibilityTimeoutError
from shared_kernel.document_store.ports import DocumentStore, StoredDocument


async def wait_until_visible(
    store: DocumentStore,
    collection: str,
    document_id: str,
    attempts: int = 10,
    interval: float = 0.1,
) -> StoredDocument:
    """Re-read a just-written document until the store returns it.

    Dependent writes (a workspace referencing a new organization, for
    example) call this first instead of sleeping for a fixed period.

    Raises:
        VisibilityTimeoutError: If the document is still missing after
            `attempts` reads
    """
    polling = AsyncRetrying(
        retry=retry_if_result(lambda document: document is None),
        wait=wait_fixed(interval),
        stop=stop_after_attempt(attempts),
        sleep=asyncio.sleep,
    )
    try:
        return await polling(store.get, collection, document_id)
    except RetryError as e:
        raise VisibilityTimeoutError(collection, document_id, attempts) from e
