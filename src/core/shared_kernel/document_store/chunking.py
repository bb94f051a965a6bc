"""Chunked any-of queries.

The store caps any-of matches at MAX_ANY_OF_VALUES values, so matching a
larger id set means one query per chunk with the results merged.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from shared_kernel.document_store.ports import (
    MAX_ANY_OF_VALUES,
    AnyOf,
    DocumentStore,
    Filter,
    StoredDocument,
)


def chunked(values: Iterable[Any], size: int = MAX_ANY_OF_VALUES) -> Iterator[tuple]:
    """Split values into tuples of at most `size` items, preserving order.

    Duplicate values are dropped before chunking.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")

    unique = list(dict.fromkeys(values))
    for start in range(0, len(unique), size):
        yield tuple(unique[start : start + size])


async def query_any_of(
    store: DocumentStore,
    collection: str,
    field: str,
    values: Iterable[Any],
    filters: Sequence[Filter] = (),
) -> list[StoredDocument]:
    """Return documents whose `field` matches any of `values`.

    Issues one query per chunk of at most MAX_ANY_OF_VALUES values and
    merges the results, de-duplicated by document id. An empty value set
    returns an empty list without touching the store.

    Args:
        store: Document store to query
        collection: Collection to search
        field: Field matched against the values
        values: Values to match (any size)
        filters: Additional filters applied to every chunk
    """
    merged: dict[str, StoredDocument] = {}
    for chunk in chunked(values):
        documents = await store.query(collection, [*filters, AnyOf(field, chunk)])
        for document in documents:
            merged.setdefault(document.id, document)
    return list(merged.values())
