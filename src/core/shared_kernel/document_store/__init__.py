"""Document store port shared by the tenancy and migration contexts."""

from shared_kernel.document_store.chunking import chunked, query_any_of
from shared_kernel.document_store.exceptions import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    DocumentSchemaError,
    QueryLimitExceededError,
    StoreError,
    StoreUnavailableError,
    TransientStoreError,
    VisibilityTimeoutError,
)
from shared_kernel.document_store.ports import (
    MAX_ANY_OF_VALUES,
    AnyOf,
    DocumentStore,
    FieldFilter,
    Filter,
    OrderBy,
    StoredDocument,
)
from shared_kernel.document_store.retry import retry_read
from shared_kernel.document_store.visibility import wait_until_visible
from shared_kernel.document_store.writes import upsert

__all__ = [
    "MAX_ANY_OF_VALUES",
    "AnyOf",
    "DocumentAlreadyExistsError",
    "DocumentNotFoundError",
    "DocumentSchemaError",
    "DocumentStore",
    "FieldFilter",
    "Filter",
    "OrderBy",
    "QueryLimitExceededError",
    "StoreError",
    "StoreUnavailableError",
    "StoredDocument",
    "TransientStoreError",
    "VisibilityTimeoutError",
    "chunked",
    "query_any_of",
    "retry_read",
    "upsert",
    "wait_until_visible",
]
