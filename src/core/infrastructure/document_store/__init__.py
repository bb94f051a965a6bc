"""Document store adapters."""

from infrastructure.document_store.in_memory import InMemoryDocumentStore
from infrastructure.document_store.retrying import RetryingDocumentStore

__all__ = [
    "InMemoryDocumentStore",
    "RetryingDocumentStore",
]
