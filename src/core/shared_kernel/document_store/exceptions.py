"""Exceptions raised by document store adapters.

Adapters translate driver-specific failures into this hierarchy so that
application code can decide between retrying, recording a per-item failure,
or aborting a batch without knowing which store is underneath.
"""


class StoreError(Exception):
    """Base class for document store failures."""

    pass


class TransientStoreError(StoreError):
    """Raised for network hiccups, quota exhaustion and contention.

    Safe to retry with backoff for reads. Writes are not retried; batch
    callers record the item as failed and move on.
    """

    pass


class VisibilityTimeoutError(TransientStoreError):
    """Raised when a freshly written document never became readable."""

    def __init__(self, collection: str, document_id: str, attempts: int):
        self.collection = collection
        self.document_id = document_id
        self.attempts = attempts
        super().__init__(
            f"{collection}/{document_id} not visible after {attempts} attempts"
        )


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached or refuses our credentials.

    This is a connectivity-level failure and aborts migration batches.
    """

    pass


class QueryLimitExceededError(StoreError):
    """Raised when an any-of filter carries more values than the store accepts."""

    pass


class DocumentNotFoundError(StoreError):
    """Raised when updating or deleting a document that does not exist."""

    pass


class DocumentAlreadyExistsError(StoreError):
    """Raised when creating a document under an id that is already taken."""

    pass


class DocumentSchemaError(StoreError):
    """Raised when a stored document is missing invariant-bearing fields."""

    def __init__(self, collection: str, document_id: str, detail: str):
        self.collection = collection
        self.document_id = document_id
        self.detail = detail
        super().__init__(f"Invalid {collection}/{document_id}: {detail}")
