"""Firestore adapter for the DocumentStore port.

Translates google-cloud-firestore failures into the store exception
hierarchy: quota and availability problems become TransientStoreError,
credential and permission problems become StoreUnavailableError.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from google.api_core import exceptions as google_exceptions
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter as FirestoreFieldFilter

from infrastructure.settings import StoreSettings
from shared_kernel.document_store.exceptions import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    StoreError,
    StoreUnavailableError,
    TransientStoreError,
)
from shared_kernel.document_store.ports import (
    AnyOf,
    FieldFilter,
    Filter,
    OrderBy,
    StoredDocument,
)

_TRANSIENT_ERRORS = (
    google_exceptions.Aborted,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
    google_exceptions.ResourceExhausted,
    google_exceptions.RetryError,
    google_exceptions.ServiceUnavailable,
)

_UNAVAILABLE_ERRORS = (
    google_exceptions.PermissionDenied,
    google_exceptions.Unauthenticated,
    DefaultCredentialsError,
)


@contextmanager
def _translate_errors(
    collection: str, document_id: str | None = None
) -> Iterator[None]:
    target = f"{collection}/{document_id}" if document_id else collection
    try:
        yield
    except google_exceptions.NotFound as e:
        raise DocumentNotFoundError(f"{target} not found") from e
    except google_exceptions.AlreadyExists as e:
        raise DocumentAlreadyExistsError(f"{target} already exists") from e
    except _TRANSIENT_ERRORS as e:
        raise TransientStoreError(f"Transient failure on {target}: {e}") from e
    except _UNAVAILABLE_ERRORS as e:
        raise StoreUnavailableError(f"Store unavailable for {target}: {e}") from e
    except google_exceptions.GoogleAPICallError as e:
        raise StoreError(f"Store call failed on {target}: {e}") from e


class FirestoreDocumentStore:
    """DocumentStore backed by a Firestore AsyncClient."""

    def __init__(self, client: firestore.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> FirestoreDocumentStore:
        """Build a store using ambient credentials for the configured project.

        Raises:
            StoreUnavailableError: If no project is configured or no
                credentials can be found
        """
        if not settings.project_id:
            raise StoreUnavailableError(
                "No project configured; set FIREBASE_PROJECT_ID"
            )
        try:
            client = firestore.AsyncClient(
                project=settings.project_id,
                database=settings.database,
            )
        except DefaultCredentialsError as e:
            raise StoreUnavailableError(f"No credentials available: {e}") from e
        return cls(client)

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        with _translate_errors(collection, document_id):
            snapshot = (
                await self._client.collection(collection).document(document_id).get()
            )
        if not snapshot.exists:
            return None
        return StoredDocument(id=snapshot.id, data=snapshot.to_dict() or {})

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        limit: int | None = None,
        order_by: OrderBy | None = None,
        start_after: str | None = None,
    ) -> list[StoredDocument]:
        reference = self._client.collection(collection)
        query: Any = reference

        for query_filter in filters:
            match query_filter:
                case FieldFilter(field=field, value=value):
                    query = query.where(filter=FirestoreFieldFilter(field, "==", value))
                case AnyOf(field=field, values=values):
                    query = query.where(
                        filter=FirestoreFieldFilter(field, "in", list(values))
                    )

        if order_by is not None:
            direction = "DESCENDING" if order_by.descending else "ASCENDING"
            query = query.order_by(order_by.field, direction=direction)

        with _translate_errors(collection):
            if start_after is not None:
                cursor = await reference.document(start_after).get()
                if cursor.exists:
                    query = query.start_after(cursor)

            if limit is not None:
                query = query.limit(limit)

            return [
                StoredDocument(id=snapshot.id, data=snapshot.to_dict() or {})
                async for snapshot in query.stream()
            ]

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        document_id: str | None = None,
    ) -> str:
        reference = self._client.collection(collection)
        with _translate_errors(collection, document_id):
            if document_id is not None:
                await reference.document(document_id).create(data)
                return document_id
            _, document = await reference.add(data)
            return document.id

    async def update(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        with _translate_errors(collection, document_id):
            await self._client.collection(collection).document(document_id).update(
                data
            )

    async def delete(self, collection: str, document_id: str) -> None:
        with _translate_errors(collection, document_id):
            await self._client.collection(collection).document(document_id).delete()
