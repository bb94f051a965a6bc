"""Fixtures with legacy, pre-organization data."""

from datetime import UTC, datetime, timedelta

import pytest

from infrastructure.document_store import InMemoryDocumentStore
from shared_kernel.document_store import StoreUnavailableError, TransientStoreError

BASE = datetime(2023, 6, 1, tzinfo=UTC)


def legacy_data() -> dict:
    """Users from two email domains plus one without an email, and their resources."""
    return {
        "users": {
            "alice": {"email": "alice@acme.com", "createdAt": BASE},
            "bob": {"email": "bob@acme.com", "createdAt": BASE + timedelta(days=1)},
            "carol": {"email": "carol@globex.io", "createdAt": BASE + timedelta(days=2)},
            "dave": {"createdAt": BASE + timedelta(days=3)},
        },
        "sessions": {
            "s1": {"userId": "alice", "title": "Kickoff"},
            "s2": {"userId": "bob", "title": "Interview"},
            "s3": {"userId": "carol", "title": "Survey"},
        },
        "projects": {
            "p1": {"userId": "alice", "name": "Onboarding"},
            "p2": {"userId": "dave", "name": "Pricing", "workspaceId": "ws-existing"},
        },
        "themes": {},
    }


class FailingStore(InMemoryDocumentStore):
    """In-memory store whose writes to chosen documents fail."""

    def __init__(self, data=None, fail_ids=(), error=TransientStoreError):
        super().__init__(data)
        self.fail_ids = set(fail_ids)
        self.error = error

    async def update(self, collection, document_id, data):
        if document_id in self.fail_ids:
            raise self.error(f"write to {collection}/{document_id} failed")
        await super().update(collection, document_id, data)

    async def create(self, collection, data, document_id=None):
        if document_id in self.fail_ids:
            raise self.error(f"write to {collection}/{document_id} failed")
        return await super().create(collection, data, document_id)


@pytest.fixture
def legacy_store():
    return InMemoryDocumentStore(legacy_data())


@pytest.fixture
def failing_store():
    def _build(fail_ids, error=TransientStoreError, data=None):
        return FailingStore(data or legacy_data(), fail_ids=fail_ids, error=error)

    return _build


@pytest.fixture
def unavailable_error():
    return StoreUnavailableError
