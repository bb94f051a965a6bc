"""Unit tests for InMemoryDocumentStore query semantics."""

import pytest

from infrastructure.document_store import InMemoryDocumentStore
from shared_kernel.document_store import (
    AnyOf,
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    DocumentStore,
    FieldFilter,
    OrderBy,
)


@pytest.fixture
def populated():
    return InMemoryDocumentStore(
        {
            "projects": {
                "p1": {"workspaceId": "ws-1", "name": "Alpha", "rank": 3},
                "p2": {"workspaceId": "ws-1", "name": "Beta", "rank": 1},
                "p3": {"workspaceId": "ws-2", "name": "Gamma", "rank": 2},
                "p4": {"name": "Delta"},
            }
        }
    )


class TestInMemoryDocumentStore:
    """Tests for the in-memory DocumentStore adapter."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryDocumentStore(), DocumentStore)

    @pytest.mark.asyncio
    async def test_equality_filter(self, populated):
        documents = await populated.query("projects", [FieldFilter("workspaceId", "ws-1")])

        assert {d.id for d in documents} == {"p1", "p2"}

    @pytest.mark.asyncio
    async def test_any_of_filter(self, populated):
        documents = await populated.query("projects", [AnyOf("workspaceId", ("ws-1", "ws-2"))])

        assert {d.id for d in documents} == {"p1", "p2", "p3"}

    @pytest.mark.asyncio
    async def test_missing_field_never_matches(self, populated):
        documents = await populated.query("projects", [FieldFilter("workspaceId", None)])

        assert documents == []

    @pytest.mark.asyncio
    async def test_order_limit_and_cursor(self, populated):
        order = OrderBy("rank", descending=True)

        first = await populated.query("projects", limit=2, order_by=order)
        rest = await populated.query("projects", order_by=order, start_after=first[-1].id)

        assert [d.id for d in first] == ["p1", "p3"]
        # Documents without the ordering field sort last
        assert [d.id for d in rest] == ["p2", "p4"]

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, populated):
        document = await populated.get("projects", "p1")
        document.data["name"] = "Changed"

        assert populated.snapshot("projects")["p1"]["name"] == "Alpha"

    @pytest.mark.asyncio
    async def test_create_with_taken_id_raises(self, populated):
        with pytest.raises(DocumentAlreadyExistsError):
            await populated.create("projects", {"name": "Again"}, document_id="p1")

    @pytest.mark.asyncio
    async def test_create_generates_id(self, populated):
        document_id = await populated.create("projects", {"name": "New"})

        assert populated.snapshot("projects")[document_id] == {"name": "New"}

    @pytest.mark.asyncio
    async def test_update_missing_document_raises(self, populated):
        with pytest.raises(DocumentNotFoundError):
            await populated.update("projects", "nope", {"name": "x"})

    @pytest.mark.asyncio
    async def test_delete_missing_document_is_not_an_error(self, populated):
        await populated.delete("projects", "nope")
        await populated.delete("projects", "p1")

        assert "p1" not in populated.snapshot("projects")
