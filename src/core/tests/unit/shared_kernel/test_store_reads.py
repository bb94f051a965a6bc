"""Unit tests for read retries, poll-until-visible and upsert."""

from unittest.mock import AsyncMock, patch

import pytest

from infrastructure.document_store import InMemoryDocumentStore
from shared_kernel.document_store import (
    StoredDocument,
    StoreUnavailableError,
    TransientStoreError,
    VisibilityTimeoutError,
    retry_read,
    upsert,
    wait_until_visible,
)


@pytest.fixture(autouse=True)
def no_sleep():
    """Skip real delays between attempts."""
    with patch("asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


class TestRetryRead:
    """Tests for retry_read()."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        operation = AsyncMock(return_value="value")

        assert await retry_read(operation) == "value"
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_transient_errors_with_backoff(self, no_sleep):
        operation = AsyncMock(
            side_effect=[TransientStoreError("quota"), TransientStoreError("quota"), 5]
        )

        assert await retry_read(operation, attempts=3, base_delay=0.5) == 5
        assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_raises_after_last_attempt(self):
        operation = AsyncMock(side_effect=TransientStoreError("network"))

        with pytest.raises(TransientStoreError):
            await retry_read(operation, attempts=2)
        assert operation.await_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_fatal_errors(self):
        operation = AsyncMock(side_effect=StoreUnavailableError("no credentials"))

        with pytest.raises(StoreUnavailableError):
            await retry_read(operation, attempts=5)
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_each_retry_is_logged(self):
        operation = AsyncMock(side_effect=[TransientStoreError("quota"), "ok"])

        with patch("shared_kernel.document_store.retry.logger") as logger:
            assert await retry_read(operation, attempts=3, base_delay=0.25) == "ok"

        logger.warning.assert_called_once_with(
            "store_read_retry", attempt=1, delay_seconds=0.25, error="quota"
        )

    @pytest.mark.asyncio
    async def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            await retry_read(AsyncMock(), attempts=0)


class TestWaitUntilVisible:
    """Tests for wait_until_visible()."""

    @pytest.mark.asyncio
    async def test_returns_once_document_appears(self):
        store = AsyncMock()
        document = StoredDocument(id="org-1", data={"name": "Acme"})
        store.get = AsyncMock(side_effect=[None, None, document])

        result = await wait_until_visible(store, "organizations", "org-1", attempts=5)

        assert result == document
        assert store.get.await_count == 3

    @pytest.mark.asyncio
    async def test_polls_at_fixed_interval(self, no_sleep):
        store = AsyncMock()
        document = StoredDocument(id="org-1", data={})
        store.get = AsyncMock(side_effect=[None, None, document])

        await wait_until_visible(store, "organizations", "org-1", interval=0.3)

        assert [c.args[0] for c in no_sleep.await_args_list] == [0.3, 0.3]
        store.get.assert_awaited_with("organizations", "org-1")

    @pytest.mark.asyncio
    async def test_store_errors_are_not_polled_away(self):
        store = AsyncMock()
        store.get = AsyncMock(side_effect=StoreUnavailableError("no credentials"))

        with pytest.raises(StoreUnavailableError):
            await wait_until_visible(store, "organizations", "org-1", attempts=5)
        assert store.get.await_count == 1

    @pytest.mark.asyncio
    async def test_times_out_with_transient_error(self):
        store = InMemoryDocumentStore()

        with pytest.raises(VisibilityTimeoutError) as exc_info:
            await wait_until_visible(store, "organizations", "missing", attempts=4)

        assert isinstance(exc_info.value, TransientStoreError)
        assert exc_info.value.attempts == 4


class TestUpsert:
    """Tests for upsert()."""

    @pytest.mark.asyncio
    async def test_creates_missing_document_under_given_id(self):
        store = InMemoryDocumentStore()

        await upsert(store, "workspaces", "ws-1", {"name": "Default"})

        assert store.snapshot("workspaces") == {"ws-1": {"name": "Default"}}

    @pytest.mark.asyncio
    async def test_merges_into_existing_document(self):
        store = InMemoryDocumentStore({"workspaces": {"ws-1": {"name": "Old", "x": 1}}})

        await upsert(store, "workspaces", "ws-1", {"name": "New"})

        assert store.snapshot("workspaces")["ws-1"] == {"name": "New", "x": 1}
