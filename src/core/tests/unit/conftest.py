"""Unit test fixtures backed by the in-memory document store."""

import pytest
import structlog

from infrastructure.document_store import InMemoryDocumentStore
from infrastructure.settings import MigrationSettings, TenancySettings


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging calls made by the runners under test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def store():
    """Provide an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def tenancy_settings():
    """Provide tenancy settings with no waiting between polls."""
    return TenancySettings(
        visibility_poll_attempts=3,
        visibility_poll_interval_seconds=0,
        subdomain_debounce_seconds=0,
    )


@pytest.fixture
def migration_settings():
    """Provide default migration settings."""
    return MigrationSettings()
