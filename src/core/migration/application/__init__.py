"""Application layer for the migration context."""

from migration.application.collection_copy import CollectionCopy
from migration.application.organization_backfill import OrganizationBackfill
from migration.application.report import MigrationReport
from migration.application.workspace_id_backfill import WorkspaceIdBackfill
from migration.application.workspace_ownership_backfill import (
    WorkspaceOwnershipBackfill,
)

__all__ = [
    "CollectionCopy",
    "MigrationReport",
    "OrganizationBackfill",
    "WorkspaceIdBackfill",
    "WorkspaceOwnershipBackfill",
]
