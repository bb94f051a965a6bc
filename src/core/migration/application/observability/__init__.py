"""Domain-Oriented Observability for the migration context."""

from migration.application.observability.migration_probe import (
    DefaultMigrationProbe,
    MigrationProbe,
)

__all__ = [
    "DefaultMigrationProbe",
    "MigrationProbe",
]
