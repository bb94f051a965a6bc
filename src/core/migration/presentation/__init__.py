"""Command-line surface for the migration context."""
