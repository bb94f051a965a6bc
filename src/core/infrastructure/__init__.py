"""Cross-cutting infrastructure: configuration, logging and store adapters."""
