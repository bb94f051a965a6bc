"""Migration bounded context.

Batch backfills that convert legacy per-user data into the tenancy model.
Every operation is idempotent, supports dry runs and reports per-item
outcomes instead of stopping at the first failure.
"""
