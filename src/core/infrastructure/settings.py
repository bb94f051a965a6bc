"""Application settings using pydantic-settings.

Settings are loaded from environment variables (and a local .env file)
with defaults suitable for development. Production deployments must set
the store project explicitly.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Document store connection settings.

    Environment variables:
        FIREBASE_PROJECT_ID: Project holding the document database
            (VITE_FIREBASE_PROJECT_ID and GOOGLE_CLOUD_PROJECT are accepted
            as fallbacks)
        STORE_DATABASE: Database name within the project (default: (default))
        STORE_READ_RETRY_ATTEMPTS: Attempts for retried reads (default: 3)
        STORE_READ_RETRY_BASE_DELAY_SECONDS: First backoff delay (default: 0.2)

    Credentials are ambient (application default credentials).
    """

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "FIREBASE_PROJECT_ID",
            "VITE_FIREBASE_PROJECT_ID",
            "GOOGLE_CLOUD_PROJECT",
        ),
        description="Project identifier of the document database",
    )
    database: str = Field(default="(default)", description="Database name")
    read_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for reads that fail transiently",
    )
    read_retry_base_delay_seconds: float = Field(
        default=0.2,
        ge=0,
        description="Delay before the first read retry; doubles each retry",
    )


class TenancySettings(BaseSettings):
    """Tenancy core behaviour settings.

    Environment variables:
        TENANCY_DEFAULT_ORGANIZATION_NAME: Name used when none is given
        TENANCY_DEFAULT_WORKSPACE_NAME: Name of the workspace created with an organization
        TENANCY_VISIBILITY_POLL_ATTEMPTS: Reads before giving up on a new document
        TENANCY_VISIBILITY_POLL_INTERVAL_SECONDS: Delay between those reads
        TENANCY_SUBDOMAIN_DEBOUNCE_SECONDS: Quiet period before availability checks
        TENANCY_SUBDOMAIN_MAX_SUFFIX: Highest numeric suffix tried for generated subdomains
        TENANCY_TRIAL_PERIOD_DAYS: Length of the trial for new organizations
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_organization_name: str = Field(default="My Organization")
    default_workspace_name: str = Field(default="Default Workspace")
    visibility_poll_attempts: int = Field(default=10, ge=1, le=100)
    visibility_poll_interval_seconds: float = Field(default=0.1, ge=0)
    subdomain_debounce_seconds: float = Field(default=0.5, ge=0)
    subdomain_max_suffix: int = Field(default=99, ge=2, le=9999)
    trial_period_days: int = Field(default=14, ge=0)


class MigrationSettings(BaseSettings):
    """Backfill script settings.

    Environment variables:
        MIGRATION_DEFAULT_ORGANIZATION_NAME: Organization name for --single-org
            runs and users without a usable email domain
        MIGRATION_DEFAULT_WORKSPACE_NAME: Name of workspaces created by the backfill
        MIGRATION_DEFAULT_WORKSPACE_DESCRIPTION: Their description
        MIGRATION_MAX_REPORTED_ERRORS: Errors listed in the summary (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="MIGRATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_organization_name: str = Field(default="Default Organization")
    default_workspace_name: str = Field(default="Default Workspace")
    default_workspace_description: str = Field(
        default="Default workspace created during migration"
    )
    max_reported_errors: int = Field(default=10, ge=0)


@lru_cache
def get_store_settings() -> StoreSettings:
    """Get cached store settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return StoreSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return TenancySettings()


@lru_cache
def get_migration_settings() -> MigrationSettings:
    """Get cached migration settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return MigrationSettings()
