"""Unit tests for settings loaded from the environment."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import MigrationSettings, StoreSettings, TenancySettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "FIREBASE_PROJECT_ID",
        "VITE_FIREBASE_PROJECT_ID",
        "GOOGLE_CLOUD_PROJECT",
        "STORE_DATABASE",
        "TENANCY_SUBDOMAIN_MAX_SUFFIX",
        "MIGRATION_DEFAULT_ORGANIZATION_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


class TestStoreSettings:
    """Tests for StoreSettings."""

    def test_defaults(self):
        settings = StoreSettings(_env_file=None)

        assert settings.project_id is None
        assert settings.database == "(default)"
        assert settings.read_retry_attempts == 3

    def test_project_from_firebase_variable(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "research-prod")

        assert StoreSettings(_env_file=None).project_id == "research-prod"

    def test_project_falls_back_to_vite_variable(self, monkeypatch):
        monkeypatch.setenv("VITE_FIREBASE_PROJECT_ID", "research-dev")

        assert StoreSettings(_env_file=None).project_id == "research-dev"

    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("STORE_DATABASE", "tenancy")

        assert StoreSettings(_env_file=None).database == "tenancy"


class TestTenancySettings:
    """Tests for TenancySettings."""

    def test_defaults(self):
        settings = TenancySettings(_env_file=None)

        assert settings.default_workspace_name == "Default Workspace"
        assert settings.subdomain_debounce_seconds == 0.5
        assert settings.subdomain_max_suffix == 99
        assert settings.trial_period_days == 14

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TENANCY_SUBDOMAIN_MAX_SUFFIX", "5")

        assert TenancySettings(_env_file=None).subdomain_max_suffix == 5

    def test_rejects_suffix_below_two(self):
        with pytest.raises(ValidationError):
            TenancySettings(_env_file=None, subdomain_max_suffix=1)


class TestMigrationSettings:
    """Tests for MigrationSettings."""

    def test_defaults(self):
        settings = MigrationSettings(_env_file=None)

        assert settings.default_organization_name == "Default Organization"
        assert settings.default_workspace_description == (
            "Default workspace created during migration"
        )
        assert settings.max_reported_errors == 10
