"""Workspace aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from tenancy.domain.exceptions import TenancyValidationError
from tenancy.domain.value_objects import OrganizationId, UserId, WorkspaceId


@dataclass
class Workspace:
    """Scoping unit inside an organization.

    Sessions, projects and themes each belong to exactly one workspace.
    organization_id is fixed at creation. owner_id starts as the creator.
    permissions is only honoured for enterprise organizations.
    """

    id: WorkspaceId
    name: str
    organization_id: OrganizationId
    created_by: UserId | None = None
    description: str = ""
    permissions: dict[str, Any] | None = None
    owner_id: UserId | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        name: str,
        organization_id: OrganizationId,
        created_by: UserId | None,
        description: str = "",
    ) -> Workspace:
        """Factory method for creating a new workspace.

        Raises:
            TenancyValidationError: If the name is blank
        """
        if not name or not name.strip():
            raise TenancyValidationError("name", "Workspace name is required")

        now = datetime.now(UTC)
        return cls(
            id=WorkspaceId.generate(),
            name=name.strip(),
            organization_id=organization_id,
            created_by=created_by,
            description=description,
            owner_id=created_by,
            created_at=now,
            updated_at=now,
        )

    def rename(self, name: str, description: str | None = None) -> None:
        if not name or not name.strip():
            raise TenancyValidationError("name", "Workspace name is required")
        self.name = name.strip()
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)

    def set_permissions(self, permissions: dict[str, Any] | None) -> None:
        """Replace the workspace permission configuration."""
        self.permissions = permissions
        self.updated_at = datetime.now(UTC)

    def belongs_to(self, organization_id: OrganizationId) -> bool:
        return self.organization_id == organization_id
