"""Member aggregate: a user seen through the tenancy lens."""

from __future__ import annotations

from dataclasses import dataclass, field

from tenancy.domain.exceptions import AlreadyAffiliatedError
from tenancy.domain.value_objects import (
    OrganizationId,
    OrgMember,
    Role,
    UserId,
    Viewer,
    WorkspaceId,
    has_admin_capability,
)


@dataclass
class Member:
    """A user annotated with organization affiliation, workspace access and role.

    A member with organization_id None is unaffiliated. Workspace access is
    a set kept in insertion order, so the first entry is the member's
    default workspace.
    """

    id: UserId
    email: str | None = None
    organization_id: OrganizationId | None = None
    workspace_ids: list[WorkspaceId] = field(default_factory=list)
    role: Role = field(default_factory=Viewer)

    @property
    def is_affiliated(self) -> bool:
        return self.organization_id is not None

    @property
    def is_admin(self) -> bool:
        """Administrative capability as counted by the admin invariant."""
        return has_admin_capability(self.role)

    def belongs_to(self, organization_id: OrganizationId) -> bool:
        return self.organization_id == organization_id

    def join_organization(
        self,
        organization_id: OrganizationId,
        default_workspace_id: WorkspaceId | None,
        role: Role | None = None,
    ) -> None:
        """Affiliate the member with an organization.

        Args:
            organization_id: Organization being joined
            default_workspace_id: Workspace granted on joining, if any
            role: Role to hold; defaults to a non-admin OrgMember

        Raises:
            AlreadyAffiliatedError: If the member belongs to another organization
        """
        if self.organization_id is not None and self.organization_id != organization_id:
            raise AlreadyAffiliatedError()

        self.organization_id = organization_id
        self.role = role if role is not None else OrgMember(is_admin=False)
        if default_workspace_id is not None:
            self.grant_workspace(default_workspace_id)

    def leave_organization(self) -> None:
        """Drop organization affiliation, workspace access and admin rights."""
        self.organization_id = None
        self.workspace_ids = []
        self.role = OrgMember(is_admin=False)

    def change_role(self, role: Role) -> None:
        self.role = role

    def grant_workspace(self, workspace_id: WorkspaceId) -> None:
        if workspace_id not in self.workspace_ids:
            self.workspace_ids.append(workspace_id)

    def revoke_workspace(self, workspace_id: WorkspaceId) -> None:
        self.workspace_ids = [w for w in self.workspace_ids if w != workspace_id]

    def can_access_workspace(self, workspace_id: WorkspaceId) -> bool:
        return workspace_id in self.workspace_ids
