"""Workspace application service for the tenancy context."""

from __future__ import annotations

from typing import Any

from tenancy.application.observability import (
    DefaultWorkspaceServiceProbe,
    WorkspaceServiceProbe,
)
from tenancy.application.services.actors import load_actor
from tenancy.domain.aggregates import Organization, Workspace
from tenancy.domain.exceptions import (
    ConflictError,
    MemberNotFoundError,
    OrganizationNotFoundError,
    PermissionDeniedError,
    WorkspaceLimitReachedError,
    WorkspaceNotFoundError,
)
from tenancy.domain.tiers import can_use_feature
from tenancy.domain.value_objects import Feature, OrganizationId, UserId, WorkspaceId
from tenancy.ports.repositories import (
    IMemberRepository,
    IOrganizationRepository,
    IWorkspaceRepository,
)


class WorkspaceService:
    """Application service for workspaces and workspace access.

    Creation enforces the tier's workspace limit before looking at the
    caller's role, so a full organization reports the limit to everyone.
    """

    def __init__(
        self,
        workspace_repository: IWorkspaceRepository,
        organization_repository: IOrganizationRepository,
        member_repository: IMemberRepository,
        probe: WorkspaceServiceProbe | None = None,
    ):
        self._workspace_repository = workspace_repository
        self._organization_repository = organization_repository
        self._member_repository = member_repository
        self._probe = probe or DefaultWorkspaceServiceProbe()

    async def create_workspace(
        self,
        organization_id: OrganizationId,
        name: str,
        actor_id: UserId,
        description: str = "",
    ) -> Workspace:
        """Create a workspace and give its creator access.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            WorkspaceLimitReachedError: If the tier's limit is reached
            PermissionDeniedError: If the actor cannot manage the team
            TenancyValidationError: If the name is blank
        """
        organization = await self._get_organization(organization_id)
        existing = await self._workspace_repository.list_by_organization(
            organization_id
        )
        try:
            organization.ensure_workspace_capacity(len(existing))
        except WorkspaceLimitReachedError as e:
            self._probe.workspace_limit_reached(
                organization_id=organization_id.value, limit=e.limit
            )
            raise

        actor = await load_actor(
            self._member_repository,
            actor_id,
            organization_id,
            "create workspaces",
            capability="can_manage_team",
        )

        workspace = Workspace.create(
            name=name,
            organization_id=organization_id,
            created_by=actor_id,
            description=description,
        )
        await self._workspace_repository.save(workspace)

        actor.grant_workspace(workspace.id)
        await self._member_repository.save(actor)

        self._probe.workspace_created(
            workspace_id=workspace.id.value,
            organization_id=organization_id.value,
            created_by=actor_id.value,
        )
        return workspace

    async def list_workspaces(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> list[Workspace]:
        """List an organization's workspaces, oldest first, for one of its members."""
        await load_actor(
            self._member_repository, actor_id, organization_id, "list workspaces"
        )
        return await self._workspace_repository.list_by_organization(organization_id)

    async def set_workspace_permissions(
        self,
        workspace_id: WorkspaceId,
        permissions: dict[str, Any] | None,
        actor_id: UserId,
    ) -> Workspace:
        """Replace a workspace's permission configuration.

        Needs the workspacePermissions feature: enterprise tier plus a role
        allowed to configure workspace permissions.

        Raises:
            PermissionDeniedError: If tier or role does not allow it
        """
        workspace = await self._get_workspace(workspace_id)
        organization = await self._get_organization(workspace.organization_id)
        actor = await load_actor(
            self._member_repository,
            actor_id,
            organization.id,
            "configure workspace permissions",
        )
        if not can_use_feature(
            organization.tier, actor.role, Feature.WORKSPACE_PERMISSIONS
        ):
            raise PermissionDeniedError(
                "configure workspace permissions",
                "Workspace permissions require the Enterprise plan and admin access",
            )

        workspace.set_permissions(permissions)
        await self._workspace_repository.save(workspace)
        self._probe.workspace_permissions_updated(workspace_id=workspace_id.value)
        return workspace

    async def grant_access(
        self, workspace_id: WorkspaceId, member_id: UserId, actor_id: UserId
    ) -> None:
        """Give a member of the workspace's organization access to it."""
        await self._change_access(workspace_id, member_id, actor_id, granted=True)

    async def revoke_access(
        self, workspace_id: WorkspaceId, member_id: UserId, actor_id: UserId
    ) -> None:
        """Take away a member's access to a workspace."""
        await self._change_access(workspace_id, member_id, actor_id, granted=False)

    async def _change_access(
        self,
        workspace_id: WorkspaceId,
        member_id: UserId,
        actor_id: UserId,
        granted: bool,
    ) -> None:
        workspace = await self._get_workspace(workspace_id)
        await load_actor(
            self._member_repository,
            actor_id,
            workspace.organization_id,
            "manage workspace access",
            capability="can_manage_team",
        )

        member = await self._member_repository.get_by_id(member_id)
        if member is None or not member.belongs_to(workspace.organization_id):
            raise MemberNotFoundError(member_id.value)

        if granted:
            member.grant_workspace(workspace_id)
        else:
            member.revoke_workspace(workspace_id)
        await self._member_repository.save(member)
        self._probe.workspace_access_changed(
            workspace_id=workspace_id.value, member_id=member_id.value, granted=granted
        )

    async def validate_workspace_access(
        self, member_id: UserId, workspace_id: WorkspaceId
    ) -> bool:
        """Whether a member may use a workspace.

        The workspace must belong to the member's organization and be in the
        member's workspace list. Unknown members or workspaces get False.
        """
        member = await self._member_repository.get_by_id(member_id)
        if member is None or member.organization_id is None:
            return False
        workspace = await self._workspace_repository.get_by_id(workspace_id)
        if workspace is None or not workspace.belongs_to(member.organization_id):
            return False
        return member.can_access_workspace(workspace_id)

    async def validate_resource_in_organization(
        self, resource_workspace_id: str | None, organization_id: OrganizationId
    ) -> bool:
        """Whether a resource's workspaceId points into the organization."""
        if not resource_workspace_id:
            return False
        workspace = await self._workspace_repository.get_by_id(
            WorkspaceId.from_string(resource_workspace_id)
        )
        return workspace is not None and workspace.belongs_to(organization_id)

    async def delete_workspace(
        self, workspace_id: WorkspaceId, actor_id: UserId
    ) -> None:
        """Delete a workspace and remove it from every member's access list.

        Raises:
            ConflictError: If it is the organization's only workspace
        """
        workspace = await self._get_workspace(workspace_id)
        await load_actor(
            self._member_repository,
            actor_id,
            workspace.organization_id,
            "delete workspaces",
            capability="can_manage_team",
        )

        siblings = await self._workspace_repository.list_by_organization(
            workspace.organization_id
        )
        if len(siblings) <= 1:
            raise ConflictError(
                "An organization must keep at least one workspace.",
                reason="last_workspace",
            )

        members = await self._member_repository.list_by_organization(
            workspace.organization_id
        )
        for member in members:
            if member.can_access_workspace(workspace_id):
                member.revoke_workspace(workspace_id)
                await self._member_repository.save(member)

        await self._workspace_repository.delete(workspace_id)
        self._probe.workspace_deleted(
            workspace_id=workspace_id.value,
            organization_id=workspace.organization_id.value,
        )

    async def _get_organization(self, organization_id: OrganizationId) -> Organization:
        organization = await self._organization_repository.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id.value)
        return organization

    async def _get_workspace(self, workspace_id: WorkspaceId) -> Workspace:
        workspace = await self._workspace_repository.get_by_id(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id.value)
        return workspace
