"""Unit tests for WorkspaceService."""

import pytest

from tenancy.domain.exceptions import (
    ConflictError,
    MemberNotFoundError,
    PermissionDeniedError,
    WorkspaceLimitReachedError,
)
from tenancy.domain.value_objects import (
    Admin,
    Contributor,
    OrgMember,
    Researcher,
    Tier,
    UserId,
    Viewer,
    WorkspaceId,
)

ALL_ROLES = [
    Viewer(),
    Contributor(),
    Researcher(),
    Admin(),
    OrgMember(is_admin=False),
    OrgMember(is_admin=True),
]


class TestCreateWorkspace:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ALL_ROLES, ids=str)
    async def test_starter_limit_reported_to_every_role(
        self, organization_with_owner, workspace_service, add_member, workspace_probe, role
    ):
        organization, _ = await organization_with_owner()
        member_id = await add_member(organization, "member", role)

        with pytest.raises(WorkspaceLimitReachedError) as exc_info:
            await workspace_service.create_workspace(organization.id, "Second", member_id)

        assert exc_info.value.reason == "workspace_limit_reached"
        assert exc_info.value.limit == 1
        workspace_probe.workspace_limit_reached.assert_called_once_with(
            organization_id=organization.id.value, limit=1
        )

    @pytest.mark.asyncio
    async def test_team_admin_creates_and_gets_access(
        self, organization_with_owner, workspace_service, member_repo
    ):
        organization, owner_id = await organization_with_owner(tier=Tier.TEAM)

        workspace = await workspace_service.create_workspace(
            organization.id, "Interviews", owner_id, description="Q3"
        )

        owner = await member_repo.get_by_id(owner_id)
        assert workspace.id in owner.workspace_ids
        assert workspace.description == "Q3"

    @pytest.mark.asyncio
    async def test_team_researcher_cannot_create(
        self, organization_with_owner, workspace_service, add_member
    ):
        organization, _ = await organization_with_owner(tier=Tier.TEAM)
        researcher = await add_member(organization, "researcher", Researcher())

        with pytest.raises(PermissionDeniedError):
            await workspace_service.create_workspace(organization.id, "Mine", researcher)


class TestPermissions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("tier", [Tier.STARTER, Tier.TEAM])
    async def test_requires_enterprise(
        self, organization_with_owner, workspace_service, workspace_repo, tier
    ):
        organization, owner_id = await organization_with_owner(tier=tier)
        workspace = await workspace_repo.get_default(organization.id)

        with pytest.raises(PermissionDeniedError):
            await workspace_service.set_workspace_permissions(
                workspace.id, {"restricted": True}, owner_id
            )

    @pytest.mark.asyncio
    async def test_enterprise_admin_configures(
        self, organization_with_owner, workspace_service, workspace_repo
    ):
        organization, owner_id = await organization_with_owner(tier=Tier.ENTERPRISE)
        workspace = await workspace_repo.get_default(organization.id)

        await workspace_service.set_workspace_permissions(
            workspace.id, {"restricted": True}, owner_id
        )

        assert (await workspace_repo.get_by_id(workspace.id)).permissions == {
            "restricted": True
        }

    @pytest.mark.asyncio
    async def test_enterprise_researcher_denied(
        self, organization_with_owner, workspace_service, workspace_repo, add_member
    ):
        organization, _ = await organization_with_owner(tier=Tier.ENTERPRISE)
        researcher = await add_member(organization, "researcher", Researcher())
        workspace = await workspace_repo.get_default(organization.id)

        with pytest.raises(PermissionDeniedError):
            await workspace_service.set_workspace_permissions(workspace.id, {}, researcher)


class TestAccess:
    @pytest.mark.asyncio
    async def test_grant_revoke_and_validate(
        self, organization_with_owner, workspace_service, add_member
    ):
        organization, owner_id = await organization_with_owner(tier=Tier.TEAM)
        second = await workspace_service.create_workspace(
            organization.id, "Second", owner_id
        )
        member_id = await add_member(organization, "member", Researcher())

        assert not await workspace_service.validate_workspace_access(member_id, second.id)

        await workspace_service.grant_access(second.id, member_id, owner_id)
        assert await workspace_service.validate_workspace_access(member_id, second.id)

        await workspace_service.revoke_access(second.id, member_id, owner_id)
        assert not await workspace_service.validate_workspace_access(member_id, second.id)

    @pytest.mark.asyncio
    async def test_cannot_grant_outsider(
        self, organization_with_owner, workspace_service, workspace_repo, add_user
    ):
        organization, owner_id = await organization_with_owner()
        outsider = await add_user("outsider")
        workspace = await workspace_repo.get_default(organization.id)

        with pytest.raises(MemberNotFoundError):
            await workspace_service.grant_access(workspace.id, outsider, owner_id)

    @pytest.mark.asyncio
    async def test_unknown_workspace_or_member(self, workspace_service):
        assert not await workspace_service.validate_workspace_access(
            UserId.from_string("ghost"), WorkspaceId.from_string("nowhere")
        )

    @pytest.mark.asyncio
    async def test_resource_in_organization(
        self,
        organization_with_owner,
        organization_service,
        workspace_service,
        workspace_repo,
        add_user,
    ):
        organization, _ = await organization_with_owner()
        rival_id = await add_user("rival", "rival@globex.io")
        other = await organization_service.create_organization(rival_id, "Globex")
        workspace = await workspace_repo.get_default(organization.id)

        assert await workspace_service.validate_resource_in_organization(
            workspace.id.value, organization.id
        )
        assert not await workspace_service.validate_resource_in_organization(
            workspace.id.value, other.id
        )
        assert not await workspace_service.validate_resource_in_organization(
            "nowhere", organization.id
        )
        assert not await workspace_service.validate_resource_in_organization(
            None, organization.id
        )


class TestDeleteWorkspace:
    @pytest.mark.asyncio
    async def test_last_workspace_is_kept(
        self, organization_with_owner, workspace_service, workspace_repo
    ):
        organization, owner_id = await organization_with_owner()
        workspace = await workspace_repo.get_default(organization.id)

        with pytest.raises(ConflictError) as exc_info:
            await workspace_service.delete_workspace(workspace.id, owner_id)

        assert exc_info.value.reason == "last_workspace"

    @pytest.mark.asyncio
    async def test_delete_revokes_access(
        self, organization_with_owner, workspace_service, workspace_repo, member_repo
    ):
        organization, owner_id = await organization_with_owner(tier=Tier.TEAM)
        second = await workspace_service.create_workspace(
            organization.id, "Second", owner_id
        )

        await workspace_service.delete_workspace(second.id, owner_id)

        assert await workspace_repo.get_by_id(second.id) is None
        owner = await member_repo.get_by_id(owner_id)
        assert second.id not in owner.workspace_ids
