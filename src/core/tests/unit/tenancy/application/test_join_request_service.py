"""Unit tests for JoinRequestService."""

import pytest

from tenancy.domain.exceptions import (
    AlreadyAffiliatedError,
    AlreadyProcessedError,
    DuplicatePendingRequestError,
    JoinRequestNotFoundError,
    OrganizationNotFoundError,
    PermissionDeniedError,
)
from tenancy.domain.value_objects import (
    JoinRequestStatus,
    OrganizationId,
    OrgMember,
    Researcher,
)
from tenancy.infrastructure.documents import USERS


class TestCreateRequest:
    @pytest.mark.asyncio
    async def test_request_by_subdomain(
        self, organization_with_owner, join_request_service, add_user, join_probe
    ):
        organization, _ = await organization_with_owner()
        user_id = await add_user("joiner", "joiner@acme.com")

        request = await join_request_service.create_request(user_id, "Acme-Corp")

        assert request.organization_id == organization.id
        assert request.status == JoinRequestStatus.PENDING
        assert request.user_email == "joiner@acme.com"
        join_probe.join_request_created.assert_called_once()

    @pytest.mark.asyncio
    async def test_duplicate_pending_request(
        self, organization_with_owner, join_request_service, add_user
    ):
        await organization_with_owner()
        user_id = await add_user("joiner")
        await join_request_service.create_request(user_id, "acme-corp")

        with pytest.raises(DuplicatePendingRequestError):
            await join_request_service.create_request(user_id, "acme-corp")

    @pytest.mark.asyncio
    async def test_affiliated_user_cannot_request(
        self, organization_with_owner, join_request_service
    ):
        _, owner_id = await organization_with_owner()

        with pytest.raises(AlreadyAffiliatedError):
            await join_request_service.create_request(owner_id, "acme-corp")

    @pytest.mark.asyncio
    async def test_unknown_subdomain(self, join_request_service, add_user):
        user_id = await add_user("joiner")

        with pytest.raises(OrganizationNotFoundError):
            await join_request_service.create_request(user_id, "nobody")


class TestProcessRequest:
    @pytest.mark.asyncio
    async def test_approve_admits_into_default_workspace(
        self, organization_with_owner, join_request_service, add_user, member_repo, workspace_repo
    ):
        organization, owner_id = await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")

        approved = await join_request_service.approve(request.id, owner_id)

        assert approved.status == JoinRequestStatus.APPROVED
        assert approved.processed_by == owner_id
        member = await member_repo.get_by_id(user_id)
        workspace = await workspace_repo.get_default(organization.id)
        assert member.organization_id == organization.id
        assert member.workspace_ids == [workspace.id]
        assert member.role == OrgMember(is_admin=False)

    @pytest.mark.asyncio
    async def test_reject_leaves_membership_alone(
        self, store, organization_with_owner, join_request_service, add_user
    ):
        _, owner_id = await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")
        before = store.snapshot(USERS)["joiner"]

        rejected = await join_request_service.reject(request.id, owner_id)

        assert rejected.status == JoinRequestStatus.REJECTED
        assert rejected.processed_by == owner_id
        assert store.snapshot(USERS)["joiner"] == before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first", ["approve", "reject"])
    @pytest.mark.parametrize("second", ["approve", "reject"])
    async def test_processed_requests_are_terminal(
        self, store, organization_with_owner, join_request_service, add_user, first, second
    ):
        _, owner_id = await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")
        await getattr(join_request_service, first)(request.id, owner_id)
        users_before = store.snapshot(USERS)

        with pytest.raises(AlreadyProcessedError):
            await getattr(join_request_service, second)(request.id, owner_id)

        assert store.snapshot(USERS) == users_before

    @pytest.mark.asyncio
    async def test_requester_who_joined_elsewhere_is_rejected(
        self,
        organization_with_owner,
        join_request_service,
        join_request_repo,
        add_user,
        member_repo,
    ):
        _, owner_id = await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")
        member = await member_repo.get_by_id(user_id)
        member.join_organization(OrganizationId.from_string("elsewhere"), None)
        await member_repo.save(member)

        with pytest.raises(AlreadyAffiliatedError):
            await join_request_service.approve(request.id, owner_id)

        stored = await join_request_repo.get_by_id(request.id)
        assert stored.status == JoinRequestStatus.REJECTED
        assert (await member_repo.get_by_id(user_id)).organization_id.value == "elsewhere"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_approve(
        self, organization_with_owner, join_request_service, add_user, add_member
    ):
        organization, _ = await organization_with_owner()
        researcher = await add_member(organization, "researcher", Researcher())
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")

        with pytest.raises(PermissionDeniedError):
            await join_request_service.approve(request.id, researcher)


class TestCancelAndList:
    @pytest.mark.asyncio
    async def test_cancel_own_request(
        self, organization_with_owner, join_request_service, add_user, join_request_repo
    ):
        await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")

        await join_request_service.cancel(request.id, user_id)

        assert await join_request_repo.get_by_id(request.id) is None
        with pytest.raises(JoinRequestNotFoundError):
            await join_request_service.cancel(request.id, user_id)

    @pytest.mark.asyncio
    async def test_cannot_cancel_someone_elses(
        self, organization_with_owner, join_request_service, add_user
    ):
        await organization_with_owner()
        user_id = await add_user("joiner")
        other = await add_user("other")
        request = await join_request_service.create_request(user_id, "acme-corp")

        with pytest.raises(PermissionDeniedError):
            await join_request_service.cancel(request.id, other)

    @pytest.mark.asyncio
    async def test_list_pending_pages(
        self, organization_with_owner, join_request_service, add_user
    ):
        organization, owner_id = await organization_with_owner()
        for i in range(3):
            await join_request_service.create_request(
                await add_user(f"joiner-{i}"), "acme-corp"
            )

        first = await join_request_service.list_pending(organization.id, owner_id, limit=2)
        second = await join_request_service.list_pending(
            organization.id, owner_id, limit=2, cursor=first.next_cursor
        )

        assert len(first.items) == 2
        assert first.next_cursor is not None
        assert len(second.items) == 1
        assert second.next_cursor is None
        seen = {r.id for r in first.items} | {r.id for r in second.items}
        assert len(seen) == 3

    @pytest.mark.asyncio
    async def test_list_for_user(
        self, organization_with_owner, join_request_service, add_user
    ):
        await organization_with_owner()
        user_id = await add_user("joiner")
        request = await join_request_service.create_request(user_id, "acme-corp")

        assert [r.id for r in await join_request_service.list_for_user(user_id)] == [
            request.id
        ]
