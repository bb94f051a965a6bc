"""Fixtures wiring tenancy services to the in-memory document store."""

from unittest.mock import Mock

import pytest

from tenancy.application.observability import (
    JoinRequestServiceProbe,
    OrganizationServiceProbe,
    TeamServiceProbe,
    WorkspaceServiceProbe,
)
from tenancy.application.services import (
    JoinRequestService,
    OrganizationService,
    TeamService,
    WorkspaceService,
)
from tenancy.application.subdomain import SubdomainAllocator
from tenancy.domain.value_objects import UserId
from tenancy.infrastructure import (
    JoinRequestRepository,
    MemberRepository,
    OrganizationRepository,
    SubscriptionRepository,
    WorkspaceRepository,
)
from tenancy.infrastructure.documents import USERS


@pytest.fixture
def add_user(store):
    """Create an unaffiliated user document and return its id."""

    async def _add_user(user_id: str, email: str | None = None, **fields) -> UserId:
        data = {"email": email or f"{user_id}@example.com", **fields}
        await store.create(USERS, data, user_id)
        return UserId.from_string(user_id)

    return _add_user


@pytest.fixture
def organization_repo(store, tenancy_settings):
    return OrganizationRepository(
        store,
        visibility_attempts=tenancy_settings.visibility_poll_attempts,
        visibility_interval=tenancy_settings.visibility_poll_interval_seconds,
    )


@pytest.fixture
def workspace_repo(store):
    return WorkspaceRepository(store)


@pytest.fixture
def member_repo(store):
    return MemberRepository(store)


@pytest.fixture
def subscription_repo(store):
    return SubscriptionRepository(store)


@pytest.fixture
def join_request_repo(store):
    return JoinRequestRepository(store)


@pytest.fixture
def allocator(organization_repo, tenancy_settings):
    return SubdomainAllocator(
        organization_repo, max_suffix=tenancy_settings.subdomain_max_suffix
    )


@pytest.fixture
def organization_probe():
    return Mock(spec=OrganizationServiceProbe)


@pytest.fixture
def organization_service(
    organization_repo,
    workspace_repo,
    member_repo,
    subscription_repo,
    join_request_repo,
    allocator,
    tenancy_settings,
    organization_probe,
):
    return OrganizationService(
        organization_repository=organization_repo,
        workspace_repository=workspace_repo,
        member_repository=member_repo,
        subscription_repository=subscription_repo,
        join_request_repository=join_request_repo,
        subdomain_allocator=allocator,
        settings=tenancy_settings,
        probe=organization_probe,
    )


@pytest.fixture
def workspace_probe():
    return Mock(spec=WorkspaceServiceProbe)


@pytest.fixture
def workspace_service(workspace_repo, organization_repo, member_repo, workspace_probe):
    return WorkspaceService(
        workspace_repository=workspace_repo,
        organization_repository=organization_repo,
        member_repository=member_repo,
        probe=workspace_probe,
    )


@pytest.fixture
def team_probe():
    return Mock(spec=TeamServiceProbe)


@pytest.fixture
def team_service(member_repo, organization_repo, team_probe):
    return TeamService(
        member_repository=member_repo,
        organization_repository=organization_repo,
        probe=team_probe,
    )


@pytest.fixture
def join_probe():
    return Mock(spec=JoinRequestServiceProbe)


@pytest.fixture
def join_request_service(
    join_request_repo, organization_repo, member_repo, workspace_repo, join_probe
):
    return JoinRequestService(
        join_request_repository=join_request_repo,
        organization_repository=organization_repo,
        member_repository=member_repo,
        workspace_repository=workspace_repo,
        probe=join_probe,
    )


@pytest.fixture
def organization_with_owner(add_user, organization_service):
    """Create `owner` and an organization named Acme Corp they own."""

    async def _create(tier=None, **kwargs):
        owner_id = await add_user("owner", "owner@acme.com")
        if tier is not None:
            kwargs["tier"] = tier
        organization = await organization_service.create_organization(
            owner_id, "Acme Corp", **kwargs
        )
        return organization, owner_id

    return _create


@pytest.fixture
def add_member(add_user, member_repo, workspace_repo):
    """Create a user already affiliated with an organization."""

    async def _add_member(organization, user_id: str, role) -> UserId:
        member_id = await add_user(user_id)
        member = await member_repo.get_by_id(member_id)
        workspace = await workspace_repo.get_default(organization.id)
        member.join_organization(
            organization.id, workspace.id if workspace else None, role
        )
        await member_repo.save(member)
        return member_id

    return _add_member
