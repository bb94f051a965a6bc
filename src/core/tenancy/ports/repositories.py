"""Repository protocols (ports) for the tenancy context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations map aggregates to documents in a store without
multi-document transactions, so every method is a single read or write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from tenancy.domain.aggregates import (
    JoinRequest,
    Member,
    Organization,
    Subscription,
    Workspace,
)
from tenancy.domain.value_objects import (
    JoinRequestId,
    OrganizationId,
    UserId,
    WorkspaceId,
)


@dataclass(frozen=True)
class JoinRequestPage:
    """One page of join requests plus the cursor for the next page."""

    items: list[JoinRequest] = field(default_factory=list)
    next_cursor: str | None = None


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Repository for Organization aggregate persistence."""

    async def save(self, organization: Organization) -> None:
        """Persist an organization, creating it if it does not exist yet."""
        ...

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Retrieve an organization by its ID."""
        ...

    async def find_by_subdomain(self, subdomain: str) -> list[Organization]:
        """Return every organization claiming the subdomain.

        More than one result means two writers raced for the same slug.
        """
        ...

    async def get_by_owner(self, owner_id: UserId) -> Organization | None:
        """Retrieve the organization owned by a user, if any."""
        ...

    async def wait_until_visible(self, organization_id: OrganizationId) -> Organization:
        """Re-read a just-saved organization until the store returns it.

        Raises:
            VisibilityTimeoutError: If it never becomes visible
        """
        ...

    async def delete(self, organization_id: OrganizationId) -> None:
        """Delete an organization document."""
        ...


@runtime_checkable
class IWorkspaceRepository(Protocol):
    """Repository for Workspace aggregate persistence."""

    async def save(self, workspace: Workspace) -> None:
        """Persist a workspace, creating it if it does not exist yet."""
        ...

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Retrieve a workspace by its ID."""
        ...

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Workspace]:
        """List an organization's workspaces, oldest first."""
        ...

    async def get_default(self, organization_id: OrganizationId) -> Workspace | None:
        """Return the organization's oldest workspace, if it has any."""
        ...

    async def delete(self, workspace_id: WorkspaceId) -> None:
        """Delete a workspace document."""
        ...


@runtime_checkable
class IMemberRepository(Protocol):
    """Repository for the tenancy fields of user documents."""

    async def get_by_id(self, user_id: UserId) -> Member | None:
        """Retrieve a member by user ID."""
        ...

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Member]:
        """List every member affiliated with an organization."""
        ...

    async def save(self, member: Member) -> None:
        """Write the member's tenancy fields back to the user document.

        Raises:
            DocumentNotFoundError: If the user document does not exist
        """
        ...


@runtime_checkable
class ISubscriptionRepository(Protocol):
    """Repository for Subscription aggregate persistence."""

    async def save(self, subscription: Subscription) -> None:
        """Persist a subscription, creating it if it does not exist yet."""
        ...

    async def get_by_organization(
        self, organization_id: OrganizationId
    ) -> Subscription | None:
        """Retrieve an organization's subscription."""
        ...

    async def delete(self, subscription: Subscription) -> None:
        """Delete a subscription document."""
        ...


@runtime_checkable
class IJoinRequestRepository(Protocol):
    """Repository for JoinRequest aggregate persistence."""

    async def save(self, request: JoinRequest) -> None:
        """Persist a join request, creating it if it does not exist yet."""
        ...

    async def get_by_id(self, request_id: JoinRequestId) -> JoinRequest | None:
        """Retrieve a join request by its ID."""
        ...

    async def find_pending(
        self, organization_id: OrganizationId, user_id: UserId
    ) -> JoinRequest | None:
        """Return the user's pending request for an organization, if any."""
        ...

    async def list_pending(
        self,
        organization_id: OrganizationId,
        limit: int = 50,
        cursor: str | None = None,
    ) -> JoinRequestPage:
        """Page through an organization's pending requests, newest first.

        Args:
            organization_id: Organization whose requests are listed
            limit: Page size
            cursor: next_cursor from the previous page
        """
        ...

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[JoinRequest]:
        """List every request for an organization regardless of status."""
        ...

    async def list_by_user(self, user_id: UserId) -> list[JoinRequest]:
        """List a user's requests, newest first."""
        ...

    async def delete(self, request_id: JoinRequestId) -> None:
        """Delete a join request document."""
        ...
