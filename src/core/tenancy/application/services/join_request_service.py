"""Join request workflow for the tenancy context.

A user without an organization asks to join one found by subdomain. An
admin approves or rejects; both outcomes are terminal. Approval writes the
user's membership before the request status, so a failure in between leaves
a pending request that can simply be approved again.
"""

from __future__ import annotations

from tenancy.application.observability import (
    DefaultJoinRequestServiceProbe,
    JoinRequestServiceProbe,
)
from tenancy.application.services.actors import load_actor
from tenancy.domain.aggregates import JoinRequest
from tenancy.domain.exceptions import (
    AlreadyAffiliatedError,
    AlreadyProcessedError,
    DuplicatePendingRequestError,
    JoinRequestNotFoundError,
    MemberNotFoundError,
    OrganizationNotFoundError,
    PermissionDeniedError,
)
from tenancy.domain.subdomain import normalize_subdomain
from tenancy.domain.value_objects import JoinRequestId, OrganizationId, OrgMember, UserId
from tenancy.ports.repositories import (
    IJoinRequestRepository,
    IMemberRepository,
    IOrganizationRepository,
    IWorkspaceRepository,
    JoinRequestPage,
)


class JoinRequestService:
    """Application service for requesting, approving and rejecting membership."""

    def __init__(
        self,
        join_request_repository: IJoinRequestRepository,
        organization_repository: IOrganizationRepository,
        member_repository: IMemberRepository,
        workspace_repository: IWorkspaceRepository,
        probe: JoinRequestServiceProbe | None = None,
    ):
        self._join_request_repository = join_request_repository
        self._organization_repository = organization_repository
        self._member_repository = member_repository
        self._workspace_repository = workspace_repository
        self._probe = probe or DefaultJoinRequestServiceProbe()

    async def create_request(self, user_id: UserId, subdomain: str) -> JoinRequest:
        """Ask to join the organization at `subdomain`.

        Raises:
            MemberNotFoundError: If the user has no user record
            AlreadyAffiliatedError: If the user already belongs to an organization
            OrganizationNotFoundError: If no organization has that subdomain
            DuplicatePendingRequestError: If a pending request already exists
        """
        user = await self._member_repository.get_by_id(user_id)
        if user is None:
            raise MemberNotFoundError(user_id.value)
        if user.is_affiliated:
            raise AlreadyAffiliatedError()

        normalized = normalize_subdomain(subdomain)
        claims = (
            await self._organization_repository.find_by_subdomain(normalized)
            if normalized
            else []
        )
        if not claims:
            raise OrganizationNotFoundError(subdomain)
        organization = claims[0]

        existing = await self._join_request_repository.find_pending(
            organization.id, user_id
        )
        if existing is not None:
            raise DuplicatePendingRequestError()

        request = JoinRequest.create(
            organization_id=organization.id, user_id=user_id, user_email=user.email
        )
        await self._join_request_repository.save(request)
        self._probe.join_request_created(
            request_id=request.id.value,
            organization_id=organization.id.value,
            user_id=user_id.value,
        )
        return request

    async def approve(self, request_id: JoinRequestId, actor_id: UserId) -> JoinRequest:
        """Admit the requester into the organization.

        The requester gets the organization's default workspace and a
        non-admin role. If they joined another organization in the meantime
        the request is rejected instead.

        Raises:
            JoinRequestNotFoundError: If the request does not exist
            PermissionDeniedError: If the actor cannot manage the team
            AlreadyProcessedError: If the request is not pending
            AlreadyAffiliatedError: If the requester belongs to another organization
        """
        request = await self._get_pending(request_id, actor_id, "approve join requests")

        user = await self._member_repository.get_by_id(request.user_id)
        if user is None:
            raise MemberNotFoundError(request.user_id.value)

        if user.is_affiliated and not user.belongs_to(request.organization_id):
            request.reject(actor_id)
            await self._join_request_repository.save(request)
            self._probe.join_request_rejected(
                request_id=request.id.value,
                organization_id=request.organization_id.value,
                rejected_by=actor_id.value,
            )
            raise AlreadyAffiliatedError(
                "This user already belongs to another organization"
            )

        if not user.belongs_to(request.organization_id):
            workspace = await self._workspace_repository.get_default(
                request.organization_id
            )
            user.join_organization(
                request.organization_id,
                workspace.id if workspace else None,
                role=OrgMember(is_admin=False),
            )
            await self._member_repository.save(user)

        request.approve(actor_id)
        await self._join_request_repository.save(request)
        self._probe.join_request_approved(
            request_id=request.id.value,
            organization_id=request.organization_id.value,
            user_id=request.user_id.value,
            approved_by=actor_id.value,
        )
        return request

    async def reject(self, request_id: JoinRequestId, actor_id: UserId) -> JoinRequest:
        """Turn the request down without touching membership.

        Raises:
            JoinRequestNotFoundError: If the request does not exist
            PermissionDeniedError: If the actor cannot manage the team
            AlreadyProcessedError: If the request is not pending
        """
        request = await self._get_pending(request_id, actor_id, "reject join requests")
        request.reject(actor_id)
        await self._join_request_repository.save(request)
        self._probe.join_request_rejected(
            request_id=request.id.value,
            organization_id=request.organization_id.value,
            rejected_by=actor_id.value,
        )
        return request

    async def cancel(self, request_id: JoinRequestId, user_id: UserId) -> None:
        """Withdraw the caller's own pending request.

        Raises:
            JoinRequestNotFoundError: If the request does not exist
            PermissionDeniedError: If the caller did not make the request
            AlreadyProcessedError: If the request is not pending
        """
        request = await self._get(request_id)
        if request.user_id != user_id:
            raise PermissionDeniedError("cancel this request")
        self._ensure_pending(request)
        await self._join_request_repository.delete(request_id)
        self._probe.join_request_cancelled(
            request_id=request_id.value, user_id=user_id.value
        )

    async def list_pending(
        self,
        organization_id: OrganizationId,
        actor_id: UserId,
        limit: int = 50,
        cursor: str | None = None,
    ) -> JoinRequestPage:
        """Page through an organization's pending requests, newest first."""
        await load_actor(
            self._member_repository,
            actor_id,
            organization_id,
            "view join requests",
            capability="can_manage_team",
        )
        return await self._join_request_repository.list_pending(
            organization_id, limit=limit, cursor=cursor
        )

    async def list_for_user(self, user_id: UserId) -> list[JoinRequest]:
        """A user's own requests, newest first."""
        return await self._join_request_repository.list_by_user(user_id)

    async def _get(self, request_id: JoinRequestId) -> JoinRequest:
        request = await self._join_request_repository.get_by_id(request_id)
        if request is None:
            raise JoinRequestNotFoundError(request_id.value)
        return request

    async def _get_pending(
        self, request_id: JoinRequestId, actor_id: UserId, action: str
    ) -> JoinRequest:
        request = await self._get(request_id)
        await load_actor(
            self._member_repository,
            actor_id,
            request.organization_id,
            action,
            capability="can_manage_team",
        )
        self._ensure_pending(request)
        return request

    def _ensure_pending(self, request: JoinRequest) -> None:
        if not request.is_pending:
            self._probe.join_request_already_processed(
                request_id=request.id.value, status=request.status.value
            )
            raise AlreadyProcessedError(request.id.value, request.status.value)
