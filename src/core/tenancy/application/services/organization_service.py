"""Organization application service for the tenancy context.

Handles the organization lifecycle: creation with its default workspace and
subscription, subdomain and tier changes, integrity checks and deletion.

The store has no multi-document transactions, so creation is a sequence of
single writes. The organization is confirmed visible before anything that
references it is written, and a read after the write detects another
writer that claimed the same subdomain concurrently.
"""

from __future__ import annotations

from infrastructure.settings import TenancySettings, get_tenancy_settings
from tenancy.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from tenancy.application.services.actors import load_actor
from tenancy.application.subdomain import SubdomainAllocator
from tenancy.application.value_objects import IntegrityIssue, IntegrityReport
from tenancy.domain.admin_invariant import count_admins
from tenancy.domain.aggregates import Organization, Subscription, Workspace
from tenancy.domain.exceptions import (
    AlreadyAffiliatedError,
    ConflictError,
    MemberNotFoundError,
    OrganizationNotFoundError,
    PermissionDeniedError,
    SubdomainTakenError,
)
from tenancy.domain.subdomain import normalize_subdomain
from tenancy.domain.tiers import can_create_workspace, get_workspace_limit
from tenancy.domain.value_objects import OrganizationId, OrgMember, Tier, UserId
from tenancy.ports.repositories import (
    IJoinRequestRepository,
    IMemberRepository,
    IOrganizationRepository,
    ISubscriptionRepository,
    IWorkspaceRepository,
)


class OrganizationService:
    """Application service for organization lifecycle management."""

    def __init__(
        self,
        organization_repository: IOrganizationRepository,
        workspace_repository: IWorkspaceRepository,
        member_repository: IMemberRepository,
        subscription_repository: ISubscriptionRepository,
        join_request_repository: IJoinRequestRepository,
        subdomain_allocator: SubdomainAllocator,
        settings: TenancySettings | None = None,
        probe: OrganizationServiceProbe | None = None,
    ):
        """Initialize OrganizationService with dependencies.

        Args:
            organization_repository: Repository for organization persistence
            workspace_repository: Repository for workspace persistence
            member_repository: Repository for member tenancy fields
            subscription_repository: Repository for subscription persistence
            join_request_repository: Repository for join requests (cascade delete)
            subdomain_allocator: Allocator for organization subdomains
            settings: Tenancy settings; loaded from the environment when omitted
            probe: Optional domain probe for observability
        """
        self._organization_repository = organization_repository
        self._workspace_repository = workspace_repository
        self._member_repository = member_repository
        self._subscription_repository = subscription_repository
        self._join_request_repository = join_request_repository
        self._subdomain_allocator = subdomain_allocator
        self._settings = settings or get_tenancy_settings()
        self._probe = probe or DefaultOrganizationServiceProbe()

    async def create_organization(
        self,
        owner_id: UserId,
        name: str | None = None,
        subdomain: str | None = None,
        tier: Tier = Tier.STARTER,
    ) -> Organization:
        """Create an organization owned and administered by `owner_id`.

        Writes, in order: the organization, its default workspace, its
        trial subscription, and the owner's membership (admin).

        Args:
            owner_id: User creating the organization
            name: Display name; defaults to the configured name
            subdomain: Requested subdomain; generated from the name if omitted
            tier: Initial plan

        Returns:
            The created Organization

        Raises:
            MemberNotFoundError: If the owner has no user record
            AlreadyAffiliatedError: If the owner already belongs to an organization
            TenancyValidationError: If the requested subdomain is malformed
            SubdomainTakenError: If the requested subdomain is taken
            VisibilityTimeoutError: If the organization never became readable
        """
        owner = await self._member_repository.get_by_id(owner_id)
        if owner is None:
            raise MemberNotFoundError(owner_id.value)
        if owner.is_affiliated:
            raise AlreadyAffiliatedError()

        name = (name or "").strip() or self._settings.default_organization_name
        allocated = await self._subdomain_allocator.allocate(name, requested=subdomain)

        organization = Organization.create(
            name=name,
            owner_id=owner_id,
            subdomain=allocated,
            tier=tier,
            trial_days=self._settings.trial_period_days,
        )
        await self._organization_repository.save(organization)
        await self._organization_repository.wait_until_visible(organization.id)
        organization = await self._settle_subdomain(
            organization, explicit=subdomain is not None
        )

        workspace = Workspace.create(
            name=self._settings.default_workspace_name,
            organization_id=organization.id,
            created_by=owner_id,
        )
        await self._workspace_repository.save(workspace)

        subscription = Subscription.start_trial(
            organization_id=organization.id,
            tier=tier,
            trial_days=self._settings.trial_period_days,
        )
        await self._subscription_repository.save(subscription)

        owner.join_organization(
            organization.id, workspace.id, role=OrgMember(is_admin=True)
        )
        await self._member_repository.save(owner)

        self._probe.organization_created(
            organization_id=organization.id.value,
            owner_id=owner_id.value,
            subdomain=organization.subdomain,
            tier=organization.tier.value,
        )
        return organization

    async def _settle_subdomain(
        self, organization: Organization, explicit: bool
    ) -> Organization:
        """Resolve a subdomain claimed by two organizations at once.

        The earliest claim (by creation time, then id) keeps the subdomain.
        A later generated subdomain moves to the next free candidate; a later
        explicitly requested one is withdrawn and reported as taken.
        """
        if organization.subdomain is None:
            return organization

        claims = await self._organization_repository.find_by_subdomain(
            organization.subdomain
        )
        if not claims or claims[0].id == organization.id:
            return organization

        if explicit:
            await self._organization_repository.delete(organization.id)
            raise SubdomainTakenError(organization.subdomain)

        previous = organization.subdomain
        reallocated = await self._subdomain_allocator.allocate(
            organization.name, exclude=organization.id
        )
        organization.change_subdomain(reallocated)
        await self._organization_repository.save(organization)
        self._probe.subdomain_reallocated(
            organization_id=organization.id.value,
            previous=previous,
            subdomain=reallocated,
        )
        return organization

    async def get_organization(self, organization_id: OrganizationId) -> Organization:
        """Retrieve an organization.

        Raises:
            OrganizationNotFoundError: If it does not exist
        """
        organization = await self._organization_repository.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id.value)
        return organization

    async def find_by_subdomain(self, subdomain: str) -> Organization:
        """Discover an organization from user-entered subdomain text.

        Raises:
            OrganizationNotFoundError: If no organization claims it
        """
        normalized = normalize_subdomain(subdomain)
        claims = (
            await self._organization_repository.find_by_subdomain(normalized)
            if normalized
            else []
        )
        if not claims:
            raise OrganizationNotFoundError(subdomain)
        return claims[0]

    async def change_subdomain(
        self, organization_id: OrganizationId, subdomain: str, actor_id: UserId
    ) -> Organization:
        """Replace an organization's subdomain.

        Raises:
            PermissionDeniedError: If the actor cannot manage the team
            TenancyValidationError: If the subdomain is malformed
            SubdomainTakenError: If another organization holds it
        """
        organization = await self.get_organization(organization_id)
        await load_actor(
            self._member_repository,
            actor_id,
            organization_id,
            "change the subdomain",
            capability="can_manage_team",
        )

        allocated = await self._subdomain_allocator.allocate(
            organization.name, requested=subdomain, exclude=organization.id
        )
        organization.change_subdomain(allocated)
        await self._organization_repository.save(organization)
        self._probe.subdomain_changed(
            organization_id=organization.id.value, subdomain=allocated
        )
        return organization

    async def change_tier(
        self, organization_id: OrganizationId, tier: Tier, actor_id: UserId
    ) -> Organization:
        """Move an organization and its subscription to another tier.

        Raises:
            PermissionDeniedError: If the actor cannot manage billing
            ConflictError: If the organization has more workspaces than the
                new tier allows
        """
        organization = await self.get_organization(organization_id)
        await load_actor(
            self._member_repository,
            actor_id,
            organization_id,
            "change the plan",
            capability="can_manage_billing",
        )

        workspaces = await self._workspace_repository.list_by_organization(
            organization_id
        )
        limit = get_workspace_limit(tier)
        if limit is not None and len(workspaces) > limit:
            raise ConflictError(
                f"The {tier.value} plan allows {limit} workspace(s); "
                f"delete workspaces before changing plan.",
                reason="workspace_limit_exceeded",
            )

        previous = organization.tier
        organization.change_tier(tier)
        await self._organization_repository.save(organization)

        subscription = await self._subscription_repository.get_by_organization(
            organization_id
        )
        if subscription is not None:
            subscription.change_tier(tier)
            await self._subscription_repository.save(subscription)

        self._probe.tier_changed(
            organization_id=organization_id.value,
            previous=previous.value,
            tier=tier.value,
        )
        return organization

    async def check_integrity(self, organization_id: OrganizationId) -> IntegrityReport:
        """Check an organization against the tenancy invariants."""
        organization = await self.get_organization(organization_id)
        workspaces = await self._workspace_repository.list_by_organization(
            organization_id
        )
        members = await self._member_repository.list_by_organization(organization_id)

        issues: list[IntegrityIssue] = []
        if not workspaces:
            issues.append(IntegrityIssue.NO_WORKSPACES)
        elif not can_create_workspace(
            organization.workspace_limit, len(workspaces) - 1
        ):
            issues.append(IntegrityIssue.WORKSPACE_LIMIT_EXCEEDED)

        if not members:
            issues.append(IntegrityIssue.NO_MEMBERS)
        elif count_admins(members) == 0:
            issues.append(IntegrityIssue.NO_ADMINISTRATORS)

        if not any(m.id == organization.owner_id for m in members):
            owner = await self._member_repository.get_by_id(organization.owner_id)
            issues.append(
                IntegrityIssue.OWNER_MISSING
                if owner is None
                else IntegrityIssue.OWNER_NOT_MEMBER
            )

        report = IntegrityReport(organization_id=organization_id, issues=tuple(issues))
        if not report.is_valid:
            self._probe.integrity_issues_found(
                organization_id=organization_id.value,
                issues=[issue.value for issue in report.issues],
            )
        return report

    async def delete_organization(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> None:
        """Delete an organization and everything that hangs off it.

        Only the owner may delete. Cascade order: join requests, workspaces,
        subscription, member affiliations, then the organization itself.
        Each step re-reads what is left, so a failed deletion can be re-run.
        Resources keep their workspaceId and show up as orphaned in the
        workspace-id integrity pass.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            PermissionDeniedError: If the actor is not the owner
        """
        organization = await self.get_organization(organization_id)
        if not organization.is_owned_by(actor_id):
            raise PermissionDeniedError(
                "delete the organization",
                "Only the organization owner can delete it",
            )

        requests = await self._join_request_repository.list_by_organization(
            organization_id
        )
        for request in requests:
            await self._join_request_repository.delete(request.id)

        workspaces = await self._workspace_repository.list_by_organization(
            organization_id
        )
        for workspace in workspaces:
            await self._workspace_repository.delete(workspace.id)

        subscription = await self._subscription_repository.get_by_organization(
            organization_id
        )
        if subscription is not None:
            await self._subscription_repository.delete(subscription)

        members = await self._member_repository.list_by_organization(organization_id)
        for member in members:
            member.leave_organization()
            await self._member_repository.save(member)

        await self._organization_repository.delete(organization_id)

        self._probe.organization_deleted(
            organization_id=organization_id.value,
            workspaces=len(workspaces),
            members=len(members),
            requests=len(requests),
        )
