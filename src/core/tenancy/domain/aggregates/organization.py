"""Organization aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from tenancy.domain.exceptions import WorkspaceLimitReachedError
from tenancy.domain.subdomain import validate_subdomain_format
from tenancy.domain.tiers import (
    TRIAL_PERIOD_DAYS,
    calculate_trial_end,
    can_create_workspace,
    get_workspace_limit,
)
from tenancy.domain.value_objects import (
    OrganizationId,
    SubscriptionStatus,
    Tier,
    UserId,
)


@dataclass
class Organization:
    """Top-level tenant owning workspaces and a subscription.

    Business rules:
    - owner_id is set at creation and never null
    - workspace_limit always follows the tier (None means unlimited)
    - subdomain, when present, is a well-formed slug
    """

    id: OrganizationId
    name: str
    owner_id: UserId
    tier: Tier = Tier.STARTER
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIALING
    trial_ends_at: datetime | None = None
    workspace_limit: int | None = 1
    subdomain: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        name: str,
        owner_id: UserId,
        subdomain: str | None = None,
        tier: Tier = Tier.STARTER,
        trial_days: int = TRIAL_PERIOD_DAYS,
        organization_id: OrganizationId | None = None,
    ) -> Organization:
        """Factory method for creating a new organization in its trial period.

        Args:
            name: Display name
            owner_id: User who owns the organization
            subdomain: Already-allocated subdomain, if any
            tier: Initial plan
            trial_days: Length of the trial
            organization_id: Explicit id; generated when omitted

        Returns:
            A new Organization with status trialing
        """
        if subdomain is not None:
            validate_subdomain_format(subdomain)

        now = datetime.now(UTC)
        return cls(
            id=organization_id or OrganizationId.generate(),
            name=name,
            owner_id=owner_id,
            tier=tier,
            subscription_status=SubscriptionStatus.TRIALING,
            trial_ends_at=calculate_trial_end(now, trial_days),
            workspace_limit=get_workspace_limit(tier),
            subdomain=subdomain,
            created_at=now,
            updated_at=now,
        )

    def can_create_workspace(self, current_count: int) -> bool:
        """Whether another workspace fits within the plan."""
        return can_create_workspace(self.workspace_limit, current_count)

    def ensure_workspace_capacity(self, current_count: int) -> None:
        """Raise WorkspaceLimitReachedError if the plan has no room left."""
        if not self.can_create_workspace(current_count):
            # can_create_workspace only fails for a finite limit
            raise WorkspaceLimitReachedError(self.workspace_limit or 0)

    def change_tier(self, tier: Tier) -> None:
        """Move to another plan, updating the derived workspace limit."""
        self.tier = tier
        self.workspace_limit = get_workspace_limit(tier)
        self._touch()

    def change_subdomain(self, subdomain: str | None) -> None:
        """Replace the subdomain. Availability is the caller's concern."""
        if subdomain is not None:
            validate_subdomain_format(subdomain)
        self.subdomain = subdomain
        self._touch()

    def update_subscription_status(self, status: SubscriptionStatus) -> None:
        """Mirror the subscription's billing status."""
        self.subscription_status = status
        self._touch()

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
