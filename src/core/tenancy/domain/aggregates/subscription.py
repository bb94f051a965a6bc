"""Subscription aggregate for the tenancy context."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from tenancy.domain.tiers import TRIAL_PERIOD_DAYS, calculate_trial_end
from tenancy.domain.value_objects import (
    OrganizationId,
    SubscriptionId,
    SubscriptionStatus,
    Tier,
)


@dataclass
class Subscription:
    """Billing record, one per organization.

    Payment provider fields are opaque to this core. They are stored and
    handed back untouched.
    """

    id: SubscriptionId
    organization_id: OrganizationId
    tier: Tier = Tier.STARTER
    status: SubscriptionStatus = SubscriptionStatus.TRIALING
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    trial_ends_at: datetime | None = None
    seats: int = 1
    payment_provider: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def start_trial(
        cls,
        organization_id: OrganizationId,
        tier: Tier = Tier.STARTER,
        trial_days: int = TRIAL_PERIOD_DAYS,
        now: datetime | None = None,
    ) -> Subscription:
        """Factory method for the subscription created alongside an organization."""
        now = now or datetime.now(UTC)
        trial_ends_at = calculate_trial_end(now, trial_days)
        return cls(
            id=SubscriptionId.generate(),
            organization_id=organization_id,
            tier=tier,
            status=SubscriptionStatus.TRIALING,
            current_period_start=now,
            current_period_end=trial_ends_at,
            cancel_at_period_end=False,
            trial_ends_at=trial_ends_at,
            seats=1,
            payment_provider={"customerId": None, "subscriptionId": None},
            created_at=now,
            updated_at=now,
        )

    @property
    def provider_subscription_id(self) -> str | None:
        return self.payment_provider.get("subscriptionId")

    def change_tier(self, tier: Tier) -> None:
        self.tier = tier
        self._touch()

    def mark_cancel_at_period_end(self) -> None:
        """Record that the provider will cancel at the end of the period."""
        self.cancel_at_period_end = True
        self._touch()

    def mark_resumed(self) -> None:
        """Record that a pending cancellation was withdrawn."""
        self.cancel_at_period_end = False
        if self.status == SubscriptionStatus.CANCELED:
            self.status = SubscriptionStatus.ACTIVE
        self._touch()

    def is_in_trial(self, now: datetime | None = None) -> bool:
        """Whether the subscription is trialing and the trial has not ended."""
        if self.status != SubscriptionStatus.TRIALING or self.trial_ends_at is None:
            return False
        return (now or datetime.now(UTC)) < self.trial_ends_at

    def trial_days_remaining(self, now: datetime | None = None) -> int:
        """Whole days left in the trial, rounded up; 0 outside a trial."""
        now = now or datetime.now(UTC)
        if not self.is_in_trial(now) or self.trial_ends_at is None:
            return 0
        remaining = self.trial_ends_at - now
        return max(0, math.ceil(remaining / timedelta(days=1)))

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
