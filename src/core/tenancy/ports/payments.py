"""Payment provider port.

The provider owns billing. This core only records the outcome of its calls
on the Subscription aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import OrganizationId, Tier


@dataclass(frozen=True)
class CheckoutSession:
    """Hosted checkout page the user is redirected to."""

    checkout_url: str


@runtime_checkable
class PaymentProvider(Protocol):
    """External checkout and subscription management."""

    async def create_checkout_session(
        self, organization_id: OrganizationId, target_tier: Tier
    ) -> CheckoutSession:
        """Start a checkout that moves the organization to target_tier."""
        ...

    async def cancel_subscription(self, subscription_id: str) -> None:
        """Cancel at the end of the current period."""
        ...

    async def resume_subscription(self, subscription_id: str) -> None:
        """Withdraw a pending cancellation."""
        ...
