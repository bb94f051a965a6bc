"""Subscription service for the tenancy context.

Billing itself belongs to the payment provider. This service calls it and
records the outcome on the Subscription aggregate.
"""

from __future__ import annotations

from tenancy.application.observability import (
    DefaultSubscriptionServiceProbe,
    SubscriptionServiceProbe,
)
from tenancy.application.services.actors import load_actor
from tenancy.domain.aggregates import Subscription
from tenancy.domain.exceptions import SubscriptionNotFoundError
from tenancy.domain.value_objects import OrganizationId, Tier, UserId
from tenancy.ports.exceptions import NoProviderSubscriptionError
from tenancy.ports.payments import CheckoutSession, PaymentProvider
from tenancy.ports.repositories import IMemberRepository, ISubscriptionRepository


class SubscriptionService:
    """Application service for checkout, cancellation and resumption."""

    def __init__(
        self,
        subscription_repository: ISubscriptionRepository,
        member_repository: IMemberRepository,
        payment_provider: PaymentProvider,
        probe: SubscriptionServiceProbe | None = None,
    ):
        self._subscription_repository = subscription_repository
        self._member_repository = member_repository
        self._payment_provider = payment_provider
        self._probe = probe or DefaultSubscriptionServiceProbe()

    async def get_subscription(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> Subscription:
        """Return the organization's subscription to one of its members."""
        await load_actor(
            self._member_repository, actor_id, organization_id, "view billing"
        )
        return await self._get(organization_id)

    async def start_checkout(
        self, organization_id: OrganizationId, target_tier: Tier, actor_id: UserId
    ) -> CheckoutSession:
        """Open a provider checkout that upgrades the organization to `target_tier`."""
        await self._authorize(organization_id, actor_id, "upgrade the plan")
        session = await self._payment_provider.create_checkout_session(
            organization_id, target_tier
        )
        self._probe.checkout_started(
            organization_id=organization_id.value, target_tier=target_tier.value
        )
        return session

    async def cancel(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> Subscription:
        """Cancel at period end through the provider and record it.

        Raises:
            NoProviderSubscriptionError: If the subscription never went through checkout
        """
        await self._authorize(organization_id, actor_id, "cancel the subscription")
        subscription = await self._get(organization_id)
        provider_id = self._provider_id(subscription)

        await self._payment_provider.cancel_subscription(provider_id)
        subscription.mark_cancel_at_period_end()
        await self._subscription_repository.save(subscription)
        self._probe.subscription_cancel_requested(
            organization_id=organization_id.value, subscription_id=subscription.id.value
        )
        return subscription

    async def resume(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> Subscription:
        """Withdraw a pending cancellation through the provider and record it."""
        await self._authorize(organization_id, actor_id, "resume the subscription")
        subscription = await self._get(organization_id)
        provider_id = self._provider_id(subscription)

        await self._payment_provider.resume_subscription(provider_id)
        subscription.mark_resumed()
        await self._subscription_repository.save(subscription)
        self._probe.subscription_resumed(
            organization_id=organization_id.value, subscription_id=subscription.id.value
        )
        return subscription

    async def _authorize(
        self, organization_id: OrganizationId, actor_id: UserId, action: str
    ) -> None:
        await load_actor(
            self._member_repository,
            actor_id,
            organization_id,
            action,
            capability="can_manage_billing",
        )

    async def _get(self, organization_id: OrganizationId) -> Subscription:
        subscription = await self._subscription_repository.get_by_organization(
            organization_id
        )
        if subscription is None:
            raise SubscriptionNotFoundError(organization_id.value)
        return subscription

    def _provider_id(self, subscription: Subscription) -> str:
        provider_id = subscription.provider_subscription_id
        if not provider_id:
            raise NoProviderSubscriptionError(
                f"Subscription {subscription.id} has no provider subscription"
            )
        return provider_id
