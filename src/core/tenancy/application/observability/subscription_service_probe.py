"""Protocol for subscription service observability."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class SubscriptionServiceProbe(Protocol):
    """Domain probe for subscription operations."""

    def checkout_started(self, organization_id: str, target_tier: str) -> None:
        """Record that a checkout session was opened."""
        ...

    def subscription_cancel_requested(
        self, organization_id: str, subscription_id: str
    ) -> None:
        """Record that cancellation at period end was requested."""
        ...

    def subscription_resumed(self, organization_id: str, subscription_id: str) -> None:
        """Record that a pending cancellation was withdrawn."""
        ...

    def with_context(self, context: ObservationContext) -> SubscriptionServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubscriptionServiceProbe:
    """Default implementation of SubscriptionServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._root_logger = logger or structlog.get_logger()
        self._context = context
        self._logger = bind_context(self._root_logger, context)

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSubscriptionServiceProbe:
        return DefaultSubscriptionServiceProbe(logger=self._root_logger, context=context)

    def checkout_started(self, organization_id: str, target_tier: str) -> None:
        self._logger.info(
            "checkout_started",
            organization_id=organization_id,
            target_tier=target_tier,
        )

    def subscription_cancel_requested(
        self, organization_id: str, subscription_id: str
    ) -> None:
        self._logger.info(
            "subscription_cancel_requested",
            organization_id=organization_id,
            subscription_id=subscription_id,
        )

    def subscription_resumed(self, organization_id: str, subscription_id: str) -> None:
        self._logger.info(
            "subscription_resumed",
            organization_id=organization_id,
            subscription_id=subscription_id,
        )
