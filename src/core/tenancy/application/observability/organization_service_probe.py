"""Protocol for organization service observability.

Defines the interface for domain probes that capture application-level
domain events for organization lifecycle operations.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class OrganizationServiceProbe(Protocol):
    """Domain probe for organization service operations."""

    def organization_created(
        self, organization_id: str, owner_id: str, subdomain: str | None, tier: str
    ) -> None:
        """Record that an organization was created."""
        ...

    def subdomain_reallocated(
        self, organization_id: str, previous: str, subdomain: str
    ) -> None:
        """Record that a concurrent writer forced a new subdomain."""
        ...

    def subdomain_changed(self, organization_id: str, subdomain: str | None) -> None:
        """Record that an organization's subdomain was changed."""
        ...

    def tier_changed(self, organization_id: str, previous: str, tier: str) -> None:
        """Record that an organization moved to another tier."""
        ...

    def organization_deleted(
        self, organization_id: str, workspaces: int, members: int, requests: int
    ) -> None:
        """Record that an organization and its dependents were deleted."""
        ...

    def integrity_issues_found(self, organization_id: str, issues: list[str]) -> None:
        """Record that an integrity check found problems."""
        ...

    def with_context(self, context: ObservationContext) -> OrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOrganizationServiceProbe:
    """Default implementation of OrganizationServiceProbe using structlog."""

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
    ) -> DefaultOrganizationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationServiceProbe(logger=self._root_logger, context=context)

    def organization_created(
        self, organization_id: str, owner_id: str, subdomain: str | None, tier: str
    ) -> None:
        """Record that an organization was created."""
        self._logger.info(
            "organization_created",
            organization_id=organization_id,
            owner_id=owner_id,
            subdomain=subdomain,
            tier=tier,
        )

    def subdomain_reallocated(
        self, organization_id: str, previous: str, subdomain: str
    ) -> None:
        """Record that a concurrent writer forced a new subdomain."""
        self._logger.warning(
            "subdomain_reallocated",
            organization_id=organization_id,
            previous=previous,
            subdomain=subdomain,
        )

    def subdomain_changed(self, organization_id: str, subdomain: str | None) -> None:
        """Record that an organization's subdomain was changed."""
        self._logger.info(
            "subdomain_changed",
            organization_id=organization_id,
            subdomain=subdomain,
        )

    def tier_changed(self, organization_id: str, previous: str, tier: str) -> None:
        """Record that an organization moved to another tier."""
        self._logger.info(
            "tier_changed",
            organization_id=organization_id,
            previous=previous,
            tier=tier,
        )

    def organization_deleted(
        self, organization_id: str, workspaces: int, members: int, requests: int
    ) -> None:
        """Record that an organization and its dependents were deleted."""
        self._logger.info(
            "organization_deleted",
            organization_id=organization_id,
            workspaces=workspaces,
            members=members,
            requests=requests,
        )

    def integrity_issues_found(self, organization_id: str, issues: list[str]) -> None:
        """Record that an integrity check found problems."""
        self._logger.warning(
            "organization_integrity_issues",
            organization_id=organization_id,
            issues=issues,
        )
