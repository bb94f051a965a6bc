"""Protocol for team management observability.

Captures role changes, removals and the operations the admin invariant
refused.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class TeamServiceProbe(Protocol):
    """Domain probe for team service operations."""

    def member_role_changed(
        self, organization_id: str, member_id: str, role: str, is_admin: bool, changed_by: str
    ) -> None:
        """Record that a member's role or admin flag changed."""
        ...

    def member_removed(
        self, organization_id: str, member_id: str, removed_by: str
    ) -> None:
        """Record that a member was removed from an organization."""
        ...

    def last_admin_protected(
        self, organization_id: str, member_id: str, actor_id: str, reason: str
    ) -> None:
        """Record that an operation was refused to keep an admin in place."""
        ...

    def with_context(self, context: ObservationContext) -> TeamServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTeamServiceProbe:
    """Default implementation of TeamServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._root_logger = logger or structlog.get_logger()
        self._context = context
        self._logger = bind_context(self._root_logger, context)

    def with_context(self, context: ObservationContext) -> DefaultTeamServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTeamServiceProbe(logger=self._root_logger, context=context)

    def member_role_changed(
        self, organization_id: str, member_id: str, role: str, is_admin: bool, changed_by: str
    ) -> None:
        """Record that a member's role or admin flag changed."""
        self._logger.info(
            "member_role_changed",
            organization_id=organization_id,
            member_id=member_id,
            role=role,
            is_admin=is_admin,
            changed_by=changed_by,
        )

    def member_removed(
        self, organization_id: str, member_id: str, removed_by: str
    ) -> None:
        """Record that a member was removed from an organization."""
        self._logger.info(
            "member_removed",
            organization_id=organization_id,
            member_id=member_id,
            removed_by=removed_by,
        )

    def last_admin_protected(
        self, organization_id: str, member_id: str, actor_id: str, reason: str
    ) -> None:
        """Record that an operation was refused to keep an admin in place."""
        self._logger.warning(
            "last_admin_protected",
            organization_id=organization_id,
            member_id=member_id,
            actor_id=actor_id,
            reason=reason,
        )
