"""Protocol for workspace service observability."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class WorkspaceServiceProbe(Protocol):
    """Domain probe for workspace service operations."""

    def workspace_created(
        self, workspace_id: str, organization_id: str, created_by: str
    ) -> None:
        """Record that a workspace was created."""
        ...

    def workspace_limit_reached(self, organization_id: str, limit: int) -> None:
        """Record that workspace creation was refused by the tier limit."""
        ...

    def workspace_deleted(self, workspace_id: str, organization_id: str) -> None:
        """Record that a workspace was deleted."""
        ...

    def workspace_permissions_updated(self, workspace_id: str) -> None:
        """Record that workspace permissions were replaced."""
        ...

    def workspace_access_changed(
        self, workspace_id: str, member_id: str, granted: bool
    ) -> None:
        """Record that a member gained or lost access to a workspace."""
        ...

    def with_context(self, context: ObservationContext) -> WorkspaceServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultWorkspaceServiceProbe:
    """Default implementation of WorkspaceServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._root_logger = logger or structlog.get_logger()
        self._context = context
        self._logger = bind_context(self._root_logger, context)

    def with_context(self, context: ObservationContext) -> DefaultWorkspaceServiceProbe:
        return DefaultWorkspaceServiceProbe(logger=self._root_logger, context=context)

    def workspace_created(
        self, workspace_id: str, organization_id: str, created_by: str
    ) -> None:
        self._logger.info(
            "workspace_created",
            workspace_id=workspace_id,
            organization_id=organization_id,
            created_by=created_by,
        )

    def workspace_limit_reached(self, organization_id: str, limit: int) -> None:
        self._logger.info(
            "workspace_limit_reached",
            organization_id=organization_id,
            limit=limit,
        )

    def workspace_deleted(self, workspace_id: str, organization_id: str) -> None:
        self._logger.info(
            "workspace_deleted",
            workspace_id=workspace_id,
            organization_id=organization_id,
        )

    def workspace_permissions_updated(self, workspace_id: str) -> None:
        self._logger.info(
            "workspace_permissions_updated",
            workspace_id=workspace_id,
        )

    def workspace_access_changed(
        self, workspace_id: str, member_id: str, granted: bool
    ) -> None:
        self._logger.info(
            "workspace_access_changed",
            workspace_id=workspace_id,
            member_id=member_id,
            granted=granted,
        )
