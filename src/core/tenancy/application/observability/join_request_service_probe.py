"""Protocol for join request observability."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.observability_context import ObservationContext, bind_context


class JoinRequestServiceProbe(Protocol):
    """Domain probe for join request workflow operations."""

    def join_request_created(
        self, request_id: str, organization_id: str, user_id: str
    ) -> None:
        """Record that a user asked to join an organization."""
        ...

    def join_request_approved(
        self, request_id: str, organization_id: str, user_id: str, approved_by: str
    ) -> None:
        """Record that a request was approved and the user admitted."""
        ...

    def join_request_rejected(
        self, request_id: str, organization_id: str, rejected_by: str
    ) -> None:
        """Record that a request was rejected."""
        ...

    def join_request_cancelled(self, request_id: str, user_id: str) -> None:
        """Record that the requester withdrew a pending request."""
        ...

    def join_request_already_processed(self, request_id: str, status: str) -> None:
        """Record an attempt to process a terminal request."""
        ...

    def with_context(self, context: ObservationContext) -> JoinRequestServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJoinRequestServiceProbe:
    """Default implementation of JoinRequestServiceProbe using structlog."""

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
    ) -> DefaultJoinRequestServiceProbe:
        return DefaultJoinRequestServiceProbe(logger=self._root_logger, context=context)

    def join_request_created(
        self, request_id: str, organization_id: str, user_id: str
    ) -> None:
        self._logger.info(
            "join_request_created",
            request_id=request_id,
            organization_id=organization_id,
            user_id=user_id,
        )

    def join_request_approved(
        self, request_id: str, organization_id: str, user_id: str, approved_by: str
    ) -> None:
        self._logger.info(
            "join_request_approved",
            request_id=request_id,
            organization_id=organization_id,
            user_id=user_id,
            approved_by=approved_by,
        )

    def join_request_rejected(
        self, request_id: str, organization_id: str, rejected_by: str
    ) -> None:
        self._logger.info(
            "join_request_rejected",
            request_id=request_id,
            organization_id=organization_id,
            rejected_by=rejected_by,
        )

    def join_request_cancelled(self, request_id: str, user_id: str) -> None:
        self._logger.info(
            "join_request_cancelled",
            request_id=request_id,
            user_id=user_id,
        )

    def join_request_already_processed(self, request_id: str, status: str) -> None:
        self._logger.warning(
            "join_request_already_processed",
            request_id=request_id,
            status=status,
        )
