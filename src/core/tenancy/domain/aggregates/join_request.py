"""JoinRequest aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from tenancy.domain.exceptions import AlreadyProcessedError
from tenancy.domain.value_objects import (
    JoinRequestId,
    JoinRequestStatus,
    OrganizationId,
    UserId,
)


@dataclass
class JoinRequest:
    """A user's request to join an existing organization.

    State machine: pending -> approved or pending -> rejected. Both targets
    are terminal; processing a terminal request raises AlreadyProcessedError
    and changes nothing.
    """

    id: JoinRequestId
    organization_id: OrganizationId
    user_id: UserId
    user_email: str | None = None
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    requested_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    processed_at: datetime | None = None
    processed_by: UserId | None = None

    @classmethod
    def create(
        cls,
        organization_id: OrganizationId,
        user_id: UserId,
        user_email: str | None,
    ) -> JoinRequest:
        """Factory method for a new pending request."""
        return cls(
            id=JoinRequestId.generate(),
            organization_id=organization_id,
            user_id=user_id,
            user_email=user_email,
            status=JoinRequestStatus.PENDING,
            requested_at=datetime.now(UTC),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == JoinRequestStatus.PENDING

    def approve(self, processed_by: UserId) -> None:
        """Move to approved.

        Raises:
            AlreadyProcessedError: If the request is not pending
        """
        self._process(JoinRequestStatus.APPROVED, processed_by)

    def reject(self, processed_by: UserId) -> None:
        """Move to rejected.

        Raises:
            AlreadyProcessedError: If the request is not pending
        """
        self._process(JoinRequestStatus.REJECTED, processed_by)

    def _process(self, status: JoinRequestStatus, processed_by: UserId) -> None:
        if not self.is_pending:
            raise AlreadyProcessedError(self.id.value, self.status.value)
        self.status = status
        self.processed_at = datetime.now(UTC)
        self.processed_by = processed_by
