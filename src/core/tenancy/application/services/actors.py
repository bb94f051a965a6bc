"""Resolution of the acting member for authorization checks."""

from __future__ import annotations

from tenancy.domain.aggregates import Member
from tenancy.domain.exceptions import PermissionDeniedError
from tenancy.domain.permissions import ensure_capability
from tenancy.domain.value_objects import OrganizationId, UserId
from tenancy.ports.repositories import IMemberRepository


async def load_actor(
    member_repository: IMemberRepository,
    actor_id: UserId,
    organization_id: OrganizationId,
    action: str,
    capability: str | None = None,
) -> Member:
    """Load the acting member and check they may act on the organization.

    Args:
        member_repository: Source of member records
        actor_id: User performing the operation
        organization_id: Organization the operation targets
        action: Description used in error messages
        capability: Capabilities attribute the actor must hold, if any

    Raises:
        PermissionDeniedError: If the actor is unknown, belongs to another
            organization or lacks the capability
    """
    actor = await member_repository.get_by_id(actor_id)
    if actor is None or not actor.belongs_to(organization_id):
        raise PermissionDeniedError(action)
    if capability is not None:
        ensure_capability(actor.role, capability, action)
    return actor
