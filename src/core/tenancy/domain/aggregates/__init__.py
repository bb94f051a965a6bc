"""Domain aggregates for the tenancy context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from tenancy.domain.aggregates.join_request import JoinRequest
from tenancy.domain.aggregates.member import Member
from tenancy.domain.aggregates.organization import Organization
from tenancy.domain.aggregates.subscription import Subscription
from tenancy.domain.aggregates.workspace import Workspace

__all__ = [
    "JoinRequest",
    "Member",
    "Organization",
    "Subscription",
    "Workspace",
]
