"""Store-backed repository implementations for the tenancy context."""

from tenancy.infrastructure.join_request_repository import JoinRequestRepository
from tenancy.infrastructure.member_repository import MemberRepository
from tenancy.infrastructure.organization_repository import OrganizationRepository
from tenancy.infrastructure.subscription_repository import SubscriptionRepository
from tenancy.infrastructure.workspace_repository import WorkspaceRepository

__all__ = [
    "JoinRequestRepository",
    "MemberRepository",
    "OrganizationRepository",
    "SubscriptionRepository",
    "WorkspaceRepository",
]
