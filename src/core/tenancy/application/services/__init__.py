"""Application services for the tenancy context.

Application services orchestrate domain aggregates and repositories to
fulfil use cases. They are the front door to the tenancy context.
"""

from tenancy.application.services.join_request_service import JoinRequestService
from tenancy.application.services.organization_service import OrganizationService
from tenancy.application.services.subscription_service import SubscriptionService
from tenancy.application.services.team_service import TeamService
from tenancy.application.services.workspace_service import WorkspaceService

__all__ = [
    "JoinRequestService",
    "OrganizationService",
    "SubscriptionService",
    "TeamService",
    "WorkspaceService",
]
