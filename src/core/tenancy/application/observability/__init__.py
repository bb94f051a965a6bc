"""Domain-Oriented Observability for the tenancy application layer."""

from tenancy.application.observability.join_request_service_probe import (
    DefaultJoinRequestServiceProbe,
    JoinRequestServiceProbe,
)
from tenancy.application.observability.organization_service_probe import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from tenancy.application.observability.subdomain_probe import (
    DefaultSubdomainProbe,
    SubdomainProbe,
)
from tenancy.application.observability.subscription_service_probe import (
    DefaultSubscriptionServiceProbe,
    SubscriptionServiceProbe,
)
from tenancy.application.observability.team_service_probe import (
    DefaultTeamServiceProbe,
    TeamServiceProbe,
)
from tenancy.application.observability.workspace_service_probe import (
    DefaultWorkspaceServiceProbe,
    WorkspaceServiceProbe,
)

__all__ = [
    "DefaultJoinRequestServiceProbe",
    "DefaultOrganizationServiceProbe",
    "DefaultSubdomainProbe",
    "DefaultSubscriptionServiceProbe",
    "DefaultTeamServiceProbe",
    "DefaultWorkspaceServiceProbe",
    "JoinRequestServiceProbe",
    "OrganizationServiceProbe",
    "SubdomainProbe",
    "SubscriptionServiceProbe",
    "TeamServiceProbe",
    "WorkspaceServiceProbe",
]
