"""Ports (interfaces) for the tenancy context.

Ports define the contracts for repositories and external collaborators
without specifying implementation details.
"""

from tenancy.ports.exceptions import NoProviderSubscriptionError, PaymentProviderError
from tenancy.ports.payments import CheckoutSession, PaymentProvider
from tenancy.ports.repositories import (
    IJoinRequestRepository,
    IMemberRepository,
    IOrganizationRepository,
    ISubscriptionRepository,
    IWorkspaceRepository,
    JoinRequestPage,
)

__all__ = [
    "CheckoutSession",
    "IJoinRequestRepository",
    "IMemberRepository",
    "IOrganizationRepository",
    "ISubscriptionRepository",
    "IWorkspaceRepository",
    "JoinRequestPage",
    "NoProviderSubscriptionError",
    "PaymentProvider",
    "PaymentProviderError",
]
