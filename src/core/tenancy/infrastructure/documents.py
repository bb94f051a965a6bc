"""Typed schemas for tenancy documents.

Documents come back from the store as untyped dictionaries. Each schema
validates and coerces one collection's documents on read and rejects
documents missing invariant-bearing fields, then maps to and from the
domain aggregates.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from shared_kernel.document_store.exceptions import DocumentSchemaError
from shared_kernel.document_store.ports import StoredDocument
from tenancy.domain.aggregates import (
    JoinRequest,
    Member,
    Organization,
    Subscription,
    Workspace,
)
from tenancy.domain.tiers import get_workspace_limit
from tenancy.domain.value_objects import (
    JoinRequestId,
    JoinRequestStatus,
    OrganizationId,
    SubscriptionId,
    SubscriptionStatus,
    Tier,
    UserId,
    WorkspaceId,
    parse_role,
    role_to_fields,
)

ORGANIZATIONS = "organizations"
WORKSPACES = "workspaces"
USERS = "users"
SUBSCRIPTIONS = "subscriptions"
JOIN_REQUESTS = "organizationRequests"

TierField = Annotated[Tier, BeforeValidator(Tier.parse)]

DocumentT = TypeVar("DocumentT", bound="TenancyDocument")


class TenancyDocument(BaseModel):
    """Base schema: camelCase field names, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_data(self) -> dict[str, Any]:
        """Serialise for the store using stored field names and plain values."""
        data = self.model_dump(by_alias=True)
        return {
            key: str(value) if isinstance(value, StrEnum) else value
            for key, value in data.items()
        }


def parse_document(
    schema: type[DocumentT], collection: str, document: StoredDocument
) -> DocumentT:
    """Validate a stored document against a schema.

    Raises:
        DocumentSchemaError: If required fields are missing or malformed
    """
    try:
        return schema.model_validate(document.data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise DocumentSchemaError(collection, document.id, f"invalid fields: {fields}") from e


class OrganizationDocument(TenancyDocument):
    name: str
    owner_id: str = Field(min_length=1)
    tier: TierField = Tier.STARTER
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIALING
    trial_ends_at: datetime | None = None
    workspace_limit: int | None = None
    subdomain: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def derive_workspace_limit(cls, data: Any) -> Any:
        """Older documents carry no limit; derive it from the tier."""
        if isinstance(data, dict) and "workspaceLimit" not in data:
            return {**data, "workspaceLimit": get_workspace_limit(data.get("tier"))}
        return data

    def to_domain(self, document_id: str) -> Organization:
        organization = Organization(
            id=OrganizationId.from_string(document_id),
            name=self.name,
            owner_id=UserId.from_string(self.owner_id),
            tier=self.tier,
            subscription_status=self.subscription_status,
            trial_ends_at=self.trial_ends_at,
            workspace_limit=self.workspace_limit,
            subdomain=self.subdomain,
        )
        if self.created_at is not None:
            organization.created_at = self.created_at
        if self.updated_at is not None:
            organization.updated_at = self.updated_at
        return organization

    @classmethod
    def from_domain(cls, organization: Organization) -> OrganizationDocument:
        return cls(
            name=organization.name,
            owner_id=organization.owner_id.value,
            tier=organization.tier,
            subscription_status=organization.subscription_status,
            trial_ends_at=organization.trial_ends_at,
            workspace_limit=organization.workspace_limit,
            subdomain=organization.subdomain,
            created_at=organization.created_at,
            updated_at=organization.updated_at,
        )


class WorkspaceDocument(TenancyDocument):
    name: str
    organization_id: str = Field(min_length=1)
    description: str = ""
    created_by: str | None = None
    owner_id: str | None = None
    permissions: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_domain(self, document_id: str) -> Workspace:
        workspace = Workspace(
            id=WorkspaceId.from_string(document_id),
            name=self.name,
            organization_id=OrganizationId.from_string(self.organization_id),
            created_by=UserId.from_string(self.created_by) if self.created_by else None,
            description=self.description,
            permissions=self.permissions,
            owner_id=UserId.from_string(self.owner_id) if self.owner_id else None,
        )
        if self.created_at is not None:
            workspace.created_at = self.created_at
        if self.updated_at is not None:
            workspace.updated_at = self.updated_at
        return workspace

    @classmethod
    def from_domain(cls, workspace: Workspace) -> WorkspaceDocument:
        return cls(
            name=workspace.name,
            organization_id=workspace.organization_id.value,
            description=workspace.description,
            created_by=workspace.created_by.value if workspace.created_by else None,
            owner_id=workspace.owner_id.value if workspace.owner_id else None,
            permissions=workspace.permissions,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )


class MemberDocument(TenancyDocument):
    """Tenancy view of a user document. Other user fields are left alone."""

    email: str | None = None
    organization_id: str | None = None
    workspace_ids: list[str] = Field(default_factory=list)
    role: str | None = None
    is_admin: bool = Field(default=False, alias="is_admin")

    def to_domain(self, document_id: str) -> Member:
        return Member(
            id=UserId.from_string(document_id),
            email=self.email,
            organization_id=(
                OrganizationId.from_string(self.organization_id)
                if self.organization_id
                else None
            ),
            workspace_ids=[WorkspaceId.from_string(w) for w in self.workspace_ids if w],
            role=parse_role(self.role, self.is_admin),
        )

    @classmethod
    def from_domain(cls, member: Member) -> MemberDocument:
        role, is_admin = role_to_fields(member.role)
        return cls(
            email=member.email,
            organization_id=member.organization_id.value if member.organization_id else None,
            workspace_ids=[w.value for w in member.workspace_ids],
            role=role,
            is_admin=is_admin,
        )

    def tenancy_fields(self) -> dict[str, Any]:
        """Fields owned by the tenancy core, for partial updates."""
        data = self.to_data()
        return {key: data[key] for key in ("organizationId", "workspaceIds", "role", "is_admin")}


class SubscriptionDocument(TenancyDocument):
    organization_id: str = Field(min_length=1)
    tier: TierField = Tier.STARTER
    status: SubscriptionStatus
    payment_provider: dict[str, Any] = Field(default_factory=dict)
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    trial_ends_at: datetime | None = None
    seats: int = Field(default=1, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_domain(self, document_id: str) -> Subscription:
        subscription = Subscription(
            id=SubscriptionId.from_string(document_id),
            organization_id=OrganizationId.from_string(self.organization_id),
            tier=self.tier,
            status=self.status,
            current_period_start=self.current_period_start,
            current_period_end=self.current_period_end,
            cancel_at_period_end=self.cancel_at_period_end,
            trial_ends_at=self.trial_ends_at,
            seats=self.seats,
            payment_provider=dict(self.payment_provider),
        )
        if self.created_at is not None:
            subscription.created_at = self.created_at
        if self.updated_at is not None:
            subscription.updated_at = self.updated_at
        return subscription

    @classmethod
    def from_domain(cls, subscription: Subscription) -> SubscriptionDocument:
        return cls(
            organization_id=subscription.organization_id.value,
            tier=subscription.tier,
            status=subscription.status,
            payment_provider=dict(subscription.payment_provider),
            current_period_start=subscription.current_period_start,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            trial_ends_at=subscription.trial_ends_at,
            seats=subscription.seats,
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class JoinRequestDocument(TenancyDocument):
    organization_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    user_email: str | None = None
    status: JoinRequestStatus
    requested_at: datetime
    # Requests written before the rename store respondedAt/respondedBy
    processed_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("processedAt", "respondedAt"),
        serialization_alias="processedAt",
    )
    processed_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("processedBy", "respondedBy"),
        serialization_alias="processedBy",
    )

    def to_domain(self, document_id: str) -> JoinRequest:
        return JoinRequest(
            id=JoinRequestId.from_string(document_id),
            organization_id=OrganizationId.from_string(self.organization_id),
            user_id=UserId.from_string(self.user_id),
            user_email=self.user_email,
            status=self.status,
            requested_at=self.requested_at,
            processed_at=self.processed_at,
            processed_by=(
                UserId.from_string(self.processed_by) if self.processed_by else None
            ),
        )

    @classmethod
    def from_domain(cls, request: JoinRequest) -> JoinRequestDocument:
        return cls(
            organization_id=request.organization_id.value,
            user_id=request.user_id.value,
            user_email=request.user_email,
            status=request.status,
            requested_at=request.requested_at,
            processed_at=request.processed_at,
            processed_by=request.processed_by.value if request.processed_by else None,
        )
