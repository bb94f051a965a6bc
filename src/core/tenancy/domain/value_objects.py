"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from ulid import ULID


@dataclass(frozen=True)
class EntityId:
    """Base for aggregate identifiers.

    New ids are ULIDs. Ids read from the store are opaque strings (legacy
    documents carry store-generated ids), so parsing only rejects blanks.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an identifier from a stored string.

        Raises:
            ValueError: If value is empty or whitespace
        """
        if not value or not value.strip():
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        return cls(value=value)


@dataclass(frozen=True)
class OrganizationId(EntityId):
    """Identifier for an Organization aggregate."""


@dataclass(frozen=True)
class WorkspaceId(EntityId):
    """Identifier for a Workspace aggregate."""


@dataclass(frozen=True)
class UserId(EntityId):
    """Identifier for a user, and therefore for the Member built on it."""


@dataclass(frozen=True)
class SubscriptionId(EntityId):
    """Identifier for a Subscription aggregate."""


@dataclass(frozen=True)
class JoinRequestId(EntityId):
    """Identifier for a JoinRequest aggregate."""


class Tier(StrEnum):
    """Subscription plan controlling features and workspace limits."""

    STARTER = "starter"
    TEAM = "team"
    ENTERPRISE = "enterprise"

    @classmethod
    def parse(cls, value: str | None) -> Tier:
        """Read a stored tier value.

        Unknown or missing values resolve to STARTER, the most limited plan.
        The retired `small_team` plan is read as STARTER.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.STARTER


class SubscriptionStatus(StrEnum):
    """Billing state of an organization's subscription."""

    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class JoinRequestStatus(StrEnum):
    """Lifecycle state of a join request. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Feature(StrEnum):
    """Tier-gated product features."""

    DASHBOARD = "dashboard"
    SSO = "sso"
    WORKSPACE_PERMISSIONS = "workspacePermissions"
    BULK_OPERATIONS = "bulkOperations"
    CUSTOM_AUDIT_RETENTION = "customAuditRetention"


@dataclass(frozen=True)
class Viewer:
    """Read-only access."""


@dataclass(frozen=True)
class Contributor:
    """Adds content and edits only what they created."""


@dataclass(frozen=True)
class Researcher:
    """Full content access including other people's work."""


@dataclass(frozen=True)
class Admin:
    """Full content access plus team, billing and workspace administration."""


@dataclass(frozen=True)
class OrgMember:
    """Organization member from the flattened scheme.

    The admin flag is part of the variant so that administrative capability
    is visible in the type rather than implied by a separate boolean.
    """

    is_admin: bool = False


Role = Viewer | Contributor | Researcher | Admin | OrgMember

_SIMPLE_ROLES: dict[str, Role] = {
    "viewer": Viewer(),
    "contributor": Contributor(),
    "researcher": Researcher(),
    "admin": Admin(),
}


def parse_role(role: str | None, is_admin: bool | None = None) -> Role:
    """Build a Role from the stored `role` string and `is_admin` flag.

    Never raises: unknown or missing roles resolve to Viewer so callers can
    always render a degraded view.
    """
    if role == "member":
        return OrgMember(is_admin=bool(is_admin))
    return _SIMPLE_ROLES.get(role or "", Viewer())


def role_to_fields(role: Role) -> tuple[str, bool]:
    """Return the stored (role, is_admin) pair for a Role."""
    match role:
        case OrgMember(is_admin=is_admin):
            return "member", is_admin
        case Viewer():
            return "viewer", False
        case Contributor():
            return "contributor", False
        case Researcher():
            return "researcher", False
        case Admin():
            return "admin", False
    raise TypeError(f"Unknown role variant: {role!r}")


def has_admin_capability(role: Role) -> bool:
    """Whether the role counts as an administrator for the admin invariant."""
    match role:
        case Admin() | OrgMember(is_admin=True):
            return True
    return False
