"""Application-layer value objects for the tenancy context.

Read-only views returned by application services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from tenancy.domain.value_objects import OrganizationId


class IntegrityIssue(StrEnum):
    """Problems an organization integrity check can find."""

    NO_WORKSPACES = "no_workspaces"
    NO_MEMBERS = "no_members"
    OWNER_MISSING = "owner_missing"
    OWNER_NOT_MEMBER = "owner_not_member"
    NO_ADMINISTRATORS = "no_administrators"
    WORKSPACE_LIMIT_EXCEEDED = "workspace_limit_exceeded"


@dataclass(frozen=True)
class IntegrityReport:
    """Result of checking an organization against the tenancy invariants."""

    organization_id: OrganizationId
    issues: tuple[IntegrityIssue, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.issues
