"""Role-permission matrix.

`capability(role)` is total: every Role, and every unknown or missing role,
maps to a fully populated Capabilities record. Anything unrecognised gets the
Viewer set.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from tenancy.domain.exceptions import PermissionDeniedError
from tenancy.domain.value_objects import (
    Admin,
    Contributor,
    Feature,
    OrgMember,
    Researcher,
    Role,
    UserId,
    Viewer,
)


@dataclass(frozen=True)
class Capabilities:
    """What a role may do. `can_edit_nuggets` covers the actor's own nuggets only."""

    can_view: bool = False
    can_upload_sessions: bool = False
    can_create_nuggets: bool = False
    can_edit_nuggets: bool = False
    can_edit_others_nuggets: bool = False
    can_create_themes: bool = False
    can_comment: bool = False
    can_create_projects: bool = False
    can_manage_team: bool = False
    can_manage_billing: bool = False
    can_configure_workspace_permissions: bool = False
    can_configure_custom_fields: bool = False
    can_bulk_operations: bool = False

    def allows(self, feature: Feature) -> bool:
        """Role half of the tier feature gate."""
        return getattr(self, FEATURE_CAPABILITIES[feature])


FEATURE_CAPABILITIES: dict[Feature, str] = {
    Feature.DASHBOARD: "can_view",
    Feature.SSO: "can_view",
    Feature.WORKSPACE_PERMISSIONS: "can_configure_workspace_permissions",
    Feature.BULK_OPERATIONS: "can_bulk_operations",
    Feature.CUSTOM_AUDIT_RETENTION: "can_manage_billing",
}

VIEWER_CAPABILITIES = Capabilities(can_view=True)

CONTRIBUTOR_CAPABILITIES = replace(
    VIEWER_CAPABILITIES,
    can_upload_sessions=True,
    can_create_nuggets=True,
    can_edit_nuggets=True,
    can_comment=True,
)

RESEARCHER_CAPABILITIES = replace(
    CONTRIBUTOR_CAPABILITIES,
    can_edit_others_nuggets=True,
    can_create_themes=True,
    can_create_projects=True,
    can_configure_custom_fields=True,
)

ADMIN_CAPABILITIES = Capabilities(**{f.name: True for f in fields(Capabilities)})


def capability(role: Role | None) -> Capabilities:
    """Look up the capability record for a role."""
    match role:
        case Admin() | OrgMember(is_admin=True):
            return ADMIN_CAPABILITIES
        case Researcher() | OrgMember():
            return RESEARCHER_CAPABILITIES
        case Contributor():
            return CONTRIBUTOR_CAPABILITIES
        case Viewer():
            return VIEWER_CAPABILITIES
    return VIEWER_CAPABILITIES


def can_edit_nugget(
    role: Role | None, resource_owner_id: UserId | None, acting_user_id: UserId
) -> bool:
    """Two-stage edit check for a nugget.

    1. A role with the blanket capability may edit any nugget.
    2. Otherwise a role with the own-resource capability may edit nuggets
       whose owner is the acting user.
    """
    capabilities = capability(role)
    if capabilities.can_edit_others_nuggets:
        return True
    return capabilities.can_edit_nuggets and resource_owner_id == acting_user_id


def ensure_can_edit_nugget(
    role: Role | None, resource_owner_id: UserId | None, acting_user_id: UserId
) -> None:
    """Raise PermissionDeniedError unless `can_edit_nugget` allows the edit."""
    if not can_edit_nugget(role, resource_owner_id, acting_user_id):
        raise PermissionDeniedError(
            "edit nugget", "You can only edit nuggets you created"
        )


def ensure_capability(role: Role | None, name: str, action: str) -> None:
    """Raise PermissionDeniedError unless the role holds capability `name`.

    Args:
        role: Role of the acting member
        name: Capabilities attribute, e.g. "can_manage_team"
        action: Description used in the error message
    """
    if not getattr(capability(role), name):
        raise PermissionDeniedError(action)
