"""Admin invariant enforcement.

Every organization with at least one member keeps at least one member with
administrative capability. Role changes, admin-flag toggles and removals are
checked against the member list before they are applied.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from tenancy.domain.aggregates import Member
from tenancy.domain.exceptions import LastAdminProtectedError, MemberNotFoundError
from tenancy.domain.value_objects import (
    OrgMember,
    Role,
    UserId,
    has_admin_capability,
)

SELF_LOCKOUT_REASON = "self_lockout"


def count_admins(members: Iterable[Member]) -> int:
    return sum(1 for member in members if member.is_admin)


class AdminInvariantEnforcer:
    """Rejects member operations that would leave an organization without an admin.

    Each check receives the organization's current members and the acting
    user. Operations on non-admins always pass. An operation that takes
    admin capability away from the last admin raises LastAdminProtectedError;
    when the actor is that admin the reason is `self_lockout`.
    """

    def check_role_change(
        self, members: Sequence[Member], target_id: UserId, new_role: Role, actor_id: UserId
    ) -> None:
        self._ensure_admin_retained(members, target_id, new_role, actor_id)

    def check_admin_toggle(
        self, members: Sequence[Member], target_id: UserId, is_admin: bool, actor_id: UserId
    ) -> None:
        self._ensure_admin_retained(
            members, target_id, OrgMember(is_admin=is_admin), actor_id
        )

    def check_removal(
        self, members: Sequence[Member], target_id: UserId, actor_id: UserId
    ) -> None:
        self._ensure_admin_retained(members, target_id, None, actor_id)

    def _ensure_admin_retained(
        self,
        members: Sequence[Member],
        target_id: UserId,
        resulting_role: Role | None,
        actor_id: UserId,
    ) -> None:
        target = next((m for m in members if m.id == target_id), None)
        if target is None:
            raise MemberNotFoundError(target_id.value)

        if not target.is_admin:
            return
        if resulting_role is not None and has_admin_capability(resulting_role):
            return

        remaining = count_admins(m for m in members if m.id != target_id)
        if remaining >= 1:
            return

        if actor_id == target_id:
            raise LastAdminProtectedError(
                "You are the only admin. Promote another member before "
                "removing your own admin access.",
                reason=SELF_LOCKOUT_REASON,
            )
        raise LastAdminProtectedError()
