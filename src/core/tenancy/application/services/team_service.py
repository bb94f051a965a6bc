"""Team management service for the tenancy context.

Role changes, admin-flag toggles and member removal. Each operation reads
the organization's members, runs the admin invariant check and only then
writes. Operations on the same organization are serialised through a
per-organization lock, which closes the read-then-write race within one
process; separate processes remain best-effort.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from tenancy.application.observability import DefaultTeamServiceProbe, TeamServiceProbe
from tenancy.domain.admin_invariant import AdminInvariantEnforcer
from tenancy.domain.aggregates import Member
from tenancy.domain.exceptions import (
    LastAdminProtectedError,
    MemberNotFoundError,
    OrganizationNotFoundError,
    OwnerRemovalProtectedError,
    PermissionDeniedError,
    TenancyValidationError,
)
from tenancy.domain.permissions import ensure_capability
from tenancy.domain.value_objects import (
    OrganizationId,
    OrgMember,
    Role,
    UserId,
    has_admin_capability,
    role_to_fields,
)
from tenancy.ports.repositories import IMemberRepository, IOrganizationRepository


class TeamService:
    """Application service for managing an organization's members."""

    def __init__(
        self,
        member_repository: IMemberRepository,
        organization_repository: IOrganizationRepository,
        enforcer: AdminInvariantEnforcer | None = None,
        probe: TeamServiceProbe | None = None,
    ):
        self._member_repository = member_repository
        self._organization_repository = organization_repository
        self._enforcer = enforcer or AdminInvariantEnforcer()
        self._probe = probe or DefaultTeamServiceProbe()
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @asynccontextmanager
    async def _serialized(self, organization_id: OrganizationId) -> AsyncIterator[None]:
        # Entries vanish once no caller holds or awaits the lock
        lock = self._locks.get(organization_id.value)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[organization_id.value] = lock
        async with lock:
            yield

    async def list_members(
        self, organization_id: OrganizationId, actor_id: UserId
    ) -> list[Member]:
        """List an organization's members for one of its members."""
        members = await self._member_repository.list_by_organization(organization_id)
        if not any(m.id == actor_id for m in members):
            raise PermissionDeniedError("view the team")
        return members

    async def change_role(
        self,
        organization_id: OrganizationId,
        target_id: UserId,
        new_role: Role,
        actor_id: UserId,
    ) -> Member:
        """Give a member another role.

        Raises:
            PermissionDeniedError: If the actor cannot manage the team
            MemberNotFoundError: If the target is not in the organization
            LastAdminProtectedError: If the organization would lose its last admin
        """
        async with self._serialized(organization_id):
            members, target = await self._load_for_change(
                organization_id, target_id, actor_id, "change member roles"
            )
            self._guard(
                lambda: self._enforcer.check_role_change(
                    members, target_id, new_role, actor_id
                ),
                organization_id,
                target_id,
                actor_id,
            )
            target.change_role(new_role)
            await self._member_repository.save(target)
            self._record_role_change(organization_id, target, actor_id)
            return target

    async def set_admin(
        self,
        organization_id: OrganizationId,
        target_id: UserId,
        is_admin: bool,
        actor_id: UserId,
    ) -> Member:
        """Toggle the admin flag.

        Granting moves the target onto the member scheme as OrgMember(True).
        Revoking only applies to members: a target on the four-level scheme
        without admin capability is returned unchanged.

        Raises:
            TenancyValidationError: If revoking from a target whose admin
                capability comes from the Admin role
            PermissionDeniedError: If the actor cannot manage the team
            MemberNotFoundError: If the target is not in the organization
            LastAdminProtectedError: If the organization would lose its last admin
        """
        async with self._serialized(organization_id):
            members, target = await self._load_for_change(
                organization_id, target_id, actor_id, "change admin access"
            )
            if not is_admin and not isinstance(target.role, OrgMember):
                if has_admin_capability(target.role):
                    raise TenancyValidationError(
                        "is_admin",
                        "The admin flag only applies to members. Change the role instead.",
                    )
                return target

            self._guard(
                lambda: self._enforcer.check_admin_toggle(
                    members, target_id, is_admin, actor_id
                ),
                organization_id,
                target_id,
                actor_id,
            )
            target.change_role(OrgMember(is_admin=is_admin))
            await self._member_repository.save(target)
            self._record_role_change(organization_id, target, actor_id)
            return target

    async def remove_member(
        self, organization_id: OrganizationId, target_id: UserId, actor_id: UserId
    ) -> None:
        """Remove a member from the organization.

        Raises:
            PermissionDeniedError: If the actor cannot manage the team
            MemberNotFoundError: If the target is not in the organization
            OwnerRemovalProtectedError: If the target owns the organization
            LastAdminProtectedError: If the organization would lose its last admin
        """
        async with self._serialized(organization_id):
            organization = await self._organization_repository.get_by_id(
                organization_id
            )
            if organization is None:
                raise OrganizationNotFoundError(organization_id.value)

            members, target = await self._load_for_change(
                organization_id, target_id, actor_id, "remove members"
            )
            if organization.is_owned_by(target_id):
                raise OwnerRemovalProtectedError()

            self._guard(
                lambda: self._enforcer.check_removal(members, target_id, actor_id),
                organization_id,
                target_id,
                actor_id,
            )
            target.leave_organization()
            await self._member_repository.save(target)
            self._probe.member_removed(
                organization_id=organization_id.value,
                member_id=target_id.value,
                removed_by=actor_id.value,
            )

    async def _load_for_change(
        self,
        organization_id: OrganizationId,
        target_id: UserId,
        actor_id: UserId,
        action: str,
    ) -> tuple[list[Member], Member]:
        members = await self._member_repository.list_by_organization(organization_id)
        by_id = {member.id: member for member in members}

        actor = by_id.get(actor_id)
        if actor is None:
            raise PermissionDeniedError(action)
        ensure_capability(actor.role, "can_manage_team", action)

        target = by_id.get(target_id)
        if target is None:
            raise MemberNotFoundError(target_id.value)
        return members, target

    def _guard(
        self,
        check: Callable[[], None],
        organization_id: OrganizationId,
        target_id: UserId,
        actor_id: UserId,
    ) -> None:
        try:
            check()
        except LastAdminProtectedError as e:
            self._probe.last_admin_protected(
                organization_id=organization_id.value,
                member_id=target_id.value,
                actor_id=actor_id.value,
                reason=e.reason,
            )
            raise

    def _record_role_change(
        self, organization_id: OrganizationId, target: Member, actor_id: UserId
    ) -> None:
        role, is_admin = role_to_fields(target.role)
        self._probe.member_role_changed(
            organization_id=organization_id.value,
            member_id=target.id.value,
            role=role,
            is_admin=is_admin,
            changed_by=actor_id.value,
        )
