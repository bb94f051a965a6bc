"""Backfill of legacy per-user data into organizations and workspaces.

Users without an organization are grouped (by email domain, all into one
organization, or one organization per user), and each group gets an
organization, a default workspace and a trial subscription. Resources owned
by the group's users are then pointed at that workspace, and finally the
users themselves are affiliated.

Re-running is safe. Users that already carry an organizationId are skipped,
existing organizations are found through their owner, and the owner is
updated last so an interrupted run picks the same owner again.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from infrastructure.settings import (
    MigrationSettings,
    TenancySettings,
    get_migration_settings,
    get_tenancy_settings,
)
from migration.application.observability import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from migration.application.report import MigrationReport
from shared_kernel.document_store import (
    DocumentStore,
    StoredDocument,
    StoreError,
    StoreUnavailableError,
    query_any_of,
)
from tenancy.application.subdomain import SubdomainAllocator
from tenancy.domain.aggregates import Organization, Subscription, Workspace
from tenancy.domain.exceptions import TenancyError
from tenancy.domain.value_objects import OrganizationId, Tier, UserId
from tenancy.infrastructure import (
    OrganizationRepository,
    SubscriptionRepository,
    WorkspaceRepository,
)
from tenancy.infrastructure.documents import USERS

DEFAULT_GROUP = "default"
RESOURCE_COLLECTIONS = ("sessions", "projects", "themes")
SEAT_TYPE = "researcher"
OWNER_ROLE = "admin"
MEMBER_ROLE = "researcher"
# Per-user organizations put their owner on the member scheme
MEMBER_SCHEME_ROLE = "member"

# Placeholder ids reported for documents a dry run would have created
DRY_RUN_ORGANIZATION = "<new-organization>"
DRY_RUN_WORKSPACE = "<new-workspace>"


def email_domain(email: Any) -> str:
    """Grouping key for a user: the lowercased domain of their email."""
    if not isinstance(email, str) or email.count("@") != 1:
        return DEFAULT_GROUP
    domain = email.split("@")[1].strip().lower()
    return domain or DEFAULT_GROUP


def organization_name_for(domain: str) -> str:
    return f"{domain[:1].upper()}{domain[1:]} Organization"


def _personal_organization_name(user: StoredDocument, fallback: str) -> str:
    domain = email_domain(user.data.get("email"))
    if domain == DEFAULT_GROUP:
        return fallback
    return organization_name_for(domain)


def _creation_key(document: StoredDocument) -> tuple:
    created_at = document.data.get("createdAt")
    if isinstance(created_at, datetime):
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return (0, created_at.timestamp(), document.id)
    return (1, 0.0, document.id)


@dataclass
class UserGroup:
    """Users that will share one organization. The first user owns it."""

    key: str
    organization_name: str
    users: list[StoredDocument]
    per_user: bool = False

    @property
    def owner(self) -> StoredDocument:
        return self.users[0]


class OrganizationBackfill:
    """Creates organizations for unaffiliated legacy users.

    Example:
        backfill = OrganizationBackfill(store)
        report = await backfill.run(dry_run=True)
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: MigrationSettings | None = None,
        tenancy_settings: TenancySettings | None = None,
        probe: MigrationProbe | None = None,
    ):
        self._store = store
        self._settings = settings or get_migration_settings()
        self._tenancy_settings = tenancy_settings or get_tenancy_settings()
        self._probe = probe or DefaultMigrationProbe()

        self._organizations = OrganizationRepository(
            store,
            visibility_attempts=self._tenancy_settings.visibility_poll_attempts,
            visibility_interval=self._tenancy_settings.visibility_poll_interval_seconds,
        )
        self._workspaces = WorkspaceRepository(store)
        self._subscriptions = SubscriptionRepository(store)
        self._allocator = SubdomainAllocator(
            self._organizations, max_suffix=self._tenancy_settings.subdomain_max_suffix
        )

    async def run(
        self, dry_run: bool = False, single_org: bool = False, per_user: bool = False
    ) -> MigrationReport:
        """Run the backfill and return its report.

        Args:
            dry_run: Perform every read and decision but no write
            single_org: Put every user into one organization instead of
                grouping by email domain
            per_user: Give every user an organization of their own, owned
                as a member with the admin flag set

        Raises:
            ValueError: If both single_org and per_user are set
            StoreUnavailableError: If the store cannot be reached at all
        """
        if single_org and per_user:
            raise ValueError("single_org and per_user are mutually exclusive")

        report = MigrationReport(name="organizations", dry_run=dry_run)
        self._probe.run_started(report.name, dry_run)

        self._probe.step("Fetching users without an organization")
        users = await self._unaffiliated_users(report)
        if not users:
            self._probe.step("No users to migrate. All users already have organizations.")
            self._probe.run_finished(report)
            return report

        groups = self._group_users(users, single_org, per_user)
        self._probe.step(f"Grouped {len(users)} users into {len(groups)} organizations")

        for group in groups:
            self._probe.step(f"Processing {group.key} ({len(group.users)} users)")
            await self._migrate_group(group, report, dry_run)

        self._probe.run_finished(report)
        return report

    async def _unaffiliated_users(
        self, report: MigrationReport
    ) -> list[StoredDocument]:
        documents = await self._store.query(USERS)
        users = []
        for document in documents:
            if document.data.get("organizationId"):
                report.record_skipped("users")
                continue
            users.append(document)
        return users

    def _group_users(
        self, users: Sequence[StoredDocument], single_org: bool, per_user: bool
    ) -> list[UserGroup]:
        ordered = sorted(users, key=_creation_key)
        if per_user:
            return [
                UserGroup(
                    key=user.id,
                    organization_name=_personal_organization_name(
                        user, self._tenancy_settings.default_organization_name
                    ),
                    users=[user],
                    per_user=True,
                )
                for user in ordered
            ]
        if single_org:
            return [
                UserGroup(
                    key=DEFAULT_GROUP,
                    organization_name=self._settings.default_organization_name,
                    users=ordered,
                )
            ]

        grouped: dict[str, list[StoredDocument]] = {}
        for user in ordered:
            grouped.setdefault(email_domain(user.data.get("email")), []).append(user)

        return [
            UserGroup(
                key=key,
                organization_name=(
                    self._settings.default_organization_name
                    if key == DEFAULT_GROUP
                    else organization_name_for(key)
                ),
                users=members,
            )
            for key, members in grouped.items()
        ]

    async def _migrate_group(
        self, group: UserGroup, report: MigrationReport, dry_run: bool
    ) -> None:
        try:
            organization_id = await self._ensure_organization(group, report, dry_run)
            workspace_id = await self._ensure_workspace(
                group, organization_id, report, dry_run
            )
            await self._ensure_subscription(organization_id, report, dry_run)
        except StoreUnavailableError:
            raise
        except (StoreError, TenancyError) as e:
            report.record_error("organizations", group.owner.id, e)
            self._probe.item_failed("organizations", group.owner.id, str(e))
            return

        errors_before = len(report.errors)
        user_ids = [user.id for user in group.users]
        for collection in RESOURCE_COLLECTIONS:
            await self._backfill_resources(
                collection, user_ids, workspace_id, report, dry_run
            )

        for user in group.users[1:]:
            await self._affiliate_user(
                user, organization_id, workspace_id, MEMBER_ROLE, report, dry_run
            )

        # An unaffiliated owner makes a rerun regroup the same users under the
        # same organization, so the owner is only written once the rest succeeded
        if len(report.errors) > errors_before:
            report.record_skipped("users")
            self._probe.item_skipped(
                "users", group.owner.id, "Owner deferred until the group migrates cleanly"
            )
            return
        if group.per_user:
            role, is_admin = MEMBER_SCHEME_ROLE, True
        else:
            role, is_admin = OWNER_ROLE, None
        await self._affiliate_user(
            group.owner,
            organization_id,
            workspace_id,
            role,
            report,
            dry_run,
            is_admin=is_admin,
        )

    async def _ensure_organization(
        self, group: UserGroup, report: MigrationReport, dry_run: bool
    ) -> str:
        owner_id = UserId.from_string(group.owner.id)
        existing = await self._organizations.get_by_owner(owner_id)
        if existing is not None:
            report.record_skipped("organizations")
            self._probe.item_skipped(
                "organizations", existing.id.value, "Organization already exists"
            )
            return existing.id.value

        subdomain = await self._allocator.allocate(group.organization_name)
        if dry_run:
            report.record_created("organizations")
            self._probe.would_write("create organization", group.organization_name)
            return DRY_RUN_ORGANIZATION

        organization = Organization.create(
            name=group.organization_name,
            owner_id=owner_id,
            subdomain=subdomain,
            tier=Tier.STARTER,
            trial_days=self._tenancy_settings.trial_period_days,
        )
        await self._organizations.save(organization)
        await self._organizations.wait_until_visible(organization.id)
        report.record_created("organizations")
        self._probe.item_written("organizations", organization.id.value, "created")
        return organization.id.value

    async def _ensure_workspace(
        self,
        group: UserGroup,
        organization_id: str,
        report: MigrationReport,
        dry_run: bool,
    ) -> str:
        if organization_id != DRY_RUN_ORGANIZATION:
            existing = await self._workspaces.get_default(
                OrganizationId.from_string(organization_id)
            )
            if existing is not None:
                report.record_skipped("workspaces")
                self._probe.item_skipped(
                    "workspaces", existing.id.value, "Workspace already exists"
                )
                return existing.id.value

        if dry_run:
            report.record_created("workspaces")
            self._probe.would_write("create workspace", self._settings.default_workspace_name)
            return DRY_RUN_WORKSPACE

        workspace = Workspace.create(
            name=self._settings.default_workspace_name,
            organization_id=OrganizationId.from_string(organization_id),
            created_by=UserId.from_string(group.owner.id),
            description=self._settings.default_workspace_description,
        )
        await self._workspaces.save(workspace)
        report.record_created("workspaces")
        self._probe.item_written("workspaces", workspace.id.value, "created")
        return workspace.id.value

    async def _ensure_subscription(
        self, organization_id: str, report: MigrationReport, dry_run: bool
    ) -> None:
        if organization_id != DRY_RUN_ORGANIZATION:
            existing = await self._subscriptions.get_by_organization(
                OrganizationId.from_string(organization_id)
            )
            if existing is not None:
                report.record_skipped("subscriptions")
                self._probe.item_skipped(
                    "subscriptions", existing.id.value, "Subscription already exists"
                )
                return

        if dry_run:
            report.record_created("subscriptions")
            self._probe.would_write(
                "create subscription for organization", organization_id
            )
            return

        subscription = Subscription.start_trial(
            OrganizationId.from_string(organization_id),
            tier=Tier.STARTER,
            trial_days=self._tenancy_settings.trial_period_days,
        )
        await self._subscriptions.save(subscription)
        report.record_created("subscriptions")
        self._probe.item_written("subscriptions", subscription.id.value, "created")

    async def _backfill_resources(
        self,
        collection: str,
        user_ids: Sequence[str],
        workspace_id: str,
        report: MigrationReport,
        dry_run: bool,
    ) -> None:
        documents = await query_any_of(self._store, collection, "userId", user_ids)
        for document in documents:
            if document.data.get("workspaceId"):
                report.record_skipped(collection)
                continue

            if dry_run:
                report.record_updated(collection)
                self._probe.would_write(
                    f"update {collection}/{document.id} with workspaceId", workspace_id
                )
                continue

            try:
                await self._store.update(
                    collection,
                    document.id,
                    {"workspaceId": workspace_id, "updatedAt": datetime.now(UTC)},
                )
            except StoreUnavailableError:
                raise
            except StoreError as e:
                report.record_error(collection, document.id, e)
                self._probe.item_failed(collection, document.id, str(e))
                continue

            report.record_updated(collection)
            self._probe.item_written(collection, document.id, "updated")

    async def _affiliate_user(
        self,
        user: StoredDocument,
        organization_id: str,
        workspace_id: str,
        role: str,
        report: MigrationReport,
        dry_run: bool,
        is_admin: bool | None = None,
    ) -> None:
        if dry_run:
            report.record_updated("users")
            self._probe.would_write("update user", user.id)
            return

        workspace_ids = list(user.data.get("workspaceIds") or [])
        if workspace_id not in workspace_ids:
            workspace_ids.insert(0, workspace_id)

        fields: dict[str, Any] = {
            "organizationId": organization_id,
            "workspaceIds": workspace_ids,
            "role": role,
            "seatType": user.data.get("seatType") or SEAT_TYPE,
            "updatedAt": datetime.now(UTC),
        }
        if is_admin is not None:
            fields["is_admin"] = is_admin

        try:
            await self._store.update(USERS, user.id, fields)
        except StoreUnavailableError:
            raise
        except StoreError as e:
            report.record_error("users", user.id, e)
            self._probe.item_failed("users", user.id, str(e))
            return

        report.record_updated("users")
        self._probe.item_written("users", user.id, "updated")

