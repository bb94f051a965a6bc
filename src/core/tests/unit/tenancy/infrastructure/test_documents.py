"""Unit tests for tenancy document schemas."""

from datetime import UTC, datetime

import pytest

from shared_kernel.document_store import DocumentSchemaError, StoredDocument
from tenancy.domain.aggregates import Member, Workspace
from tenancy.domain.value_objects import (
    Admin,
    JoinRequestStatus,
    OrganizationId,
    OrgMember,
    Tier,
    UserId,
    Viewer,
    WorkspaceId,
)
from tenancy.infrastructure.documents import (
    ORGANIZATIONS,
    USERS,
    JoinRequestDocument,
    MemberDocument,
    OrganizationDocument,
    SubscriptionDocument,
    WorkspaceDocument,
    parse_document,
)


class TestOrganizationDocument:
    def test_missing_owner_is_a_schema_error(self):
        document = StoredDocument(id="org-1", data={"name": "Acme"})

        with pytest.raises(DocumentSchemaError) as exc_info:
            parse_document(OrganizationDocument, ORGANIZATIONS, document)

        assert exc_info.value.document_id == "org-1"
        assert "ownerId" in exc_info.value.detail

    def test_empty_owner_is_a_schema_error(self):
        document = StoredDocument(id="org-1", data={"name": "Acme", "ownerId": ""})

        with pytest.raises(DocumentSchemaError):
            parse_document(OrganizationDocument, ORGANIZATIONS, document)

    def test_legacy_document_derives_limit_and_tier(self):
        document = StoredDocument(
            id="org-1",
            data={"name": "Acme", "ownerId": "u1", "tier": "small_team", "extra": 1},
        )

        organization = parse_document(
            OrganizationDocument, ORGANIZATIONS, document
        ).to_domain(document.id)

        assert organization.tier == Tier.STARTER
        assert organization.workspace_limit == 1
        assert organization.owner_id == UserId.from_string("u1")

    def test_stored_fields_are_camel_case(self):
        data = OrganizationDocument(
            name="Acme", owner_id="u1", tier=Tier.TEAM, workspace_limit=10
        ).to_data()

        assert data["ownerId"] == "u1"
        assert data["tier"] == "team"
        assert data["workspaceLimit"] == 10
        assert data["subscriptionStatus"] == "trialing"


class TestMemberDocument:
    def test_admin_flag_keeps_snake_case(self):
        member = Member(
            id=UserId.from_string("u1"),
            organization_id=OrganizationId.from_string("o1"),
            workspace_ids=[WorkspaceId.from_string("w1")],
            role=OrgMember(is_admin=True),
        )

        fields = MemberDocument.from_domain(member).tenancy_fields()

        assert fields == {
            "organizationId": "o1",
            "workspaceIds": ["w1"],
            "role": "member",
            "is_admin": True,
        }

    @pytest.mark.parametrize(
        "data, role",
        [
            ({"role": "admin"}, Admin()),
            ({"role": "member", "is_admin": True}, OrgMember(is_admin=True)),
            ({"role": "owner"}, Viewer()),
            ({}, Viewer()),
        ],
    )
    def test_roles_are_read_leniently(self, data, role):
        document = StoredDocument(id="u1", data={"email": "a@b.c", **data})

        member = parse_document(MemberDocument, USERS, document).to_domain(document.id)

        assert member.role == role
        assert not member.is_affiliated


class TestSubscriptionDocument:
    def test_missing_status_is_a_schema_error(self):
        document = StoredDocument(id="s1", data={"organizationId": "o1"})

        with pytest.raises(DocumentSchemaError):
            parse_document(SubscriptionDocument, "subscriptions", document)

    def test_provider_fields_are_preserved(self):
        document = StoredDocument(
            id="s1",
            data={
                "organizationId": "o1",
                "status": "active",
                "paymentProvider": {"customerId": "cus_1", "subscriptionId": "sub_1"},
                "currentPeriodEnd": datetime(2024, 2, 1, tzinfo=UTC),
            },
        )

        subscription = parse_document(
            SubscriptionDocument, "subscriptions", document
        ).to_domain(document.id)

        assert subscription.provider_subscription_id == "sub_1"
        assert subscription.payment_provider["customerId"] == "cus_1"


class TestJoinRequestDocument:
    REQUESTED = datetime(2024, 3, 1, tzinfo=UTC)
    RESPONDED = datetime(2024, 3, 2, tzinfo=UTC)

    def test_legacy_responded_fields_are_read(self):
        document = StoredDocument(
            id="jr-1",
            data={
                "organizationId": "o1",
                "userId": "u1",
                "status": "approved",
                "requestedAt": self.REQUESTED,
                "respondedAt": self.RESPONDED,
                "respondedBy": "admin-1",
            },
        )

        request = parse_document(
            JoinRequestDocument, "organizationRequests", document
        ).to_domain(document.id)

        assert request.status == JoinRequestStatus.APPROVED
        assert request.processed_at == self.RESPONDED
        assert request.processed_by == UserId.from_string("admin-1")

    def test_processed_fields_take_precedence(self):
        document = StoredDocument(
            id="jr-1",
            data={
                "organizationId": "o1",
                "userId": "u1",
                "status": "rejected",
                "requestedAt": self.REQUESTED,
                "processedAt": self.RESPONDED,
                "processedBy": "admin-2",
                "respondedAt": self.REQUESTED,
                "respondedBy": "admin-1",
            },
        )

        parsed = parse_document(JoinRequestDocument, "organizationRequests", document)

        assert parsed.processed_by == "admin-2"
        assert parsed.processed_at == self.RESPONDED

    def test_written_under_current_names(self):
        parsed = JoinRequestDocument.model_validate(
            {
                "organizationId": "o1",
                "userId": "u1",
                "status": "approved",
                "requestedAt": self.REQUESTED,
                "respondedAt": self.RESPONDED,
                "respondedBy": "admin-1",
            }
        )

        data = parsed.to_data()

        assert data["processedAt"] == self.RESPONDED
        assert data["processedBy"] == "admin-1"
        assert "respondedAt" not in data
        assert data["status"] == "approved"


class TestWorkspaceDocument:
    def test_owner_round_trips(self):
        workspace = Workspace.create(
            "Research", OrganizationId.from_string("o1"), UserId.from_string("alice")
        )

        data = WorkspaceDocument.from_domain(workspace).to_data()
        restored = WorkspaceDocument.model_validate(data).to_domain(workspace.id.value)

        assert data["ownerId"] == "alice"
        assert data["createdBy"] == "alice"
        assert restored.owner_id == UserId.from_string("alice")

    def test_legacy_workspace_has_no_owner(self):
        document = StoredDocument(
            id="w1", data={"name": "Default", "organizationId": "o1", "createdBy": "bob"}
        )

        workspace = parse_document(WorkspaceDocument, "workspaces", document).to_domain(
            document.id
        )

        assert workspace.owner_id is None
        assert workspace.created_by == UserId.from_string("bob")
