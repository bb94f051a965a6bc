"""Unit tests for the role-permission matrix and role parsing."""

from dataclasses import fields

import pytest

from tenancy.domain.exceptions import PermissionDeniedError
from tenancy.domain.permissions import (
    ADMIN_CAPABILITIES,
    CONTRIBUTOR_CAPABILITIES,
    RESEARCHER_CAPABILITIES,
    VIEWER_CAPABILITIES,
    Capabilities,
    can_edit_nugget,
    capability,
    ensure_can_edit_nugget,
    ensure_capability,
)
from tenancy.domain.value_objects import (
    Admin,
    Contributor,
    OrgMember,
    Researcher,
    UserId,
    Viewer,
    has_admin_capability,
    parse_role,
    role_to_fields,
)

ALL_ROLES = [
    Viewer(),
    Contributor(),
    Researcher(),
    Admin(),
    OrgMember(is_admin=False),
    OrgMember(is_admin=True),
]

OWNER = UserId.from_string("owner-1")
OTHER = UserId.from_string("other-2")


class TestCapabilityMatrix:
    """Tests for capability(role)."""

    @pytest.mark.parametrize("role", ALL_ROLES, ids=repr)
    def test_every_role_has_a_full_record(self, role):
        record = capability(role)

        assert isinstance(record, Capabilities)
        assert all(isinstance(getattr(record, f.name), bool) for f in fields(record))

    def test_unknown_role_gets_viewer(self):
        assert capability(None) == VIEWER_CAPABILITIES
        assert capability("superuser") == VIEWER_CAPABILITIES

    def test_levels_are_cumulative(self):
        ordered = [
            VIEWER_CAPABILITIES,
            CONTRIBUTOR_CAPABILITIES,
            RESEARCHER_CAPABILITIES,
            ADMIN_CAPABILITIES,
        ]
        for lower, higher in zip(ordered, ordered[1:]):
            for f in fields(Capabilities):
                if getattr(lower, f.name):
                    assert getattr(higher, f.name), f.name

    def test_viewer_can_only_view(self):
        assert VIEWER_CAPABILITIES.can_view
        assert not VIEWER_CAPABILITIES.can_comment
        assert not VIEWER_CAPABILITIES.can_create_nuggets

    def test_only_admins_manage_team_and_billing(self):
        for role in ALL_ROLES:
            record = capability(role)
            expected = has_admin_capability(role)
            assert record.can_manage_team is expected
            assert record.can_manage_billing is expected

    def test_org_members_map_onto_four_level_scheme(self):
        assert capability(OrgMember(is_admin=False)) == RESEARCHER_CAPABILITIES
        assert capability(OrgMember(is_admin=True)) == ADMIN_CAPABILITIES


class TestNuggetEditing:
    """Tests for the owner-relative nugget edit check."""

    def test_contributor_edits_own_nugget(self):
        assert can_edit_nugget(Contributor(), OWNER, OWNER)

    def test_contributor_cannot_edit_others_nugget(self):
        assert not can_edit_nugget(Contributor(), OTHER, OWNER)

        with pytest.raises(PermissionDeniedError):
            ensure_can_edit_nugget(Contributor(), OTHER, OWNER)

    @pytest.mark.parametrize("role", [Researcher(), Admin(), OrgMember(is_admin=True)], ids=repr)
    def test_researchers_and_admins_edit_any_nugget(self, role):
        assert can_edit_nugget(role, OWNER, OWNER)
        assert can_edit_nugget(role, OTHER, OWNER)
        ensure_can_edit_nugget(role, OTHER, OWNER)

    def test_viewer_edits_nothing(self):
        assert not can_edit_nugget(Viewer(), OWNER, OWNER)

    def test_nugget_without_owner_needs_blanket_capability(self):
        assert not can_edit_nugget(Contributor(), None, OWNER)
        assert can_edit_nugget(Researcher(), None, OWNER)


class TestEnsureCapability:
    """Tests for ensure_capability()."""

    def test_passes_when_held(self):
        ensure_capability(Admin(), "can_manage_team", "manage the team")

    def test_raises_with_action(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            ensure_capability(Researcher(), "can_manage_team", "manage the team")

        assert exc_info.value.action == "manage the team"


class TestRoleParsing:
    """Tests for reading and writing the stored role fields."""

    @pytest.mark.parametrize(
        "role,is_admin,expected",
        [
            ("viewer", False, Viewer()),
            ("contributor", False, Contributor()),
            ("researcher", False, Researcher()),
            ("admin", False, Admin()),
            ("member", True, OrgMember(is_admin=True)),
            ("member", False, OrgMember(is_admin=False)),
            ("member", None, OrgMember(is_admin=False)),
            ("owner", True, Viewer()),
            (None, None, Viewer()),
            ("", False, Viewer()),
        ],
    )
    def test_parse_role(self, role, is_admin, expected):
        assert parse_role(role, is_admin) == expected

    def test_is_admin_flag_ignored_outside_member_scheme(self):
        assert parse_role("viewer", True) == Viewer()

    @pytest.mark.parametrize("role", ALL_ROLES, ids=repr)
    def test_fields_read_back_to_same_role(self, role):
        assert parse_role(*role_to_fields(role)) == role
