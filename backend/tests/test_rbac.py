# tests/test_rbac.py
"""
Tests for the permission resolver

Coverage:
- Role override (ADMIN / SUPER_ADMIN)
- Users without an access group
- Granular flags
- Broken group without a permission bundle
- Capability names vs Permission columns

Run with: pytest backend/tests/test_rbac.py -v
"""

import logging

import pytest

from lead_hunter.exceptions import ForbiddenError
from lead_hunter.models import AccessGroup, Permission, User
from lead_hunter.rbac import (
    Capability,
    Role,
    can,
    can_view_all_leads,
    check_capability,
    effective_permissions,
    has_role_override,
)
from lead_hunter.schemas import PermissionFlags

pytestmark = pytest.mark.unit


def build_user(role="SELLER", **flags):
    """Unsaved user; pass flags to give it a group"""
    user = User(id="u-1", name="Test", email="test@leadhunter.test", role=role)
    if flags:
        user.access_group = AccessGroup(id="g-1", name="Test Group", permissions=Permission(**flags))
    return user


ALL_CAPABILITIES = list(Capability)


# ============================================================================
# TEST: Role override
# ============================================================================

class TestRoleOverride:

    @pytest.mark.parametrize("role", [Role.ADMIN.value, Role.SUPER_ADMIN.value])
    @pytest.mark.parametrize("capability", ALL_CAPABILITIES)
    def test_admin_roles_hold_every_capability(self, role, capability):
        assert can(build_user(role=role), capability) is True

    def test_override_ignores_group_flags(self):
        user = build_user(role="ADMIN", can_assign_leads=False)
        assert can(user, Capability.ASSIGN_LEADS) is True
        assert has_role_override(user) is True

    def test_role_enum_accepted(self):
        user = build_user(role=Role.SUPER_ADMIN)
        assert has_role_override(user) is True

    def test_seller_has_no_override(self):
        assert has_role_override(build_user(role="SELLER")) is False


# ============================================================================
# TEST: No access group
# ============================================================================

class TestNoGroup:

    @pytest.mark.parametrize("role", ["SELLER", "USER"])
    @pytest.mark.parametrize("capability", ALL_CAPABILITIES)
    def test_user_without_group_has_nothing(self, role, capability):
        assert can(build_user(role=role), capability) is False

    def test_effective_permissions_all_false(self):
        perms = effective_permissions(build_user(role="USER"))
        assert set(perms) == {c.value for c in Capability}
        assert not any(perms.values())


# ============================================================================
# TEST: Granular flags
# ============================================================================

class TestGranularFlags:

    def test_flag_true(self):
        user = build_user(can_view_own_leads=True)
        assert can(user, Capability.VIEW_OWN_LEADS) is True

    def test_flags_are_independent(self):
        user = build_user(can_view_all_leads=True)
        assert can(user, Capability.VIEW_ALL_LEADS) is True
        assert can(user, Capability.VIEW_OWN_LEADS) is False
        assert can(user, Capability.ASSIGN_LEADS) is False

    def test_unset_flag_is_false(self):
        # Column defaults only apply on flush
        user = build_user(can_view_crm=True)
        assert user.access_group.permissions.can_view_costs is None
        assert can(user, Capability.VIEW_COSTS) is False

    def test_string_capability_name(self):
        user = build_user(can_assign_leads=True)
        assert can(user, "canAssignLeads") is True
        assert can_view_all_leads(user) is False

    def test_unknown_capability_raises(self):
        with pytest.raises(ValueError):
            can(build_user(role="ADMIN"), "canLaunchRockets")

    def test_group_without_bundle_denies_and_logs(self, caplog):
        user = build_user()
        user.access_group = AccessGroup(id="g-2", name="Broken")

        with caplog.at_level(logging.ERROR, logger="lead_hunter.rbac"):
            assert can(user, Capability.VIEW_OWN_LEADS) is False

        assert "no permission bundle" in caplog.text

    def test_effective_permissions_mirror_group(self):
        user = build_user(can_view_own_leads=True, can_view_chat=True)
        perms = effective_permissions(user)
        assert perms["canViewOwnLeads"] is True
        assert perms["canViewChat"] is True
        assert perms["canViewAllLeads"] is False


# ============================================================================
# TEST: check_capability
# ============================================================================

class TestCheckCapability:

    def test_denied_raises_forbidden(self, caplog):
        user = build_user(can_view_own_leads=True)

        with caplog.at_level(logging.WARNING, logger="lead_hunter.rbac"):
            with pytest.raises(ForbiddenError) as exc_info:
                check_capability(user, Capability.ASSIGN_LEADS)

        assert exc_info.value.capability == "canAssignLeads"
        assert exc_info.value.kind == "forbidden"
        assert "test@leadhunter.test" in caplog.text

    def test_allowed_returns_silently(self):
        check_capability(build_user(can_assign_leads=True), "canAssignLeads")


# ============================================================================
# TEST: Capability vocabulary
# ============================================================================

class TestCapabilityColumns:

    @pytest.mark.parametrize("capability", ALL_CAPABILITIES)
    def test_every_capability_has_a_column(self, capability):
        assert hasattr(Permission, capability.attribute)

    def test_input_schema_covers_every_capability(self):
        fields = PermissionFlags.model_fields
        assert set(fields) == {c.attribute for c in Capability}
        assert {f.alias for f in fields.values()} == {c.value for c in Capability}
