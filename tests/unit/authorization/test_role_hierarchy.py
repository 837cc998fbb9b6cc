"""Unit tests for role levels and canonical role names."""

import pytest

from identity.authorization.role_hierarchy import (
    ROLE_LEVELS,
    RoleLevel,
    canonical_role_name,
    level_of,
)


@pytest.mark.unit
class TestRoleHierarchy:
    def test_levels_are_ordered(self):
        assert RoleLevel.MEMBER < RoleLevel.ADMIN < RoleLevel.SUPER_ADMIN

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Member", RoleLevel.MEMBER),
            ("member", RoleLevel.MEMBER),
            ("ADMIN", RoleLevel.ADMIN),
            ("SuperAdmin", RoleLevel.SUPER_ADMIN),
            ("superadmin", RoleLevel.SUPER_ADMIN),
        ],
    )
    def test_level_of_known_roles(self, name, expected):
        assert level_of(name) == expected

    @pytest.mark.parametrize("name", ["", None, "Owner", "Super Admin", "admins", " Admin ", "Member\n"])
    def test_level_of_unknown_roles(self, name):
        assert level_of(name) is None

    def test_canonical_role_name(self):
        assert canonical_role_name("superADMIN") == "SuperAdmin"
        assert canonical_role_name("admin") == "Admin"
        assert canonical_role_name("guest") is None

    def test_role_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_LEVELS["owner"] = RoleLevel.SUPER_ADMIN
