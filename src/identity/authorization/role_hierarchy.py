"""Ordered role levels used by minimum-role authorization."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional

from ..constants import roles


class RoleLevel(IntEnum):
    MEMBER = 1
    ADMIN = 2
    SUPER_ADMIN = 3


# Built once at import; lookups are case-insensitive exact matches.
ROLE_LEVELS: Mapping[str, RoleLevel] = MappingProxyType(
    {
        roles.MEMBER.lower(): RoleLevel.MEMBER,
        roles.ADMIN.lower(): RoleLevel.ADMIN,
        roles.SUPER_ADMIN.lower(): RoleLevel.SUPER_ADMIN,
    }
)

CANONICAL_ROLE_NAMES: Mapping[RoleLevel, str] = MappingProxyType(
    {
        RoleLevel.MEMBER: roles.MEMBER,
        RoleLevel.ADMIN: roles.ADMIN,
        RoleLevel.SUPER_ADMIN: roles.SUPER_ADMIN,
    }
)


def level_of(role_name: str | None, levels: Mapping[str, RoleLevel] = ROLE_LEVELS) -> Optional[RoleLevel]:
    """Return the level for ``role_name`` or None when the name is not a known role."""
    if not role_name:
        return None
    return levels.get(role_name.lower())


def canonical_role_name(role_name: str) -> Optional[str]:
    """Map any casing of a known role to its stored spelling ("admin" -> "Admin")."""
    level = level_of(role_name)
    if level is None:
        return None
    return CANONICAL_ROLE_NAMES[level]
