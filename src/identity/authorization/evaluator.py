"""Minimum-role authorization checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from .role_hierarchy import ROLE_LEVELS, RoleLevel, level_of


@dataclass(frozen=True)
class MinimumRole:
    """Requirement: the caller holds at least ``level``."""

    level: RoleLevel


def highest_level(
    presented_roles: Iterable[str],
    levels: Mapping[str, RoleLevel] = ROLE_LEVELS,
) -> Optional[RoleLevel]:
    resolved = [level for level in (level_of(role, levels) for role in presented_roles) if level is not None]
    return max(resolved) if resolved else None


def authorize(
    presented_roles: Iterable[str],
    requirement: MinimumRole | RoleLevel,
    levels: Mapping[str, RoleLevel] = ROLE_LEVELS,
) -> bool:
    """Allow when any presented role resolves to a level >= the required one.

    Unknown role names grant nothing.
    """
    minimum = requirement.level if isinstance(requirement, MinimumRole) else requirement
    best = highest_level(presented_roles, levels)
    return best is not None and best >= minimum
