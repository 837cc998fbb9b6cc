"""Repository for users and their role assignments."""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from ..models.user import User
from ..models.user_role import UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Data access layer for users."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == normalize_email(email))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        stmt = select(func.count()).select_from(User).where(User.email == normalize_email(email))
        result = await self.session.execute(stmt)
        return bool(result.scalar_one())

    async def get_roles(self, user_id: uuid.UUID) -> List[str]:
        stmt = select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_role(self, user_id: uuid.UUID, role: str) -> bool:
        stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add_role(self, user_id: uuid.UUID, role: str) -> bool:
        """Assign ``role``; returns False when the user already holds it."""
        if await self.has_role(user_id, role):
            return False
        self.session.add(UserRole(user_id=user_id, role=role))
        await self.session.flush()
        return True
