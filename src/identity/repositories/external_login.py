"""Repository for external login links (Google, ...)."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from ..models.external_login import ExternalLogin


class ExternalLoginRepository(BaseRepository[ExternalLogin]):
    def __init__(self, session: AsyncSession):
        super().__init__(ExternalLogin, session)

    async def get_by_provider_key(self, provider: str, provider_key: str) -> Optional[ExternalLogin]:
        stmt = select(ExternalLogin).where(
            ExternalLogin.provider == provider,
            ExternalLogin.provider_key == provider_key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: uuid.UUID, provider: str) -> Optional[ExternalLogin]:
        stmt = select(ExternalLogin).where(
            ExternalLogin.user_id == user_id,
            ExternalLogin.provider == provider,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def link(
        self,
        user_id: uuid.UUID,
        provider: str,
        provider_key: str,
        display_name: Optional[str] = None,
    ) -> Optional[ExternalLogin]:
        """Link a provider key to the user. Returns None when the key belongs to another user."""
        existing = await self.get_by_provider_key(provider, provider_key)
        if existing:
            return existing if existing.user_id == user_id else None

        login = ExternalLogin(
            user_id=user_id,
            provider=provider,
            provider_key=provider_key,
            display_name=display_name,
        )
        await self.create(login)
        return login
