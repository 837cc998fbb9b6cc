"""Repository for the refresh-token denylist."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from ..models.revoked_token import RevokedToken
from ..utils.time import now_db_utc


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Data access layer for revoked JWT identifiers."""

    def __init__(self, session: AsyncSession):
        super().__init__(RevokedToken, session)

    async def get_by_jti(self, jti: str) -> Optional[RevokedToken]:
        stmt = select(RevokedToken).where(RevokedToken.jti == jti)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_revoked(self, jti: str) -> bool:
        stmt = select(RevokedToken.id).where(RevokedToken.jti == jti)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def try_revoke(self, jti: str, user_id: uuid.UUID, expires_at: datetime) -> bool:
        """Insert a denylist entry; False when the jti was already revoked.

        The insert runs in a savepoint so a unique-constraint violation from a
        concurrent revoke leaves the outer transaction usable.
        """
        if await self.is_revoked(jti):
            return False
        try:
            async with self.session.begin_nested():
                self.session.add(RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at))
        except IntegrityError:
            return False
        return True

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        stmt = delete(RevokedToken).where(RevokedToken.expires_at < (now or now_db_utc()))
        result = await self.session.execute(stmt)
        return result.rowcount or 0
