"""Repository for the opaque refresh-token ledger."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from ..models.refresh_token import RefreshToken
from ..utils.time import now_db_utc


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Data access layer for refresh token records."""

    def __init__(self, session: AsyncSession):
        super().__init__(RefreshToken, session)

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def revoke_if_active(
        self,
        token_hash: str,
        replaced_by_token_hash: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-swap revoke.

        Issues a single conditional UPDATE; exactly one of several concurrent
        callers can see rowcount == 1 for the same record.
        """
        moment = now or now_db_utc()
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == token_hash,
                RefreshToken.revoked_at.is_(None),
                RefreshToken.expires_at > moment,
            )
            .values(revoked_at=moment, replaced_by_token_hash=replaced_by_token_hash)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def revoke_all_for_user(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> int:
        moment = now or now_db_utc()
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=moment)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def list_active_for_user(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> List[RefreshToken]:
        moment = now or now_db_utc()
        stmt = (
            select(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),
                RefreshToken.expires_at > moment,
            )
            .order_by(RefreshToken.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_expired_before(self, cutoff: datetime) -> int:
        """Drop records whose expiry lies before ``cutoff`` (retention cleanup)."""
        stmt = delete(RefreshToken).where(RefreshToken.expires_at < cutoff)
        result = await self.session.execute(stmt)
        return result.rowcount or 0
