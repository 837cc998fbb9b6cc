"""Cleanup use case - prunes denylist entries and expired refresh records."""

import logging
from datetime import timedelta
from typing import Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from ..interfaces.repositories import IRefreshTokenRepository, IRevokedTokenRepository
from ..utils.time import now_db_utc

logger = logging.getLogger(__name__)


class CleanupTokensUseCase:
    """
    Delete data that can no longer influence a validation decision.

    - revocation entries whose token would have expired anyway
    - refresh records expired for longer than the retention window
    """

    def __init__(
        self,
        session: AsyncSession,
        refresh_token_repository_factory: Callable[..., IRefreshTokenRepository],
        revoked_token_repository_factory: Callable[..., IRevokedTokenRepository],
        retention_days: int,
    ):
        self.session = session
        self.refresh_token_repo: IRefreshTokenRepository = refresh_token_repository_factory(session=session)
        self.revoked_token_repo: IRevokedTokenRepository = revoked_token_repository_factory(session=session)
        self.retention_days = retention_days

    async def execute(self) -> Dict[str, int]:
        now = now_db_utc()
        cutoff = now - timedelta(days=self.retention_days)

        try:
            revoked_deleted = await self.revoked_token_repo.delete_expired(now=now)
            refresh_deleted = await self.refresh_token_repo.delete_expired_before(cutoff)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

        logger.info(
            "Token cleanup finished | revoked_tokens_deleted=%s | refresh_tokens_deleted=%s | retention_days=%s",
            revoked_deleted,
            refresh_deleted,
            self.retention_days,
        )
        return {"revoked_tokens_deleted": revoked_deleted, "refresh_tokens_deleted": refresh_deleted}
