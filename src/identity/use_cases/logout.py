"""Logout use case - idempotent revocation of a refresh token."""

import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthErrorKind, AuthenticationError
from ..interfaces.services import IRefreshTokenStore

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """Revoke the presented refresh token; an already revoked token is a no-op success."""

    def __init__(
        self,
        session: AsyncSession,
        refresh_token_store_factory: Callable[..., IRefreshTokenStore],
    ):
        self.session = session
        self.refresh_store: IRefreshTokenStore = refresh_token_store_factory(session=session)

    async def execute(self, refresh_token: str) -> None:
        info = await self.refresh_store.resolve(refresh_token)
        if info is None:
            logger.info("Logout rejected: token invalid or expired")
            raise AuthenticationError(AuthErrorKind.INVALID_REFRESH_TOKEN)

        if info.revoked:
            logger.info("Logout skipped: token already revoked | user_id=%s", info.user_id)
            return

        try:
            revoked = await self.refresh_store.revoke(info)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

        logger.info("User logged out | user_id=%s | revoked=%s", info.user_id, revoked)
