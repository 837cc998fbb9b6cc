"""Refresh use case - rotates a refresh token and re-authorizes the user."""

import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthErrorKind, AuthenticationError
from ..interfaces.services import IIdentityService, IRefreshTokenStore, ITokenService
from ..schemas.auth import AuthTokenResult, RefreshTokenCommand
from ..schemas.tokens import RefreshTokenInfo

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Exchange an active refresh token for a new access/refresh pair.

    Steps:
    1. Resolve the presented token (malformed, unknown, expired -> INVALID_REFRESH_TOKEN)
    2. Reject explicitly revoked tokens (REFRESH_TOKEN_REVOKED)
    3. Reject banned owners (ACCOUNT_SUSPENDED)
    4. Reload current roles from the credential store
    5. Rotate: conditional revoke of the old token + insert of the successor,
       committed together. Losing the swap to a concurrent refresh is
       reported as REFRESH_TOKEN_REVOKED.
    """

    def __init__(
        self,
        session: AsyncSession,
        token_service: ITokenService,
        identity_service_factory: Callable[..., IIdentityService],
        refresh_token_store_factory: Callable[..., IRefreshTokenStore],
    ):
        self.session = session
        self.token_service = token_service
        self.identity_service: IIdentityService = identity_service_factory(session=session)
        self.refresh_store: IRefreshTokenStore = refresh_token_store_factory(session=session)

    async def execute(self, command: RefreshTokenCommand) -> AuthTokenResult:
        try:
            result = await self._rotate(command)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
        return result

    async def _rotate(self, command: RefreshTokenCommand) -> AuthTokenResult:
        info = await self.refresh_store.resolve(command.refresh_token)
        if info is None:
            logger.info("Refresh rejected: token invalid or expired")
            raise AuthenticationError(AuthErrorKind.INVALID_REFRESH_TOKEN)

        self._check_access_token_owner(command.access_token, info)

        if info.revoked:
            if await self.identity_service.is_banned(info.user_id):
                logger.info("Refresh rejected: token revoked by ban | user_id=%s", info.user_id)
            else:
                # Reuse of a rotated token is a theft signal
                logger.warning("Refresh rejected: revoked token presented | user_id=%s", info.user_id)
            raise AuthenticationError(AuthErrorKind.REFRESH_TOKEN_REVOKED)

        if await self.identity_service.is_banned(info.user_id):
            logger.info("Refresh rejected: account suspended | user_id=%s", info.user_id)
            raise AuthenticationError(AuthErrorKind.ACCOUNT_SUSPENDED)

        user = await self.identity_service.find_by_id(info.user_id)
        if user is None:
            logger.info("Refresh rejected: owner no longer exists | user_id=%s", info.user_id)
            raise AuthenticationError(AuthErrorKind.INVALID_REFRESH_TOKEN)

        roles = await self.identity_service.get_roles(user.id)

        successor = await self.refresh_store.rotate(info, user.id, user.email)
        if successor is None:
            raise AuthenticationError(AuthErrorKind.REFRESH_TOKEN_REVOKED)

        access = self.token_service.issue_access_token(user.id, user.email, roles)
        logger.info("Refresh token rotated | user_id=%s | roles=%s", user.id, ",".join(roles))

        return AuthTokenResult(
            access_token=access.token,
            refresh_token=successor.token,
            access_token_expires_at=access.expires_at,
        )

    def _check_access_token_owner(self, access_token: Optional[str], info: RefreshTokenInfo) -> None:
        if access_token is None:
            return
        claims = self.token_service.decode_access_token(access_token, verify_exp=False)
        if claims is None or claims.user_id != info.user_id:
            logger.warning("Refresh rejected: access token does not match refresh token owner")
            raise AuthenticationError(AuthErrorKind.INVALID_REFRESH_TOKEN)
