"""Login use case - password sign-in that opens a new session."""

import logging
from typing import Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthErrorKind, AuthenticationError
from ..interfaces.services import IIdentityService, IRefreshTokenStore, ITokenService
from ..models.user import User
from ..schemas.auth import AuthTokenResult, LoginCommand

logger = logging.getLogger(__name__)


async def issue_token_pair(
    token_service: ITokenService,
    refresh_store: IRefreshTokenStore,
    user: User,
    roles: Iterable[str],
) -> AuthTokenResult:
    """Mint an access token and a fresh (non-rotated) refresh token for ``user``."""
    access = token_service.issue_access_token(user.id, user.email, roles)
    refresh = await refresh_store.issue(user.id, user.email)
    return AuthTokenResult(
        access_token=access.token,
        refresh_token=refresh.token,
        access_token_expires_at=access.expires_at,
    )


class LoginUseCase:
    """Validate credentials, load roles and issue an access/refresh pair."""

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

    async def execute(self, command: LoginCommand) -> AuthTokenResult:
        try:
            user = await self.identity_service.validate_credentials(command.email, command.password)

            if await self.identity_service.is_banned(user.id):
                logger.info("Login rejected: account banned | user_id=%s", user.id)
                raise AuthenticationError(AuthErrorKind.ACCOUNT_BANNED)

            roles = await self.identity_service.get_roles(user.id)
            result = await issue_token_pair(self.token_service, self.refresh_store, user, roles)
            await self.session.commit()
        except AuthenticationError as exc:
            await self.session.rollback()
            logger.info("Login failed | kind=%s", exc.kind.value)
            raise
        except BaseException:
            await self.session.rollback()
            raise

        logger.info("User logged in | user_id=%s | roles=%s", user.id, ",".join(roles))
        return result
