"""Google login use case - sign-in with a Google ID token."""

import logging
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants.roles import DEFAULT_ROLE, GOOGLE_PROVIDER
from ..exceptions import AuthErrorKind, AuthenticationError
from ..interfaces.services import (
    IExternalTokenValidator,
    IIdentityService,
    IRefreshTokenStore,
    ITokenService,
)
from ..schemas.auth import GoogleLoginCommand, GoogleLoginResult
from ..schemas.tokens import ExternalIdentity
from .login import issue_token_pair

logger = logging.getLogger(__name__)


class GoogleLoginUseCase:
    """
    Verify the Google ID token, find or create the matching user and open a session.

    First sign-in of an account without roles assigns the default role.
    A unique violation from a concurrent first sign-in is retried once.
    """

    def __init__(
        self,
        session: AsyncSession,
        token_service: ITokenService,
        google_token_validator: IExternalTokenValidator,
        identity_service_factory: Callable[..., IIdentityService],
        refresh_token_store_factory: Callable[..., IRefreshTokenStore],
    ):
        self.session = session
        self.token_service = token_service
        self.google_token_validator = google_token_validator
        self.identity_service: IIdentityService = identity_service_factory(session=session)
        self.refresh_store: IRefreshTokenStore = refresh_token_store_factory(session=session)

    async def execute(self, command: GoogleLoginCommand) -> GoogleLoginResult:
        external = await self.google_token_validator.validate(command.id_token)

        try:
            return await self._sign_in(external)
        except IntegrityError:
            # A concurrent first sign-in created the same user or link; the retry finds it
            logger.info("Google login lost a creation race, retrying")

        try:
            return await self._sign_in(external)
        except IntegrityError as exc:
            logger.warning("Google login rejected by unique constraint after retry")
            raise AuthenticationError(AuthErrorKind.IDENTITY_CONFLICT) from exc

    async def _sign_in(self, external: ExternalIdentity) -> GoogleLoginResult:
        try:
            user, is_new = await self.identity_service.find_or_create_external_user(
                external.email,
                GOOGLE_PROVIDER,
                external.provider_user_id,
                external.display_name,
            )

            if await self.identity_service.is_banned(user.id):
                logger.info("Google login rejected: account banned | user_id=%s", user.id)
                raise AuthenticationError(AuthErrorKind.ACCOUNT_BANNED)

            roles = await self.identity_service.get_roles(user.id)
            if not roles:
                await self.identity_service.assign_role(user.id, DEFAULT_ROLE)
                roles = [DEFAULT_ROLE]

            tokens = await issue_token_pair(self.token_service, self.refresh_store, user, roles)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

        logger.info("Google login succeeded | user_id=%s | is_new_account=%s", user.id, is_new)
        return GoogleLoginResult(**tokens.model_dump(), is_new_account=is_new)
