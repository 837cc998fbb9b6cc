"""Register use case - creates a password account with the default role."""

import logging
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthErrorKind, AuthenticationError
from ..interfaces.services import IIdentityService
from ..schemas.auth import RegisterCommand, RegisterResult

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Create a user through the credential store.

    A duplicate email is reported as an authentication error (IDENTITY_CONFLICT),
    in the same family as bad credentials.
    """

    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)

    async def execute(self, command: RegisterCommand) -> RegisterResult:
        logger.info("Registering user")

        try:
            user = await self.identity_service.create_user(command.email, command.password)
            await self.session.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration of the same email
            await self.session.rollback()
            logger.info("Registration rejected by unique constraint")
            raise AuthenticationError(AuthErrorKind.IDENTITY_CONFLICT) from exc
        except BaseException:
            await self.session.rollback()
            raise

        logger.info("User registered | user_id=%s", user.id)
        return RegisterResult(id=user.id, email=user.email)
