"""Set password use case - adds a password to an externally provisioned account."""

import logging
import uuid
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..interfaces.services import IIdentityService
from ..schemas.auth import SetPasswordCommand

logger = logging.getLogger(__name__)


class SetPasswordUseCase:
    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)

    async def execute(self, user_id: uuid.UUID, command: SetPasswordCommand) -> None:
        try:
            await self.identity_service.set_password(user_id, command.password)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
        logger.info("Password added to account | user_id=%s", user_id)
