"""Administrative use cases: banning, unbanning and assigning roles."""

import logging
import uuid
from typing import Any, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from ..interfaces.services import IIdentityService, IRefreshTokenStore
from ..schemas.auth import AssignRoleCommand, BanUserCommand

logger = logging.getLogger(__name__)


class BanUserUseCase:
    """
    Ban a user until a given moment.

    Active refresh tokens are revoked when requested; refresh is refused
    for banned owners either way.
    """

    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
        refresh_token_store_factory: Callable[..., IRefreshTokenStore],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)
        self.refresh_store: IRefreshTokenStore = refresh_token_store_factory(session=session)

    async def execute(self, user_id: uuid.UUID, command: BanUserCommand, initiator: str = "admin") -> Dict[str, Any]:
        try:
            user = await self.identity_service.ban_user(user_id, command.until)
            revoked = 0
            if command.revoke_sessions:
                revoked = await self.refresh_store.revoke_all_for_user(user_id)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

        logger.info(
            "Ban applied | user_id=%s | until=%s | revoked_sessions=%s | initiator=%s",
            user_id,
            user.banned_until.isoformat(),
            revoked,
            initiator,
        )
        return {"user_id": user_id, "banned_until": user.banned_until, "revoked_sessions": revoked}


class UnbanUserUseCase:
    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)

    async def execute(self, user_id: uuid.UUID, initiator: str = "admin") -> None:
        try:
            await self.identity_service.unban_user(user_id)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
        logger.info("Ban lifted | user_id=%s | initiator=%s", user_id, initiator)


class AssignRoleUseCase:
    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)

    async def execute(self, user_id: uuid.UUID, command: AssignRoleCommand) -> bool:
        try:
            added = await self.identity_service.assign_role(user_id, command.role)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
        return added
