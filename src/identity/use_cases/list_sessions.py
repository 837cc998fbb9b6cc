"""Session listing and current-user lookups for an authenticated caller."""

import logging
import uuid
from typing import Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import auth_messages
from ..exceptions import NotFoundError
from ..interfaces.services import IIdentityService, IRefreshTokenStore
from ..schemas.auth import CurrentUser, SessionInfo

logger = logging.getLogger(__name__)


class ListSessionsUseCase:
    """Return the caller's active refresh-token records (opaque strategy)."""

    def __init__(
        self,
        session: AsyncSession,
        refresh_token_store_factory: Callable[..., IRefreshTokenStore],
    ):
        self.session = session
        self.refresh_store: IRefreshTokenStore = refresh_token_store_factory(session=session)

    async def execute(self, user_id: uuid.UUID) -> List[SessionInfo]:
        records = await self.refresh_store.list_active_for_user(user_id)
        logger.debug("Active sessions listed | user_id=%s | count=%s", user_id, len(records))
        return [SessionInfo.model_validate(record) for record in records]


class GetCurrentUserUseCase:
    """Describe the caller with roles read from the store, not from the token."""

    def __init__(
        self,
        session: AsyncSession,
        identity_service_factory: Callable[..., IIdentityService],
    ):
        self.session = session
        self.identity_service: IIdentityService = identity_service_factory(session=session)

    async def execute(self, user_id: uuid.UUID) -> CurrentUser:
        user = await self.identity_service.find_by_id(user_id)
        if user is None:
            raise NotFoundError(auth_messages.USER_NOT_FOUND)
        roles = await self.identity_service.get_roles(user_id)
        return CurrentUser(id=user.id, email=user.email, roles=roles)
