"""
Repository protocol definitions to decouple use cases and services from SQLAlchemy implementations.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from identity.models.user import User
    from identity.models.external_login import ExternalLogin
    from identity.models.refresh_token import RefreshToken
    from identity.models.revoked_token import RevokedToken


class IUserRepository(Protocol):
    async def get_by_id(self, id: uuid.UUID) -> Optional["User"]:
        ...

    async def get_by_email(self, email: str) -> Optional["User"]:
        ...

    async def email_exists(self, email: str) -> bool:
        ...

    async def create(self, entity: "User") -> "User":
        ...

    async def update(self, entity: "User") -> "User":
        ...

    async def get_roles(self, user_id: uuid.UUID) -> List[str]:
        ...

    async def add_role(self, user_id: uuid.UUID, role: str) -> bool:
        ...


class IExternalLoginRepository(Protocol):
    async def get_by_provider_key(self, provider: str, provider_key: str) -> Optional["ExternalLogin"]:
        ...

    async def get_for_user(self, user_id: uuid.UUID, provider: str) -> Optional["ExternalLogin"]:
        ...

    async def link(
        self,
        user_id: uuid.UUID,
        provider: str,
        provider_key: str,
        display_name: Optional[str] = None,
    ) -> Optional["ExternalLogin"]:
        ...


class IRefreshTokenRepository(Protocol):
    async def get_by_hash(self, token_hash: str) -> Optional["RefreshToken"]:
        ...

    async def create(self, entity: "RefreshToken") -> "RefreshToken":
        ...

    async def revoke_if_active(
        self,
        token_hash: str,
        replaced_by_token_hash: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> bool:
        ...

    async def revoke_all_for_user(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> int:
        ...

    async def list_active_for_user(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> List["RefreshToken"]:
        ...

    async def delete_expired_before(self, cutoff: datetime) -> int:
        ...


class IRevokedTokenRepository(Protocol):
    async def get_by_jti(self, jti: str) -> Optional["RevokedToken"]:
        ...

    async def is_revoked(self, jti: str) -> bool:
        ...

    async def try_revoke(self, jti: str, user_id: uuid.UUID, expires_at: datetime) -> bool:
        ...

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        ...
