"""
Service protocols for dependency injection.

Use cases depend on these abstractions; the container decides which
implementation backs each one.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Protocol, Tuple, TYPE_CHECKING

from ..schemas.tokens import (
    AccessTokenClaims,
    ExternalIdentity,
    IssuedAccessToken,
    IssuedRefreshToken,
    RefreshTokenInfo,
)

if TYPE_CHECKING:
    from ..models.user import User
    from ..models.refresh_token import RefreshToken


class ITokenService(Protocol):
    """Signs and verifies JWTs. Holds no state between calls."""

    def issue_access_token(self, user_id: uuid.UUID, email: str, roles: Iterable[str]) -> IssuedAccessToken:
        ...

    def decode_access_token(self, token: str, verify_exp: bool = True) -> Optional[AccessTokenClaims]:
        ...

    def issue_refresh_jwt(self, user_id: uuid.UUID, email: str) -> IssuedRefreshToken:
        ...

    def validate_refresh_jwt(self, token: str) -> Optional[RefreshTokenInfo]:
        ...


class IRefreshTokenStore(Protocol):
    """Refresh-token lifecycle (issue, resolve, rotate, revoke) for one strategy."""

    strategy: str

    async def issue(self, user_id: uuid.UUID, email: str) -> IssuedRefreshToken:
        """Mint a refresh token and persist whatever the strategy needs."""
        ...

    async def resolve(self, token: str) -> Optional[RefreshTokenInfo]:
        """Return the token's owner/id/expiry, or None for malformed, unknown or expired tokens."""
        ...

    async def is_revoked(self, info: RefreshTokenInfo) -> bool:
        ...

    async def rotate(self, info: RefreshTokenInfo, user_id: uuid.UUID, email: str) -> Optional[IssuedRefreshToken]:
        """Revoke ``info`` and issue its successor; None when another caller revoked it first."""
        ...

    async def revoke(self, info: RefreshTokenInfo) -> bool:
        """Idempotent revoke; False when the token was already revoked."""
        ...

    async def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        ...

    async def list_active_for_user(self, user_id: uuid.UUID) -> List["RefreshToken"]:
        ...


class IIdentityService(Protocol):
    """Credential store: users, password hashes, roles, external logins and bans."""

    async def create_user(self, email: str, password: str) -> "User":
        ...

    async def validate_credentials(self, email: str, password: str) -> "User":
        ...

    async def find_by_email(self, email: str) -> Optional["User"]:
        ...

    async def find_by_id(self, user_id: uuid.UUID) -> Optional["User"]:
        ...

    async def is_banned(self, user_id: uuid.UUID) -> bool:
        ...

    async def get_roles(self, user_id: uuid.UUID) -> List[str]:
        ...

    async def assign_role(self, user_id: uuid.UUID, role: str) -> bool:
        ...

    async def find_or_create_external_user(
        self,
        email: str,
        provider: str,
        provider_key: str,
        display_name: Optional[str] = None,
    ) -> Tuple["User", bool]:
        ...

    async def has_password(self, user_id: uuid.UUID) -> bool:
        ...

    async def set_password(self, user_id: uuid.UUID, password: str) -> None:
        ...

    async def ban_user(self, user_id: uuid.UUID, until: datetime) -> "User":
        ...

    async def unban_user(self, user_id: uuid.UUID) -> "User":
        ...


class IExternalTokenValidator(Protocol):
    async def validate(self, id_token: str) -> ExternalIdentity:
        """Verify an external ID token; raises AuthenticationError when rejected."""
        ...
