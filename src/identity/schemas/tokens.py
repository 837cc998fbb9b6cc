"""Value objects exchanged between the token services and use cases."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class IssuedAccessToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    jti: str
    expires_at: datetime


class IssuedRefreshToken(BaseModel):
    """A refresh credential as handed to the caller (the raw token is never stored)."""

    model_config = ConfigDict(frozen=True)

    token: str
    token_id: str = Field(..., description="Ledger key: digest for opaque tokens, jti for JWTs")
    expires_at: datetime


class RefreshTokenInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    token_id: str
    expires_at: datetime
    revoked: bool = False


class AccessTokenClaims(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    email: str
    roles: list[str] = Field(default_factory=list)
    jti: str
    issued_at: datetime
    expires_at: datetime


class ExternalIdentity(BaseModel):
    """Identity asserted by an external provider after token verification."""

    model_config = ConfigDict(frozen=True)

    email: str
    provider_user_id: str
    display_name: str | None = None
