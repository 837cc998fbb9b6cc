"""Refresh-token strategies behind a single store interface.

``OpaqueRefreshTokenStore`` keeps a hashed ledger row per token and rotates
with a conditional UPDATE. ``JwtRefreshTokenStore`` hands out self-describing
JWTs and models revocation as denylist entries keyed by jti.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import JwtSettings
from ..interfaces.repositories import IRefreshTokenRepository, IRevokedTokenRepository
from ..models.refresh_token import RefreshToken
from ..schemas.tokens import IssuedRefreshToken, RefreshTokenInfo
from ..utils.time import now_utc, to_db_utc, to_utc
from .jwt_token_service import JwtTokenService

logger = logging.getLogger(__name__)

# token_urlsafe output; anything else cannot be one of ours
_OPAQUE_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{43,256}$")


def _short(token_id: str) -> str:
    return token_id[:12]


class OpaqueRefreshTokenStore:
    """Opaque random tokens, stored only as SHA-256 digests."""

    strategy = "opaque"

    def __init__(
        self,
        *,
        session: AsyncSession,
        repository_factory: Callable[..., IRefreshTokenRepository],
        token_service: JwtTokenService,
        settings: JwtSettings,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.session = session
        self.repo = repository_factory(session=session)
        self.token_service = token_service
        self.settings = settings
        self._clock = clock

    async def issue(self, user_id: uuid.UUID, email: str) -> IssuedRefreshToken:
        raw_token, record = self._new_record(user_id)
        await self.repo.create(record)
        logger.debug("Refresh token issued | user_id=%s | token=%s", user_id, _short(record.token_hash))
        return IssuedRefreshToken(token=raw_token, token_id=record.token_hash, expires_at=to_utc(record.expires_at))

    async def resolve(self, token: str) -> Optional[RefreshTokenInfo]:
        if not token or not _OPAQUE_TOKEN_PATTERN.match(token):
            return None

        token_hash = self.token_service.hash_token(token)
        record = await self.repo.get_by_hash(token_hash)
        if record is None:
            return None
        if record.is_expired_at(to_db_utc(self._clock())):
            logger.info("Refresh token expired | user_id=%s | token=%s", record.user_id, _short(token_hash))
            return None

        return RefreshTokenInfo(
            user_id=record.user_id,
            token_id=token_hash,
            expires_at=to_utc(record.expires_at),
            revoked=record.is_revoked,
        )

    async def is_revoked(self, info: RefreshTokenInfo) -> bool:
        record = await self.repo.get_by_hash(info.token_id)
        return record is None or record.is_revoked

    async def rotate(self, info: RefreshTokenInfo, user_id: uuid.UUID, email: str) -> Optional[IssuedRefreshToken]:
        raw_token, successor = self._new_record(user_id)
        swapped = await self.repo.revoke_if_active(
            info.token_id,
            replaced_by_token_hash=successor.token_hash,
            now=to_db_utc(self._clock()),
        )
        if not swapped:
            logger.warning(
                "Refresh token rotation lost the swap | user_id=%s | token=%s",
                user_id,
                _short(info.token_id),
            )
            return None

        await self.repo.create(successor)
        logger.debug(
            "Refresh token rotated | user_id=%s | old=%s | new=%s",
            user_id,
            _short(info.token_id),
            _short(successor.token_hash),
        )
        return IssuedRefreshToken(
            token=raw_token,
            token_id=successor.token_hash,
            expires_at=to_utc(successor.expires_at),
        )

    async def revoke(self, info: RefreshTokenInfo) -> bool:
        return await self.repo.revoke_if_active(info.token_id, now=to_db_utc(self._clock()))

    async def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        return await self.repo.revoke_all_for_user(user_id, now=to_db_utc(self._clock()))

    async def list_active_for_user(self, user_id: uuid.UUID) -> List[RefreshToken]:
        return await self.repo.list_active_for_user(user_id, now=to_db_utc(self._clock()))

    def _new_record(self, user_id: uuid.UUID) -> tuple[str, RefreshToken]:
        raw_token = self.token_service.generate_opaque_token()
        now = to_db_utc(self._clock())
        record = RefreshToken(
            token_hash=self.token_service.hash_token(raw_token),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(days=self.settings.refresh_token_expiration_days),
        )
        return raw_token, record


class JwtRefreshTokenStore:
    """Self-describing refresh JWTs plus a jti denylist."""

    strategy = "stateless"

    def __init__(
        self,
        *,
        session: AsyncSession,
        repository_factory: Callable[..., IRevokedTokenRepository],
        token_service: JwtTokenService,
    ):
        self.session = session
        self.repo = repository_factory(session=session)
        self.token_service = token_service

    async def issue(self, user_id: uuid.UUID, email: str) -> IssuedRefreshToken:
        return self.token_service.issue_refresh_jwt(user_id, email)

    async def resolve(self, token: str) -> Optional[RefreshTokenInfo]:
        info = self.token_service.validate_refresh_jwt(token)
        if info is None:
            return None
        revoked = await self.repo.is_revoked(info.token_id)
        return info.model_copy(update={"revoked": revoked})

    async def is_revoked(self, info: RefreshTokenInfo) -> bool:
        return await self.repo.is_revoked(info.token_id)

    async def rotate(self, info: RefreshTokenInfo, user_id: uuid.UUID, email: str) -> Optional[IssuedRefreshToken]:
        if not await self.repo.try_revoke(info.token_id, info.user_id, to_db_utc(info.expires_at)):
            logger.warning("Refresh token rotation lost the swap | user_id=%s | jti=%s", user_id, info.token_id)
            return None
        return self.token_service.issue_refresh_jwt(user_id, email)

    async def revoke(self, info: RefreshTokenInfo) -> bool:
        return await self.repo.try_revoke(info.token_id, info.user_id, to_db_utc(info.expires_at))

    async def revoke_all_for_user(self, user_id: uuid.UUID) -> int:
        # Outstanding JWTs are not enumerable; ban checks on refresh cover this case.
        logger.info("Bulk revoke not supported for stateless refresh tokens | user_id=%s", user_id)
        return 0

    async def list_active_for_user(self, user_id: uuid.UUID) -> List[RefreshToken]:
        return []
