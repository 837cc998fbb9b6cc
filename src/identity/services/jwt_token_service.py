"""Stateless signing and verification of access and refresh JWTs."""

from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, Optional

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from ..config import JwtSettings
from ..schemas.tokens import AccessTokenClaims, IssuedAccessToken, IssuedRefreshToken, RefreshTokenInfo
from ..utils.time import from_timestamp, now_utc

logger = logging.getLogger(__name__)

TOKEN_TYPE_CLAIM = "token_type"
REFRESH_TOKEN_TYPE = "refresh"
ROLE_CLAIM = "role"
OPAQUE_TOKEN_BYTES = 64


def _new_token_id() -> str:
    return str(uuid.uuid4())


class JwtTokenService:
    """Issues HS256 tokens with issuer, audience, jti and expiry claims.

    ``clock`` and ``id_factory`` exist so tests can pin issuance time and
    token ids; production uses wall-clock UTC and uuid4.
    """

    def __init__(
        self,
        settings: JwtSettings,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = _new_token_id,
    ):
        self.settings = settings
        self._clock = clock
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    def issue_access_token(self, user_id: uuid.UUID, email: str, roles: Iterable[str]) -> IssuedAccessToken:
        ttl = timedelta(minutes=self.settings.access_token_expiration_minutes)
        claims = {ROLE_CLAIM: [role for role in roles]}
        token, jti, expires_at = self._encode(user_id, email, ttl, claims)
        return IssuedAccessToken(token=token, jti=jti, expires_at=expires_at)

    def decode_access_token(self, token: str, verify_exp: bool = True) -> Optional[AccessTokenClaims]:
        """Verify an access token; None on any fault.

        ``verify_exp=False`` is only used to read the subject of an expired
        access token presented alongside a refresh token.
        """
        payload = self._decode(token, required=["sub", "jti", "exp", "iat"], verify_exp=verify_exp)
        if payload is None or TOKEN_TYPE_CLAIM in payload:
            return None

        user_id = self._parse_subject(payload)
        if user_id is None:
            return None

        raw_roles = payload.get(ROLE_CLAIM) or []
        if isinstance(raw_roles, str):
            raw_roles = [raw_roles]

        return AccessTokenClaims(
            user_id=user_id,
            email=str(payload.get("email") or ""),
            roles=[str(role) for role in raw_roles],
            jti=str(payload["jti"]),
            issued_at=from_timestamp(payload["iat"]),
            expires_at=from_timestamp(payload["exp"]),
        )

    # ------------------------------------------------------------------
    # Self-describing refresh tokens (stateless strategy)
    # ------------------------------------------------------------------

    def issue_refresh_jwt(self, user_id: uuid.UUID, email: str) -> IssuedRefreshToken:
        ttl = timedelta(days=self.settings.refresh_token_expiration_days)
        token, jti, expires_at = self._encode(user_id, email, ttl, {TOKEN_TYPE_CLAIM: REFRESH_TOKEN_TYPE})
        return IssuedRefreshToken(token=token, token_id=jti, expires_at=expires_at)

    def validate_refresh_jwt(self, token: str) -> Optional[RefreshTokenInfo]:
        payload = self._decode(token, required=["sub", "jti", "exp", TOKEN_TYPE_CLAIM])
        if payload is None or payload.get(TOKEN_TYPE_CLAIM) != REFRESH_TOKEN_TYPE:
            return None

        user_id = self._parse_subject(payload)
        jti = payload.get("jti")
        if user_id is None or not isinstance(jti, str) or not jti.strip():
            return None

        return RefreshTokenInfo(user_id=user_id, token_id=jti, expires_at=from_timestamp(payload["exp"]))

    # ------------------------------------------------------------------
    # Opaque refresh tokens (ledger strategy)
    # ------------------------------------------------------------------

    @staticmethod
    def generate_opaque_token() -> str:
        return secrets.token_urlsafe(OPAQUE_TOKEN_BYTES)

    @staticmethod
    def hash_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    # ------------------------------------------------------------------

    def _encode(
        self,
        user_id: uuid.UUID,
        email: str,
        ttl: timedelta,
        extra_claims: Dict[str, Any],
    ) -> tuple[str, str, datetime]:
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(ttl.total_seconds())
        jti = self._id_factory()
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "jti": jti,
            "iat": issued_at,
            "exp": expires_at,
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
        }
        payload.update(extra_claims)
        token = jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)
        return token, jti, from_timestamp(expires_at)

    def _decode(self, token: str, required: list[str], verify_exp: bool = True) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                leeway=0,
                options={"require": required, "verify_exp": verify_exp},
            )
        except ExpiredSignatureError:
            logger.debug("Token rejected: expired")
            return None
        except InvalidTokenError as exc:
            logger.debug("Token rejected | reason=%s", exc.__class__.__name__)
            return None

    @staticmethod
    def _parse_subject(payload: Dict[str, Any]) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(str(payload.get("sub")))
        except ValueError:
            return None
