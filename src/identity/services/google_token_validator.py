"""Verification of Google ID tokens against Google's published signing keys."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import jwt
from jwt import PyJWKClient, PyJWKClientError, InvalidTokenError

from ..config import GoogleAuthSettings
from ..exceptions import AuthErrorKind, AuthenticationError
from ..schemas.tokens import ExternalIdentity

logger = logging.getLogger(__name__)

GOOGLE_ALGORITHMS = ["RS256"]


class GoogleTokenValidator:
    """Checks signature, audience (our client id), issuer, expiry and email_verified."""

    def __init__(self, settings: GoogleAuthSettings, jwk_client: Optional[PyJWKClient] = None):
        self.settings = settings
        self._jwk_client = jwk_client or PyJWKClient(settings.certs_url, cache_keys=True)

    async def validate(self, id_token: str) -> ExternalIdentity:
        if not self.settings.client_id:
            logger.error("Google login attempted but GOOGLE_CLIENT_ID is not configured")
            raise AuthenticationError(AuthErrorKind.INVALID_EXTERNAL_TOKEN)

        payload = await asyncio.to_thread(self._decode, id_token)

        if not _is_true(payload.get("email_verified")):
            raise AuthenticationError(AuthErrorKind.UNVERIFIED_EMAIL)

        email = payload.get("email")
        subject = payload.get("sub")
        if not email or not subject:
            raise AuthenticationError(AuthErrorKind.INVALID_EXTERNAL_TOKEN)

        return ExternalIdentity(
            email=str(email),
            provider_user_id=str(subject),
            display_name=payload.get("name"),
        )

    def _decode(self, id_token: str) -> Dict[str, Any]:
        try:
            signing_key = self._jwk_client.get_signing_key_from_jwt(id_token)
            return jwt.decode(
                id_token,
                signing_key.key,
                algorithms=GOOGLE_ALGORITHMS,
                audience=self.settings.client_id,
                issuer=self.settings.issuers,
                options={"require": ["exp", "iat", "sub", "aud", "iss"]},
            )
        except (InvalidTokenError, PyJWKClientError) as exc:
            logger.info("Google ID token rejected | reason=%s", exc.__class__.__name__)
            raise AuthenticationError(AuthErrorKind.INVALID_EXTERNAL_TOKEN) from exc


def _is_true(value: Any) -> bool:
    # Google has sent email_verified both as a bool and as "true"
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"
