"""Bearer authentication and minimum-role guards for the auth router."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity.authorization.evaluator import MinimumRole, authorize
from identity.authorization.role_hierarchy import RoleLevel
from identity.constants import auth_messages
from identity.dependencies import get_token_service
from identity.exceptions import AuthErrorKind, AuthenticationError, AuthorizationError
from identity.interfaces.services import ITokenService
from identity.schemas.tokens import AccessTokenClaims

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


# NOTE: using explicit security dependency so Swagger UI sends Authorization header
async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    token_service: ITokenService = Depends(get_token_service),
) -> AccessTokenClaims:
    if not credentials or credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        raise AuthenticationError(AuthErrorKind.INVALID_CREDENTIALS, auth_messages.MISSING_BEARER_TOKEN)

    claims = token_service.decode_access_token(credentials.credentials.strip())
    if claims is None:
        raise AuthenticationError(AuthErrorKind.INVALID_CREDENTIALS, auth_messages.INVALID_ACCESS_TOKEN)
    return claims


def require_minimum_role(level: RoleLevel) -> Callable:
    """Dependency factory: authenticated caller holding at least `level`."""
    requirement = MinimumRole(level)

    async def dependency(claims: AccessTokenClaims = Depends(get_current_claims)) -> AccessTokenClaims:
        if not authorize(claims.roles, requirement):
            logger.info(
                "Authorization denied | user_id=%s | required=%s | roles=%s",
                claims.user_id,
                level.name,
                claims.roles,
            )
            raise AuthorizationError()
        return claims

    return dependency


require_member = require_minimum_role(RoleLevel.MEMBER)
require_admin = require_minimum_role(RoleLevel.ADMIN)
require_super_admin = require_minimum_role(RoleLevel.SUPER_ADMIN)
