"""
Service and repository protocols for dependency injection.
"""

from .services import (
    ITokenService,
    IRefreshTokenStore,
    IIdentityService,
    IExternalTokenValidator,
)
from .repositories import (
    IUserRepository,
    IExternalLoginRepository,
    IRefreshTokenRepository,
    IRevokedTokenRepository,
)

__all__ = [
    "ITokenService",
    "IRefreshTokenStore",
    "IIdentityService",
    "IExternalTokenValidator",
    "IUserRepository",
    "IExternalLoginRepository",
    "IRefreshTokenRepository",
    "IRevokedTokenRepository",
]
