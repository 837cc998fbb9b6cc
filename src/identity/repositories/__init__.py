"""Repository implementations for identity and session data."""

from .base import BaseRepository
from .user import UserRepository
from .external_login import ExternalLoginRepository
from .refresh_token import RefreshTokenRepository
from .revoked_token import RevokedTokenRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ExternalLoginRepository",
    "RefreshTokenRepository",
    "RevokedTokenRepository",
]
