__all__ = (
    "Base",
    "DatabaseHelper",
    "db_helper",
    "User",
    "UserRole",
    "ExternalLogin",
    "RefreshToken",
    "RevokedToken",
)

from .base import Base
from .db_helper import DatabaseHelper, db_helper
from .user import User
from .user_role import UserRole
from .external_login import ExternalLogin
from .refresh_token import RefreshToken
from .revoked_token import RevokedToken
