"""Use cases: one class per identity/session operation."""

from .register import RegisterUseCase
from .login import LoginUseCase
from .google_login import GoogleLoginUseCase
from .refresh_token import RefreshTokenUseCase
from .logout import LogoutUseCase
from .set_password import SetPasswordUseCase
from .list_sessions import ListSessionsUseCase, GetCurrentUserUseCase
from .manage_users import BanUserUseCase, UnbanUserUseCase, AssignRoleUseCase
from .cleanup_tokens import CleanupTokensUseCase

__all__ = [
    "RegisterUseCase",
    "LoginUseCase",
    "GoogleLoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "SetPasswordUseCase",
    "ListSessionsUseCase",
    "GetCurrentUserUseCase",
    "BanUserUseCase",
    "UnbanUserUseCase",
    "AssignRoleUseCase",
    "CleanupTokensUseCase",
]
