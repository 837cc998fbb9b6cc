"""Pydantic schemas for commands, results and token value objects."""

from .auth import (
    RegisterCommand,
    LoginCommand,
    GoogleLoginCommand,
    RefreshTokenCommand,
    LogoutCommand,
    SetPasswordCommand,
    BanUserCommand,
    AssignRoleCommand,
    RegisterResult,
    AuthTokenResult,
    GoogleLoginResult,
    SessionInfo,
    CurrentUser,
    password_rule_violations,
)
from .tokens import (
    IssuedAccessToken,
    IssuedRefreshToken,
    RefreshTokenInfo,
    AccessTokenClaims,
    ExternalIdentity,
)

__all__ = [
    # Commands
    "RegisterCommand",
    "LoginCommand",
    "GoogleLoginCommand",
    "RefreshTokenCommand",
    "LogoutCommand",
    "SetPasswordCommand",
    "BanUserCommand",
    "AssignRoleCommand",
    # Results
    "RegisterResult",
    "AuthTokenResult",
    "GoogleLoginResult",
    "SessionInfo",
    "CurrentUser",
    "password_rule_violations",
    # Tokens
    "IssuedAccessToken",
    "IssuedRefreshToken",
    "RefreshTokenInfo",
    "AccessTokenClaims",
    "ExternalIdentity",
]
