"""Error taxonomy shared by use cases and the HTTP layer."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Mapping, Sequence

from .constants import auth_messages


class AuthErrorKind(str, Enum):
    IDENTITY_CONFLICT = "identity_conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_EXTERNAL_TOKEN = "invalid_external_token"
    UNVERIFIED_EMAIL = "unverified_email"
    ACCOUNT_BANNED = "account_banned"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    REFRESH_TOKEN_REVOKED = "refresh_token_revoked"
    ACCOUNT_SUSPENDED = "account_suspended"


DEFAULT_AUTH_MESSAGES: Dict[AuthErrorKind, str] = {
    AuthErrorKind.IDENTITY_CONFLICT: auth_messages.IDENTITY_CONFLICT,
    AuthErrorKind.INVALID_CREDENTIALS: auth_messages.INVALID_CREDENTIALS,
    AuthErrorKind.INVALID_EXTERNAL_TOKEN: auth_messages.INVALID_GOOGLE_TOKEN,
    AuthErrorKind.UNVERIFIED_EMAIL: auth_messages.GOOGLE_EMAIL_NOT_VERIFIED,
    AuthErrorKind.ACCOUNT_BANNED: auth_messages.USER_ACCOUNT_BANNED,
    AuthErrorKind.INVALID_REFRESH_TOKEN: auth_messages.INVALID_REFRESH_TOKEN,
    AuthErrorKind.REFRESH_TOKEN_REVOKED: auth_messages.REFRESH_TOKEN_REVOKED,
    AuthErrorKind.ACCOUNT_SUSPENDED: auth_messages.USER_ACCOUNT_BANNED,
}


class IdentityError(Exception):
    """Base class for every expected failure raised by the identity core."""

    status_code: int = 500
    title: str = "Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationException(IdentityError):
    """Malformed input, reported as a field -> messages mapping."""

    status_code = 400
    title = "Validation Error"

    def __init__(self, errors: Mapping[str, Sequence[str]]) -> None:
        self.errors: Dict[str, List[str]] = {field: list(messages) for field, messages in errors.items()}
        super().__init__("One or more validation failures have occurred.")

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationException":
        return cls({field: [message]})


class AuthenticationError(IdentityError):
    """Domain-level rejection of an identity or session operation."""

    status_code = 401
    title = "Authentication Failed"

    def __init__(self, kind: AuthErrorKind, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message or DEFAULT_AUTH_MESSAGES[kind])


class AuthorizationError(IdentityError):
    status_code = 403
    title = "Forbidden"

    def __init__(self, message: str = auth_messages.INSUFFICIENT_ROLE) -> None:
        super().__init__(message)


class NotFoundError(IdentityError):
    status_code = 404
    title = "Not Found"
