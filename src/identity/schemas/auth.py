"""Commands and results of the session operations.

Commands validate their own shape; the HTTP layer turns pydantic errors
into a field -> messages mapping before any use case runs.
"""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

EMAIL_MAX_LENGTH = 256
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
TOKEN_MAX_LENGTH = 2048

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def password_rule_violations(password: str) -> list[str]:
    """Return every password rule the value breaks, in a stable order."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
    if len(password) > PASSWORD_MAX_LENGTH:
        errors.append(f"Password must be at most {PASSWORD_MAX_LENGTH} characters.")
    if not any(ch.isupper() for ch in password):
        errors.append("Password must contain an uppercase letter.")
    if not any(ch.islower() for ch in password):
        errors.append("Password must contain a lowercase letter.")
    if not any(ch.isdigit() for ch in password):
        errors.append("Password must contain a digit.")
    return errors


def _rule_error(messages: list[str]) -> PydanticCustomError:
    return PydanticCustomError("rule_violation", "; ".join(messages), {"errors": messages})


def _validate_email(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise _rule_error(["Email is required."])
    if len(value) > EMAIL_MAX_LENGTH:
        raise _rule_error([f"Email must be at most {EMAIL_MAX_LENGTH} characters."])
    if not _EMAIL_PATTERN.match(value):
        raise _rule_error(["Email is not a valid email address."])
    local, _, domain = value.rpartition("@")
    return f"{local}@{domain.lower()}"


def _validate_strong_password(value: str) -> str:
    if not value:
        raise _rule_error(["Password is required."])
    violations = password_rule_violations(value)
    if violations:
        raise _rule_error(violations)
    return value


def _require(value: str | None, label: str, max_length: int = TOKEN_MAX_LENGTH) -> str:
    value = (value or "").strip()
    if not value:
        raise _rule_error([f"{label} is required."])
    if len(value) > max_length:
        raise _rule_error([f"{label} must be at most {max_length} characters."])
    return value


class CommandModel(BaseModel):
    model_config = ConfigDict(validate_default=True)


class RegisterCommand(CommandModel):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def email_valid(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator("password")
    @classmethod
    def password_strong(cls, value: str) -> str:
        return _validate_strong_password(value)


class LoginCommand(CommandModel):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def email_valid(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise _rule_error(["Password is required."])
        return value


class GoogleLoginCommand(CommandModel):
    id_token: str = ""

    @field_validator("id_token")
    @classmethod
    def id_token_required(cls, value: str) -> str:
        return _require(value, "Google ID token", max_length=4096)


class RefreshTokenCommand(CommandModel):
    refresh_token: str = ""
    access_token: str | None = None

    @field_validator("refresh_token")
    @classmethod
    def refresh_token_required(cls, value: str) -> str:
        return _require(value, "Refresh token")

    @field_validator("access_token")
    @classmethod
    def blank_access_token_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class LogoutCommand(CommandModel):
    refresh_token: str = ""

    @field_validator("refresh_token")
    @classmethod
    def refresh_token_required(cls, value: str) -> str:
        return _require(value, "Refresh token")


class SetPasswordCommand(CommandModel):
    password: str = ""

    @field_validator("password")
    @classmethod
    def password_strong(cls, value: str) -> str:
        return _validate_strong_password(value)


class BanUserCommand(CommandModel):
    until: datetime
    revoke_sessions: bool = True


class AssignRoleCommand(CommandModel):
    role: str = ""

    @field_validator("role")
    @classmethod
    def role_required(cls, value: str) -> str:
        return _require(value, "Role", max_length=32)


class RegisterResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str


class AuthTokenResult(BaseModel):
    access_token: str
    refresh_token: str
    access_token_expires_at: datetime
    token_type: str = "Bearer"


class GoogleLoginResult(AuthTokenResult):
    is_new_account: bool = False


class SessionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    expires_at: datetime


class CurrentUser(BaseModel):
    id: uuid.UUID
    email: str
    roles: list[str] = Field(default_factory=list)
