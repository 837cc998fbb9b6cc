"""Credential store: users, argon2 password hashes, roles, external logins and bans."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from sqlalchemy.ext.asyncio import AsyncSession

from ..authorization.role_hierarchy import canonical_role_name
from ..constants import auth_messages
from ..constants.roles import DEFAULT_ROLE
from ..exceptions import AuthErrorKind, AuthenticationError, NotFoundError, ValidationException
from ..interfaces.repositories import IExternalLoginRepository, IUserRepository
from ..models.user import User
from ..repositories.user import normalize_email
from ..utils.time import now_db_utc, to_db_utc

logger = logging.getLogger(__name__)


def build_password_hasher() -> PasswordHasher:
    """Argon2id with 64 MiB memory, 3 iterations, parallelism 4."""
    return PasswordHasher(
        time_cost=3,
        memory_cost=65536,
        parallelism=4,
        hash_len=32,
        salt_len=16,
    )


class IdentityService:
    """ORM-backed credential store.

    Repositories flush; committing is left to the calling use case.
    """

    def __init__(
        self,
        *,
        session: AsyncSession,
        user_repository_factory: Callable[..., IUserRepository],
        external_login_repository_factory: Callable[..., IExternalLoginRepository],
        password_hasher: PasswordHasher,
    ):
        self.session = session
        self.user_repo: IUserRepository = user_repository_factory(session=session)
        self.external_login_repo: IExternalLoginRepository = external_login_repository_factory(session=session)
        self.password_hasher = password_hasher
        self._dummy_hash: Optional[str] = None

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    async def hash_password(self, password: str) -> str:
        return await asyncio.to_thread(self.password_hasher.hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(self.password_hasher.verify, password_hash, password)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError):
            logger.warning("Stored password hash could not be verified")
            return False

    async def _burn_verification(self, password: str) -> None:
        """Spend the same work as a real verify so misses are not faster than hits."""
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_password(uuid.uuid4().hex)
        await self.verify_password(password, self._dummy_hash)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, email: str, password: str) -> User:
        normalized = normalize_email(email)
        if await self.user_repo.email_exists(normalized):
            logger.info("Registration rejected: email already in use")
            raise AuthenticationError(AuthErrorKind.IDENTITY_CONFLICT)

        user = User(
            id=uuid.uuid4(),
            email=normalized,
            password_hash=await self.hash_password(password),
            email_confirmed=False,
        )
        await self.user_repo.create(user)
        await self.user_repo.add_role(user.id, DEFAULT_ROLE)
        logger.info("User created | user_id=%s", user.id)
        return user

    async def validate_credentials(self, email: str, password: str) -> User:
        """Return the user for a correct email/password pair.

        Unknown email, wrong password and accounts without a password all
        raise the same INVALID_CREDENTIALS error.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.has_password:
            await self._burn_verification(password)
            raise AuthenticationError(AuthErrorKind.INVALID_CREDENTIALS)

        if not await self.verify_password(password, user.password_hash):
            raise AuthenticationError(AuthErrorKind.INVALID_CREDENTIALS)

        if self.password_hasher.check_needs_rehash(user.password_hash):
            user.password_hash = await self.hash_password(password)
            await self.user_repo.update(user)
            logger.info("Password hash upgraded | user_id=%s", user.id)

        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self.user_repo.get_by_email(email)

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)

    async def _require_user(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(auth_messages.USER_NOT_FOUND)
        return user

    # ------------------------------------------------------------------
    # Bans
    # ------------------------------------------------------------------

    async def is_banned(self, user_id: uuid.UUID) -> bool:
        user = await self.user_repo.get_by_id(user_id)
        return user is not None and user.is_banned_at(now_db_utc())

    async def ban_user(self, user_id: uuid.UUID, until: datetime) -> User:
        user = await self._require_user(user_id)
        user.banned_until = to_db_utc(until)
        await self.user_repo.update(user)
        logger.info("User banned | user_id=%s | until=%s", user_id, user.banned_until.isoformat())
        return user

    async def unban_user(self, user_id: uuid.UUID) -> User:
        user = await self._require_user(user_id)
        user.banned_until = None
        await self.user_repo.update(user)
        logger.info("User unbanned | user_id=%s", user_id)
        return user

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def get_roles(self, user_id: uuid.UUID) -> List[str]:
        return await self.user_repo.get_roles(user_id)

    async def assign_role(self, user_id: uuid.UUID, role: str) -> bool:
        canonical = canonical_role_name(role)
        if canonical is None:
            raise ValidationException.for_field("role", f"'{role}' is not a known role.")
        await self._require_user(user_id)
        added = await self.user_repo.add_role(user_id, canonical)
        if added:
            logger.info("Role assigned | user_id=%s | role=%s", user_id, canonical)
        return added

    # ------------------------------------------------------------------
    # External logins
    # ------------------------------------------------------------------

    async def find_or_create_external_user(
        self,
        email: str,
        provider: str,
        provider_key: str,
        display_name: Optional[str] = None,
    ) -> Tuple[User, bool]:
        user = await self.user_repo.get_by_email(email)
        is_new = user is None

        if user is None:
            user = User(
                id=uuid.uuid4(),
                email=normalize_email(email),
                password_hash=None,
                email_confirmed=True,
                display_name=display_name,
            )
            await self.user_repo.create(user)
            logger.info("User created from external login | user_id=%s | provider=%s", user.id, provider)
        elif not user.email_confirmed:
            user.email_confirmed = True
            await self.user_repo.update(user)

        existing_link = await self.external_login_repo.get_for_user(user.id, provider)
        if existing_link is None:
            link = await self.external_login_repo.link(user.id, provider, provider_key, display_name)
            if link is None:
                logger.warning(
                    "External login rejected: provider key belongs to another user | user_id=%s | provider=%s",
                    user.id,
                    provider,
                )
                raise AuthenticationError(
                    AuthErrorKind.IDENTITY_CONFLICT, auth_messages.EXTERNAL_LOGIN_OWNED_BY_OTHER_USER
                )
            logger.info("External login linked | user_id=%s | provider=%s", user.id, provider)

        return user, is_new

    # ------------------------------------------------------------------
    # Password management
    # ------------------------------------------------------------------

    async def has_password(self, user_id: uuid.UUID) -> bool:
        user = await self._require_user(user_id)
        return user.has_password

    async def set_password(self, user_id: uuid.UUID, password: str) -> None:
        user = await self._require_user(user_id)
        if user.has_password:
            raise ValidationException.for_field("password", auth_messages.USER_ALREADY_HAS_PASSWORD)
        user.password_hash = await self.hash_password(password)
        await self.user_repo.update(user)
        logger.info("Password set | user_id=%s", user_id)
