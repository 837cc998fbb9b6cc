"""
Pytest configuration and shared fixtures for all tests.

This file provides:
- Database fixtures (in-memory SQLite for fast tests)
- Cheap password hashing and JWT settings
- Test data factories
"""

import os
import sys
import uuid
from datetime import datetime
from typing import AsyncGenerator, Iterable, Optional

import pytest

# Prepopulate required env vars for settings before imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("JWT_ISSUER", "identity-tests")
os.environ.setdefault("JWT_AUDIENCE", "identity-tests-clients")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("LOGS_LEVEL", "WARNING")

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from argon2 import PasswordHasher
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from identity.config import JwtSettings
from identity.constants.roles import DEFAULT_ROLE
from identity.models import Base, User, UserRole
from identity.repositories import (
    ExternalLoginRepository,
    RefreshTokenRepository,
    RevokedTokenRepository,
    UserRepository,
)
from identity.services.identity_service import IdentityService
from identity.services.jwt_token_service import JwtTokenService
from identity.services.refresh_token_store import JwtRefreshTokenStore, OpaqueRefreshTokenStore
from identity.utils.time import now_db_utc

fake = Faker()

DEFAULT_PASSWORD = "StrongPass1"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# ============================================================================
# SECURITY FIXTURES
# ============================================================================


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Argon2 with minimal cost so tests stay fast."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1, hash_len=16, salt_len=8)


@pytest.fixture
def jwt_settings() -> JwtSettings:
    return JwtSettings(
        secret="unit-test-secret-key-with-at-least-32-chars",
        issuer="identity-tests",
        audience="identity-tests-clients",
        access_token_expiration_minutes=30,
        refresh_token_expiration_days=30,
    )


@pytest.fixture
def token_service(jwt_settings) -> JwtTokenService:
    return JwtTokenService(jwt_settings)


@pytest.fixture
def identity_service(db_session, password_hasher) -> IdentityService:
    return IdentityService(
        session=db_session,
        user_repository_factory=UserRepository,
        external_login_repository_factory=ExternalLoginRepository,
        password_hasher=password_hasher,
    )


@pytest.fixture
def opaque_store(db_session, token_service, jwt_settings) -> OpaqueRefreshTokenStore:
    return OpaqueRefreshTokenStore(
        session=db_session,
        repository_factory=RefreshTokenRepository,
        token_service=token_service,
        settings=jwt_settings,
    )


@pytest.fixture
def stateless_store(db_session, token_service) -> JwtRefreshTokenStore:
    return JwtRefreshTokenStore(
        session=db_session,
        repository_factory=RevokedTokenRepository,
        token_service=token_service,
    )


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def user_factory(db_session, password_hasher):
    """Factory for creating committed test users."""

    async def _create_user(
        email: Optional[str] = None,
        password: Optional[str] = DEFAULT_PASSWORD,
        roles: Iterable[str] = (DEFAULT_ROLE,),
        banned_until: Optional[datetime] = None,
        email_confirmed: bool = False,
        **kwargs,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            email=(email or fake.unique.email()).lower(),
            password_hash=password_hasher.hash(password) if password else None,
            email_confirmed=email_confirmed,
            banned_until=banned_until,
            created_at=now_db_utc(),
            roles=[UserRole(role=role) for role in roles],
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create_user
