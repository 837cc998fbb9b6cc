import uuid
from typing import Any, Dict, Iterable, List

import pytest
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker

from identity.container import get_container, reset_container
from identity.exceptions import AuthErrorKind, AuthenticationError
from identity.models import User, UserRole, db_helper
from identity.schemas import ExternalIdentity
from identity.utils.time import now_db_utc
from main import app

API_PREFIX = "/api/v1/auth"

class StubGoogleTokenValidator:
    """Accepts tokens registered by the test, rejects everything else."""

    def __init__(self) -> None:
        self.identities: Dict[str, ExternalIdentity] = {}
        self.calls: List[str] = []

    def register(self, id_token: str, email: str, provider_user_id: str, display_name: str | None = None) -> None:
        self.identities[id_token] = ExternalIdentity(
            email=email,
            provider_user_id=provider_user_id,
            display_name=display_name,
        )

    async def validate(self, id_token: str) -> ExternalIdentity:
        self.calls.append(id_token)
        identity = self.identities.get(id_token)
        if identity is None:
            raise AuthenticationError(AuthErrorKind.INVALID_EXTERNAL_TOKEN)
        return identity

@pytest.fixture
async def integration_environment(test_engine, password_hasher):
    """Point the app at the test database and swap slow or external collaborators."""
    original_engine = db_helper.engine
    original_session_factory = db_helper.session_factory
    db_helper.rebind(test_engine)
    session_factory = db_helper.session_factory

    reset_container()
    container = get_container()

    google_validator = StubGoogleTokenValidator()
    container.password_hasher.override(providers.Object(password_hasher))
    container.google_token_validator.override(providers.Object(google_validator))

    async def create_user(email: str, password: str = "StrongPass1", roles: Iterable[str] = ("Member",)) -> User:
        async with session_factory() as session:
            user = User(
                id=uuid.uuid4(),
                email=email.lower(),
                password_hash=password_hasher.hash(password),
                created_at=now_db_utc(),
                roles=[UserRole(role=role) for role in roles],
            )
            session.add(user)
            await session.commit()
            return user

    async def login(client: AsyncClient, email: str, password: str = "StrongPass1") -> Dict[str, Any]:
        response = await client.post(f"{API_PREFIX}/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield {
                "client": client,
                "session_factory": session_factory,
                "google_validator": google_validator,
                "create_user": create_user,
                "login": login,
                "auth_headers": auth_headers,
            }
    finally:
        container.password_hasher.reset_override()
        container.google_token_validator.reset_override()
        app.dependency_overrides.clear()

        reset_container()
        db_helper.engine = original_engine
        db_helper.session_factory = original_session_factory


def auth_headers(tokens: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {tokens['access_token']}"}
