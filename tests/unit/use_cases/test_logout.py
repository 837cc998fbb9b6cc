"""Unit tests for LogoutUseCase."""

import pytest

from identity.exceptions import AuthErrorKind, AuthenticationError
from identity.use_cases.logout import LogoutUseCase


@pytest.fixture(params=["opaque", "stateless"])
def refresh_store(request, opaque_store, stateless_store):
    return opaque_store if request.param == "opaque" else stateless_store


@pytest.fixture
def logout_use_case(db_session, refresh_store):
    return LogoutUseCase(session=db_session, refresh_token_store_factory=lambda session: refresh_store)


@pytest.mark.unit
@pytest.mark.use_case
class TestLogoutUseCase:
    """Test LogoutUseCase methods."""

    async def test_execute_revokes_token(self, logout_use_case, refresh_store, user_factory):
        # Arrange
        user = await user_factory()
        issued = await refresh_store.issue(user.id, user.email)

        # Act
        await logout_use_case.execute(issued.token)

        # Assert
        info = await refresh_store.resolve(issued.token)
        assert info.revoked is True

    async def test_execute_is_idempotent(self, logout_use_case, refresh_store, user_factory):
        user = await user_factory()
        issued = await refresh_store.issue(user.id, user.email)

        await logout_use_case.execute(issued.token)
        await logout_use_case.execute(issued.token)

        assert (await refresh_store.resolve(issued.token)).revoked is True

    async def test_execute_invalid_token(self, logout_use_case):
        with pytest.raises(AuthenticationError) as exc_info:
            await logout_use_case.execute("definitely-not-a-refresh-token")
        assert exc_info.value.kind is AuthErrorKind.INVALID_REFRESH_TOKEN
