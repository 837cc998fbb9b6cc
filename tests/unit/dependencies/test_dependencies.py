"""
Unit tests for FastAPI dependency functions and container wiring.

Tests cover:
- Use case dependency providers
- Generic dependency factory function
- Refresh token strategy selection in the container
"""

import pytest
from unittest.mock import MagicMock

from identity.config import RefreshTokenSettings
from identity.container import Container
from identity.dependencies import (
    create_use_case_dependency,
    get_register_use_case,
    get_login_use_case,
    get_google_login_use_case,
    get_refresh_token_use_case,
    get_logout_use_case,
    get_set_password_use_case,
    get_list_sessions_use_case,
    get_current_user_use_case,
    get_ban_user_use_case,
    get_unban_user_use_case,
    get_assign_role_use_case,
    get_token_service,
)
from identity.services.jwt_token_service import JwtTokenService
from identity.services.refresh_token_store import JwtRefreshTokenStore, OpaqueRefreshTokenStore
from identity.use_cases.cleanup_tokens import CleanupTokensUseCase
from identity.use_cases.login import LoginUseCase


@pytest.fixture
def mock_session():
    return MagicMock()


@pytest.mark.unit
class TestUseCaseDependencies:
    """Test use case dependency provider functions."""

    @pytest.mark.parametrize(
        "dependency,provider_name",
        [
            (get_register_use_case, "register_use_case"),
            (get_login_use_case, "login_use_case"),
            (get_google_login_use_case, "google_login_use_case"),
            (get_refresh_token_use_case, "refresh_token_use_case"),
            (get_logout_use_case, "logout_use_case"),
            (get_set_password_use_case, "set_password_use_case"),
            (get_list_sessions_use_case, "list_sessions_use_case"),
            (get_current_user_use_case, "get_current_user_use_case"),
            (get_ban_user_use_case, "ban_user_use_case"),
            (get_unban_user_use_case, "unban_user_use_case"),
            (get_assign_role_use_case, "assign_role_use_case"),
        ],
    )
    def test_dependency_resolves_use_case_from_container(self, mock_session, dependency, provider_name):
        # Arrange
        container = MagicMock()
        expected = MagicMock(name=provider_name)
        getattr(container, provider_name).return_value = expected

        # Act
        use_case = dependency(session=mock_session, container=container)

        # Assert
        assert use_case is expected
        getattr(container, provider_name).assert_called_once_with(session=mock_session)

    def test_get_token_service(self):
        container = MagicMock()

        service = get_token_service(container=container)

        assert service is container.token_service.return_value


@pytest.mark.unit
class TestCreateUseCaseDependency:
    """Test the generic create_use_case_dependency factory function."""

    def test_passes_container_and_session(self, mock_session):
        # Arrange
        container = MagicMock()
        factory = MagicMock(return_value="use-case")

        # Act
        dependency = create_use_case_dependency(factory)
        result = dependency(session=mock_session, container=container)

        # Assert
        assert result == "use-case"
        factory.assert_called_once_with(container, mock_session)


@pytest.mark.unit
class TestContainerWiring:
    """Build real objects from the container with a stand-in session."""

    def test_refresh_store_defaults_to_opaque(self, mock_session):
        container = Container()
        with container.refresh_token_settings.override(RefreshTokenSettings(strategy="opaque")):
            store = container.refresh_token_store(session=mock_session)

        assert isinstance(store, OpaqueRefreshTokenStore)
        assert store.session is mock_session

    def test_refresh_store_stateless_strategy(self, mock_session):
        container = Container()
        with container.refresh_token_settings.override(RefreshTokenSettings(strategy="stateless")):
            store = container.refresh_token_store(session=mock_session)

        assert isinstance(store, JwtRefreshTokenStore)
        assert store.repo.session is mock_session

    def test_token_service_is_singleton(self):
        container = Container()

        assert isinstance(container.token_service(), JwtTokenService)
        assert container.token_service() is container.token_service()

    def test_login_use_case_gets_session_bound_collaborators(self, mock_session):
        container = Container()

        use_case = container.login_use_case(session=mock_session)

        assert isinstance(use_case, LoginUseCase)
        assert use_case.session is mock_session

    def test_cleanup_use_case_reads_retention(self, mock_session):
        container = Container()
        with container.refresh_token_settings.override(RefreshTokenSettings(strategy="opaque", retention_days=11)):
            use_case = container.cleanup_tokens_use_case(session=mock_session)

        assert isinstance(use_case, CleanupTokensUseCase)
        assert use_case.retention_days == 11
