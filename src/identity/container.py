"""
Dependency Injection Container.

Wires configuration, services, repositories and use cases. Use cases that
touch the database are factories taking ``session=`` at call time.
"""

from dependency_injector import containers, providers

from .config import settings

# Services
from .services.jwt_token_service import JwtTokenService
from .services.identity_service import IdentityService, build_password_hasher
from .services.refresh_token_store import JwtRefreshTokenStore, OpaqueRefreshTokenStore
from .services.google_token_validator import GoogleTokenValidator

# Use cases
from .use_cases.register import RegisterUseCase
from .use_cases.login import LoginUseCase
from .use_cases.google_login import GoogleLoginUseCase
from .use_cases.refresh_token import RefreshTokenUseCase
from .use_cases.logout import LogoutUseCase
from .use_cases.set_password import SetPasswordUseCase
from .use_cases.list_sessions import ListSessionsUseCase, GetCurrentUserUseCase
from .use_cases.manage_users import BanUserUseCase, UnbanUserUseCase, AssignRoleUseCase
from .use_cases.cleanup_tokens import CleanupTokensUseCase

# Repositories
from .repositories.user import UserRepository
from .repositories.external_login import ExternalLoginRepository
from .repositories.refresh_token import RefreshTokenRepository
from .repositories.revoked_token import RevokedTokenRepository

class Container(containers.DeclarativeContainer):
    """
    Application DI container.

    Stateless services are singletons; anything bound to a session is a factory.
    """

    # Configuration
    jwt_settings = providers.Object(settings.jwt)
    google_settings = providers.Object(settings.google)
    refresh_token_settings = providers.Object(settings.refresh_tokens)

    # Repositories - Factory (need session at runtime)
    user_repository_factory = providers.Factory(UserRepository)
    external_login_repository_factory = providers.Factory(ExternalLoginRepository)
    refresh_token_repository_factory = providers.Factory(RefreshTokenRepository)
    revoked_token_repository_factory = providers.Factory(RevokedTokenRepository)

    # Services - Singleton (stateless)
    token_service = providers.Singleton(
        JwtTokenService,
        settings=jwt_settings,
    )

    password_hasher = providers.Singleton(build_password_hasher)

    google_token_validator = providers.Singleton(
        GoogleTokenValidator,
        settings=google_settings,
    )

    # Services - Factory (session-bound)
    identity_service = providers.Factory(
        IdentityService,
        user_repository_factory=user_repository_factory.provider,
        external_login_repository_factory=external_login_repository_factory.provider,
        password_hasher=password_hasher,
    )

    opaque_refresh_token_store = providers.Factory(
        OpaqueRefreshTokenStore,
        repository_factory=refresh_token_repository_factory.provider,
        token_service=token_service,
        settings=jwt_settings,
    )

    stateless_refresh_token_store = providers.Factory(
        JwtRefreshTokenStore,
        repository_factory=revoked_token_repository_factory.provider,
        token_service=token_service,
    )

    refresh_token_store = providers.Selector(
        providers.Callable(lambda config: config.strategy, refresh_token_settings),
        opaque=opaque_refresh_token_store,
        stateless=stateless_refresh_token_store,
    )

    # Use Cases - Factory (new instance per request)
    register_use_case = providers.Factory(
        RegisterUseCase,
        identity_service_factory=identity_service.provider,
    )

    login_use_case = providers.Factory(
        LoginUseCase,
        token_service=token_service,
        identity_service_factory=identity_service.provider,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    google_login_use_case = providers.Factory(
        GoogleLoginUseCase,
        token_service=token_service,
        google_token_validator=google_token_validator,
        identity_service_factory=identity_service.provider,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    refresh_token_use_case = providers.Factory(
        RefreshTokenUseCase,
        token_service=token_service,
        identity_service_factory=identity_service.provider,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    logout_use_case = providers.Factory(
        LogoutUseCase,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    set_password_use_case = providers.Factory(
        SetPasswordUseCase,
        identity_service_factory=identity_service.provider,
    )

    list_sessions_use_case = providers.Factory(
        ListSessionsUseCase,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    get_current_user_use_case = providers.Factory(
        GetCurrentUserUseCase,
        identity_service_factory=identity_service.provider,
    )

    ban_user_use_case = providers.Factory(
        BanUserUseCase,
        identity_service_factory=identity_service.provider,
        refresh_token_store_factory=refresh_token_store.provider,
    )

    unban_user_use_case = providers.Factory(
        UnbanUserUseCase,
        identity_service_factory=identity_service.provider,
    )

    assign_role_use_case = providers.Factory(
        AssignRoleUseCase,
        identity_service_factory=identity_service.provider,
    )

    cleanup_tokens_use_case = providers.Factory(
        CleanupTokensUseCase,
        refresh_token_repository_factory=refresh_token_repository_factory.provider,
        revoked_token_repository_factory=revoked_token_repository_factory.provider,
        retention_days=providers.Callable(lambda config: config.retention_days, refresh_token_settings),
    )

# Global container instance
container = Container()

def get_container() -> Container:
    """
    Get the global container instance.

    Used as a FastAPI dependency:
        container: Container = Depends(get_container)
    """
    return container

def reset_container():
    """
    Reset container for testing.

    Clears all singletons and allows fresh initialization.
    """
    container.reset_singletons()
