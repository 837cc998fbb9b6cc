"""
FastAPI dependencies for dependency injection.

Bridges FastAPI's dependency system and the application's DI container:
each use case gets a request-scoped session.
"""

from typing import Callable
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .container import get_container, Container
from .models import db_helper
from .interfaces.services import ITokenService

from .use_cases.register import RegisterUseCase
from .use_cases.login import LoginUseCase
from .use_cases.google_login import GoogleLoginUseCase
from .use_cases.refresh_token import RefreshTokenUseCase
from .use_cases.logout import LogoutUseCase
from .use_cases.set_password import SetPasswordUseCase
from .use_cases.list_sessions import ListSessionsUseCase, GetCurrentUserUseCase
from .use_cases.manage_users import BanUserUseCase, UnbanUserUseCase, AssignRoleUseCase


def create_use_case_dependency(use_case_factory: Callable) -> Callable:
    """
    Build a FastAPI dependency that resolves a use case with a scoped session.

    Example:
        get_my_use_case = create_use_case_dependency(
            lambda container, session: container.my_use_case(session=session)
        )
    """

    def dependency(
        session: AsyncSession = Depends(db_helper.scoped_session_dependency),
        container: Container = Depends(get_container),
    ):
        return use_case_factory(container, session)

    return dependency


# ============================================================================
# Use Case Dependencies
# ============================================================================


def get_register_use_case(
    session: AsyncSession = Depends(db_helper.scoped_session_dependency),
    container: Container = Depends(get_container),
) -> RegisterUseCase:
    return container.register_use_case(session=session)


def get_login_use_case(
    session: AsyncSession = Depends(db_helper.scoped_session_dependency),
    container: Container = Depends(get_container),
) -> LoginUseCase:
    return container.login_use_case(session=session)


def get_google_login_use_case(
    session: AsyncSession = Depends(db_helper.scoped_session_dependency),
    container: Container = Depends(get_container),
) -> GoogleLoginUseCase:
    return container.google_login_use_case(session=session)


def get_refresh_token_use_case(
    session: AsyncSession = Depends(db_helper.scoped_session_dependency),
    container: Container = Depends(get_container),
) -> RefreshTokenUseCase:
    """
    Provide RefreshTokenUseCase with all dependencies injected.

    Usage in endpoint:
        async def refresh(
            use_case: RefreshTokenUseCase = Depends(get_refresh_token_use_case)
        ):
            result = await use_case.execute(command)
    """
    return container.refresh_token_use_case(session=session)


def get_logout_use_case(
    session: AsyncSession = Depends(db_helper.scoped_session_dependency),
    container: Container = Depends(get_container),
) -> LogoutUseCase:
    return container.logout_use_case(session=session)


get_set_password_use_case = create_use_case_dependency(
    lambda container, session: container.set_password_use_case(session=session)
)
get_list_sessions_use_case = create_use_case_dependency(
    lambda container, session: container.list_sessions_use_case(session=session)
)
get_current_user_use_case = create_use_case_dependency(
    lambda container, session: container.get_current_user_use_case(session=session)
)
get_ban_user_use_case = create_use_case_dependency(
    lambda container, session: container.ban_user_use_case(session=session)
)
get_unban_user_use_case = create_use_case_dependency(
    lambda container, session: container.unban_user_use_case(session=session)
)
get_assign_role_use_case = create_use_case_dependency(
    lambda container, session: container.assign_role_use_case(session=session)
)


# ============================================================================
# Service Dependencies
# ============================================================================


def get_token_service(container: Container = Depends(get_container)) -> ITokenService:
    """Provide the JWT token service from the DI container."""
    return container.token_service()
