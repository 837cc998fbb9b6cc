"""Identity and session endpoints."""

from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from identity.dependencies import (
    get_assign_role_use_case,
    get_ban_user_use_case,
    get_current_user_use_case,
    get_google_login_use_case,
    get_list_sessions_use_case,
    get_login_use_case,
    get_logout_use_case,
    get_refresh_token_use_case,
    get_register_use_case,
    get_set_password_use_case,
    get_unban_user_use_case,
)
from identity.schemas import (
    AssignRoleCommand,
    AuthTokenResult,
    BanUserCommand,
    CurrentUser,
    GoogleLoginCommand,
    GoogleLoginResult,
    LoginCommand,
    LogoutCommand,
    RefreshTokenCommand,
    RegisterCommand,
    RegisterResult,
    SessionInfo,
    SetPasswordCommand,
)
from identity.schemas.tokens import AccessTokenClaims
from identity.use_cases import (
    AssignRoleUseCase,
    BanUserUseCase,
    GetCurrentUserUseCase,
    GoogleLoginUseCase,
    ListSessionsUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUseCase,
    SetPasswordUseCase,
    UnbanUserUseCase,
)

from .security import require_admin, require_member, require_super_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResult, status_code=status.HTTP_201_CREATED)
async def register(
    command: RegisterCommand,
    use_case: RegisterUseCase = Depends(get_register_use_case),
) -> RegisterResult:
    return await use_case.execute(command)


@router.post("/login", response_model=AuthTokenResult)
async def login(
    command: LoginCommand,
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> AuthTokenResult:
    return await use_case.execute(command)


@router.post("/google", response_model=GoogleLoginResult)
async def google_login(
    command: GoogleLoginCommand,
    use_case: GoogleLoginUseCase = Depends(get_google_login_use_case),
) -> GoogleLoginResult:
    """Sign in with a Google ID token, creating the account on first use."""
    return await use_case.execute(command)


@router.post("/refresh", response_model=AuthTokenResult)
async def refresh(
    command: RefreshTokenCommand,
    use_case: RefreshTokenUseCase = Depends(get_refresh_token_use_case),
) -> AuthTokenResult:
    """
    Exchange a refresh token for a new pair.

    The presented refresh token is revoked; replaying it afterwards fails.
    """
    return await use_case.execute(command)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    command: LogoutCommand,
    use_case: LogoutUseCase = Depends(get_logout_use_case),
) -> Response:
    await use_case.execute(command.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/set-password", status_code=status.HTTP_204_NO_CONTENT)
async def set_password(
    command: SetPasswordCommand,
    claims: AccessTokenClaims = Depends(require_member),
    use_case: SetPasswordUseCase = Depends(get_set_password_use_case),
) -> Response:
    await use_case.execute(claims.user_id, command)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentUser)
async def me(
    claims: AccessTokenClaims = Depends(require_member),
    use_case: GetCurrentUserUseCase = Depends(get_current_user_use_case),
) -> CurrentUser:
    return await use_case.execute(claims.user_id)


@router.get("/sessions", response_model=List[SessionInfo])
async def list_sessions(
    claims: AccessTokenClaims = Depends(require_member),
    use_case: ListSessionsUseCase = Depends(get_list_sessions_use_case),
) -> List[SessionInfo]:
    return await use_case.execute(claims.user_id)


@router.post("/users/{user_id}/ban", status_code=status.HTTP_204_NO_CONTENT)
async def ban_user(
    command: BanUserCommand,
    user_id: uuid.UUID = Path(..., description="Account to ban"),
    claims: AccessTokenClaims = Depends(require_admin),
    use_case: BanUserUseCase = Depends(get_ban_user_use_case),
) -> Response:
    await use_case.execute(user_id, command, initiator=str(claims.user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/users/{user_id}/unban", status_code=status.HTTP_204_NO_CONTENT)
async def unban_user(
    user_id: uuid.UUID = Path(..., description="Account to unban"),
    claims: AccessTokenClaims = Depends(require_admin),
    use_case: UnbanUserUseCase = Depends(get_unban_user_use_case),
) -> Response:
    await use_case.execute(user_id, initiator=str(claims.user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/users/{user_id}/roles", status_code=status.HTTP_204_NO_CONTENT)
async def assign_role(
    command: AssignRoleCommand,
    user_id: uuid.UUID = Path(..., description="Account receiving the role"),
    claims: AccessTokenClaims = Depends(require_super_admin),
    use_case: AssignRoleUseCase = Depends(get_assign_role_use_case),
) -> Response:
    added = await use_case.execute(user_id, command)
    logger.info(
        "Role assignment requested | initiator=%s | user_id=%s | role=%s | added=%s",
        claims.user_id,
        user_id,
        command.role,
        added,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
