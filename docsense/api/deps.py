"""Request dependencies: service lookup and current-user resolution."""

from typing import Annotated

from fastapi import Cookie, Depends, Header, HTTPException, Request, status

from docsense.models.users import UserResponse
from docsense.services import Services

AUTH_COOKIE = "auth-token"


def get_services(request: Request) -> Services:
    """Service container attached to the app at startup."""
    return request.app.state.services  # type: ignore[no-any-return]


ServicesDep = Annotated[Services, Depends(get_services)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    services: ServicesDep,
    authorization: Annotated[str | None, Header()] = None,
    auth_token: Annotated[str | None, Cookie(alias=AUTH_COOKIE)] = None,
) -> UserResponse:
    """Resolve the caller from a Bearer header or the auth cookie.

    Args:
        services: Service container
        authorization: Authorization header (e.g., "Bearer <token>")
        auth_token: Token cookie set by /auth/login

    Returns:
        The authenticated, active user

    Raises:
        HTTPException: 401 if no valid token identifies an active user
    """
    token = auth_token
    if authorization:
        if not authorization.startswith("Bearer "):
            raise _unauthorized("Invalid authorization header format")
        token = authorization[7:]  # Strip "Bearer "

    if not token:
        raise _unauthorized("Authentication required")

    user_id = services.tokens.decode_user_id(token)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")

    user = await services.accounts.get_user_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found or inactive")

    return user


CurrentUser = Annotated[UserResponse, Depends(get_current_user)]
