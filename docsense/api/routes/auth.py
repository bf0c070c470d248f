"""Account endpoints - register, login, me, logout, change-password."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from docsense.api.deps import AUTH_COOKIE, CurrentUser, ServicesDep
from docsense.errors import AuthFailed
from docsense.models.users import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str = ""
    name: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ChangePasswordRequest(BaseModel):
    """Body for POST /auth/change-password (accepts camelCase)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: str
    new_password: str


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str | None = None


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, services: ServicesDep) -> AuthResponse:
    """Create an account."""
    user = await services.accounts.register(body.email, body.name, body.password)
    return AuthResponse(message="User created successfully", user=user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, response: Response, services: ServicesDep) -> AuthResponse:
    """Check credentials and issue a token (also set as an httponly cookie)."""
    if not body.email or not body.password:
        raise AuthFailed("Email and password are required")

    user = await services.accounts.authenticate(body.email, body.password)
    if user is None:
        raise AuthFailed("Invalid email or password")

    token = services.tokens.create_access_token(user)
    response.set_cookie(
        AUTH_COOKIE,
        token,
        max_age=services.tokens.max_age_seconds,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(message="Login successful", user=user, token=token)


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser) -> UserResponse:
    """Current user."""
    return user


@router.post("/logout")
async def logout(response: Response) -> dict[str, str]:
    response.delete_cookie(AUTH_COOKIE)
    return {"message": "Logged out"}


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    body: ChangePasswordRequest, user: CurrentUser, services: ServicesDep
) -> Response:
    """Replace the caller's password."""
    await services.accounts.change_password(user.id, body.current_password, body.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
