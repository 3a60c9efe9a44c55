from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from shortlink.core.modules.user.models import UserView
from shortlink.web.deps import AppDep, SessionValuesDep
from shortlink.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    """Email and password."""

    email: str = Field(..., description="Email address, used as the login key")
    password: str = Field(..., description="Password")


class LoginResponse(BaseModel):
    """Authentication response."""

    user_id: int = Field(..., description="ID of the authenticated user")
    expiry_instant: int = Field(..., description="Unix time at which the session expires")


@router.post(
    "/auth/register",
    summary="Register user",
    description="Create a user account. The username is the local part of the email address.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid email or password"},
        409: {"model": ErrorResponse, "description": "User already exists"},
    },
)
async def register(data: CredentialsRequest, app: AppDep) -> UserView:
    return await app.register(data.email, data.password)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password. The session is returned in a signed cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Already logged in"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(data: CredentialsRequest, app: AppDep, session_values: SessionValuesDep, request: Request) -> LoginResponse:
    """Authenticate user and create session."""
    token = await app.login(session_values, data.email, data.password)

    request.session.clear()
    request.session.update(token.to_cookie())

    return LoginResponse(user_id=token.user_id, expiry_instant=token.expiry_instant)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current session and expire the session cookie.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
    },
)
async def logout(app: AppDep, session_values: SessionValuesDep, request: Request) -> None:
    await app.logout(session_values)
    request.session.clear()
