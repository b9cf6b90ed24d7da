"""
Todo API - Authentication Router

Endpoints for user registration and login.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from todo_api.auth.dependencies import get_auth_service
from todo_api.auth.schemas import (
    UserRegisterRequest,
    UserLoginRequest,
    TokenResponse,
    MessageResponse,
)
from todo_api.auth.service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: UserRegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """
    Register a new user with username and password.

    Returns 400 if either field is missing or the username is taken.
    """
    await auth_service.register(username=request.username, password=request.password)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and get access token",
)
async def login(
    request: UserLoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate user and return a signed token valid for one day.

    Use the returned token in the Authorization header:
    `Authorization: Bearer <token>`
    """
    return await auth_service.login(username=request.username, password=request.password)
